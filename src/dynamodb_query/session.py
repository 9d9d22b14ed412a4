"""Interactive read session for DynamoDB Query Tool.

A session walks a fixed sequence of steps:

    select table -> select operation -> describe table -> select index
    -> [build predicate, Query only] -> paginate

Each step returns a new ``SessionState``; nothing decided earlier is changed
later in the run.
"""

import sys
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional

from .formatters import format_page
from .pagination import Page, read_all
from .predicate import QueryPredicate, build_predicate
from .schema import IndexChoice, TableDescriptor, choices_by_label, list_choices
from .utils import debug_print


class Operation(Enum):
    QUERY = "Query"
    SCAN = "Scan"


@dataclass(frozen=True)
class SessionState:
    table_name: Optional[str] = None
    operation: Optional[Operation] = None
    descriptor: Optional[TableDescriptor] = None
    choice: Optional[IndexChoice] = None
    predicate: Optional[QueryPredicate] = None


@dataclass(frozen=True)
class ReadRequest:
    """Everything a Scan or Query call needs apart from the cursor."""

    table_name: str
    limit: int
    index_name: Optional[str] = None
    predicate: Optional[QueryPredicate] = None

    @classmethod
    def from_state(cls, state: SessionState, limit: int) -> "ReadRequest":
        return cls(
            table_name=state.table_name,
            limit=limit,
            index_name=state.choice.index_name if state.choice else None,
            predicate=state.predicate,
        )

    def to_params(self, cursor: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Render boto3 keyword arguments for a call starting at cursor"""
        params: Dict[str, Any] = {"TableName": self.table_name, "Limit": self.limit}
        if self.index_name is not None:
            params["IndexName"] = self.index_name
        if self.predicate is not None:
            params["KeyConditionExpression"] = self.predicate.key_condition_expression
            params["ExpressionAttributeNames"] = self.predicate.attribute_names
            params["ExpressionAttributeValues"] = self.predicate.attribute_values
        if cursor:
            params["ExclusiveStartKey"] = cursor
        return params


class InteractiveSession:
    """Drive one interactive Scan or Query against a DynamoDBStore."""

    def __init__(
        self,
        store,
        prompter,
        page_size: int = 25,
        table_name: Optional[str] = None,
        output_format: str = "json",
        out=None,
    ) -> None:
        self.store = store
        self.prompter = prompter
        self.page_size = page_size
        self.table_name = table_name
        self.output_format = output_format
        self.out = out if out is not None else sys.stdout

    def select_table(self, state: SessionState) -> SessionState:
        if self.table_name:
            debug_print(f"Using table from options: {self.table_name}")  # pragma: no mutate
            return replace(state, table_name=self.table_name)
        tables = self.store.list_tables()
        if not tables:
            raise ValueError("No tables found")
        return replace(state, table_name=self.prompter.select("Pick a table", tables))

    def select_operation(self, state: SessionState) -> SessionState:
        answer = self.prompter.select("Type of operation", [op.value for op in Operation])
        return replace(state, operation=Operation(answer))

    def describe_table(self, state: SessionState) -> SessionState:
        return replace(state, descriptor=self.store.describe_table(state.table_name))

    def select_index(self, state: SessionState) -> SessionState:
        by_label = choices_by_label(list_choices(state.descriptor))
        label = self.prompter.select("Pick an index", list(by_label))
        debug_print(f"Selected {label}")  # pragma: no mutate
        return replace(state, choice=by_label[label])

    def build_predicate(self, state: SessionState) -> SessionState:
        predicate = build_predicate(
            state.choice.key_schema, state.descriptor.attribute_type, self.prompter
        )
        debug_print(
            f"Key condition: {predicate.key_condition_expression} "
            f"names={predicate.attribute_names} values={predicate.attribute_values}"
        )  # pragma: no mutate
        return replace(state, predicate=predicate)

    def paginate(self, state: SessionState) -> int:
        request = ReadRequest.from_state(state, self.page_size)
        if state.operation is Operation.QUERY:
            read = self.store.query
        else:
            read = self.store.scan

        def execute_request(cursor) -> Page:
            return read(request.to_params(cursor))

        def show_page(items):
            print(format_page(items, self.output_format), file=self.out)

        def confirm_more():
            return self.prompter.confirm("There are more items available, load more?", default=True)

        return read_all(execute_request, show_page, confirm_more)

    def run(self) -> SessionState:
        """Run every step in order and return the final state"""
        state = SessionState()
        state = self.select_table(state)
        state = self.select_operation(state)
        state = self.describe_table(state)
        state = self.select_index(state)
        if state.operation is Operation.QUERY:
            state = self.build_predicate(state)
        pages = self.paginate(state)
        debug_print(f"Session finished after {pages} page(s)")  # pragma: no mutate
        return state
