"""Table key schema inspection for DynamoDB Query Tool.

Turns a ``DescribeTable`` response into the set of key schemas an operator can
read from: the table's own primary key followed by its secondary indexes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .utils import debug_print


class ScalarType(Enum):
    """Key attribute scalar types"""

    STRING = "S"
    NUMBER = "N"
    BINARY = "B"


class ChoiceKind(Enum):
    TABLE = "Table"
    INDEX = "Index"


@dataclass(frozen=True)
class KeySchema:
    """Partition key plus optional sort key attribute names."""

    partition_key: str
    sort_key: Optional[str] = None

    @classmethod
    def from_elements(cls, elements: Sequence[Dict[str, str]]) -> "KeySchema":
        """Build from a DynamoDB ``KeySchema`` list, resolving keys by role."""
        partition_key = None
        sort_key = None
        for element in elements:
            if element["KeyType"] == "HASH":
                partition_key = element["AttributeName"]
            elif element["KeyType"] == "RANGE":
                sort_key = element["AttributeName"]
        if partition_key is None:
            raise ValueError(f"Key schema has no partition key: {list(elements)}")
        return cls(partition_key, sort_key)

    @property
    def attribute_names(self) -> List[str]:
        return [name for name in (self.partition_key, self.sort_key) if name]


@dataclass(frozen=True)
class IndexChoice:
    """Something a read can target: the table itself or one of its indexes."""

    kind: ChoiceKind
    name: str
    key_schema: KeySchema

    @property
    def index_name(self) -> Optional[str]:
        return self.name if self.kind is ChoiceKind.INDEX else None


@dataclass(frozen=True)
class TableDescriptor:
    table_name: str
    attribute_types: Tuple[Tuple[str, ScalarType], ...]
    key_schema: KeySchema
    indexes: Tuple[IndexChoice, ...] = ()

    @classmethod
    def from_description(cls, table: Dict[str, Any]) -> "TableDescriptor":
        """Parse the ``Table`` structure of a DescribeTable response.

        Global secondary indexes are listed before local ones, each group in
        the order the service returned them.
        """
        attribute_types = tuple(
            (definition["AttributeName"], ScalarType(definition["AttributeType"]))
            for definition in table.get("AttributeDefinitions", [])
        )
        indexes = []
        for group in ("GlobalSecondaryIndexes", "LocalSecondaryIndexes"):
            for index in table.get(group, []):
                indexes.append(
                    IndexChoice(
                        ChoiceKind.INDEX,
                        index["IndexName"],
                        KeySchema.from_elements(index["KeySchema"]),
                    )
                )
        debug_print(
            f"Parsed table {table['TableName']}: {len(attribute_types)} attribute definitions, "
            f"{len(indexes)} secondary indexes"
        )  # pragma: no mutate
        return cls(
            table_name=table["TableName"],
            attribute_types=attribute_types,
            key_schema=KeySchema.from_elements(table["KeySchema"]),
            indexes=tuple(indexes),
        )

    def attribute_type(self, attribute_name: str) -> ScalarType:
        """Look up the scalar type of a key attribute"""
        for name, scalar_type in self.attribute_types:
            if name == attribute_name:
                return scalar_type
        raise KeyError(f"No attribute definition for {attribute_name} in {self.table_name}")

    @property
    def table_choice(self) -> IndexChoice:
        return IndexChoice(ChoiceKind.TABLE, self.table_name, self.key_schema)


def list_choices(descriptor: TableDescriptor) -> List[IndexChoice]:
    """List the table choice first, then every secondary index."""
    return [descriptor.table_choice, *descriptor.indexes]


def label_of(choice: IndexChoice) -> str:
    """Format a choice for display.

    Examples:
        [Table] Orders: pk, sk
        [Index] byStatus: status
    """
    names = ", ".join(choice.key_schema.attribute_names)
    return f"[{choice.kind.value}] {choice.name}: {names}"


def choices_by_label(choices: Sequence[IndexChoice]) -> Dict[str, IndexChoice]:
    """Map display labels back to their choices; labels must be unique."""
    mapping: Dict[str, IndexChoice] = {}
    for choice in choices:
        label = label_of(choice)
        if label in mapping:
            raise ValueError(f"Duplicate index label: {label}")
        mapping[label] = choice
    return mapping
