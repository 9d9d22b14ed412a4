"""Key condition construction for DynamoDB Query Tool."""

from dataclasses import dataclass
from decimal import Decimal, DecimalException, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from boto3.dynamodb.types import DYNAMODB_CONTEXT

from .schema import KeySchema, ScalarType
from .utils import debug_print


class Comparison(Enum):
    """Sort key comparison operators, in menu order"""

    NONE = "none"
    EQ = "="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    BETWEEN = "between"
    BEGINS_WITH = "begins_with"

    @property
    def arity(self) -> int:
        """Number of operand values the comparison takes"""
        if self is Comparison.NONE:
            return 0
        if self is Comparison.BETWEEN:
            return 2
        return 1


def allowed_comparisons(scalar_type: ScalarType) -> List[Comparison]:
    """Comparisons offered for a sort key of the given type.

    ``begins_with`` only applies to string sort keys.
    """
    comparisons = [c for c in Comparison if c is not Comparison.BEGINS_WITH]
    if scalar_type is ScalarType.STRING:
        comparisons.append(Comparison.BEGINS_WITH)
    return comparisons


def coerce_value(raw: str, scalar_type: ScalarType) -> Any:
    """Convert raw user input to the Python value for a key attribute type.

    Numbers become ``Decimal`` since boto3 refuses floats, binary values are
    the UTF-8 bytes of the input and strings are passed through untouched.
    """
    if scalar_type is ScalarType.NUMBER:
        try:
            number = Decimal(raw.strip())
        except InvalidOperation:
            raise ValueError(f"Not a number: {raw!r}")
        if not number.is_finite():
            raise ValueError(f"Not a finite number: {raw!r}")
        try:
            return DYNAMODB_CONTEXT.create_decimal(number)
        except DecimalException:
            raise ValueError(f"Number out of DynamoDB range or precision: {raw!r}")
    if scalar_type is ScalarType.BINARY:
        return raw.encode("utf-8")
    return raw


@dataclass(frozen=True)
class QueryPredicate:
    """A rendered-on-demand key condition over a partition and optional sort key."""

    partition_key: str
    partition_value: Any
    sort_key: Optional[str] = None
    comparison: Comparison = Comparison.NONE
    operands: Tuple[Any, ...] = ()

    def __post_init__(self):
        if len(self.operands) != self.comparison.arity:
            raise ValueError(
                f"Comparison {self.comparison.value!r} takes {self.comparison.arity} "
                f"value(s), got {len(self.operands)}"
            )
        if self.comparison is not Comparison.NONE and self.sort_key is None:
            raise ValueError(f"Comparison {self.comparison.value!r} requires a sort key")

    @property
    def sort_expression(self) -> Optional[str]:
        if self.comparison is Comparison.NONE:
            return None
        if self.comparison is Comparison.BEGINS_WITH:
            return "begins_with(#sk, :sk)"
        if self.comparison is Comparison.BETWEEN:
            return "#sk between :sk1 and :sk2"
        return f"#sk {self.comparison.value} :sk"

    @property
    def key_condition_expression(self) -> str:
        sort_expression = self.sort_expression
        if sort_expression:
            return f"#pk = :pk and {sort_expression}"
        return "#pk = :pk"

    @property
    def attribute_names(self) -> Dict[str, str]:
        names = {"#pk": self.partition_key}
        if self.sort_expression:
            names["#sk"] = self.sort_key
        return names

    @property
    def attribute_values(self) -> Dict[str, Any]:
        values = {":pk": self.partition_value}
        if len(self.operands) == 1:
            values[":sk"] = self.operands[0]
        elif len(self.operands) == 2:
            values[":sk1"], values[":sk2"] = self.operands
        return values


def build_predicate(
    key_schema: KeySchema, attribute_type_of: Callable[[str], ScalarType], prompter
) -> QueryPredicate:
    """Ask the operator for key values and a sort key comparison"""
    partition_key = key_schema.partition_key
    partition_type = attribute_type_of(partition_key)
    raw = prompter.text(f"Partition key ({partition_key})")
    partition_value = coerce_value(raw, partition_type)

    sort_key = key_schema.sort_key
    if not sort_key:
        return QueryPredicate(partition_key, partition_value)

    sort_type = attribute_type_of(sort_key)
    menu = [c.value for c in allowed_comparisons(sort_type)]
    answer = prompter.select(
        f"Sort key ({sort_key}) comparison", menu, default=Comparison.NONE.value
    )
    comparison = Comparison(answer)
    debug_print(f"Sort key {sort_key} ({sort_type.value}) comparison: {comparison.value}")

    if comparison is Comparison.BETWEEN:
        raw_operands = [
            prompter.text(f"{sort_key} from value"),
            prompter.text(f"{sort_key} to value"),
        ]
    elif comparison.arity == 1:
        raw_operands = [prompter.text(f"{sort_key} value")]
    else:
        raw_operands = []

    operands = tuple(coerce_value(raw_operand, sort_type) for raw_operand in raw_operands)
    return QueryPredicate(partition_key, partition_value, sort_key, comparison, operands)
