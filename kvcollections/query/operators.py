"""
Where-Clause Predicates

Builds the record filter used by find, find_one and delete.

Operators, for each field k with expected value v in the where clause:
    AND       -> every record[k] == v
    OR        -> at least one record[k] == v
    NOT       -> every record[k] != v          (alias NOT_AND)
    NOT_OR    -> at least one record[k] != v

An empty where clause matches every record under all four operators.
A field missing from the record never equals its expected value.
"""

from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union

Record = Mapping[str, Any]
Predicate = Callable[[Record], bool]

_MISSING = object()


class Operator(Enum):
    """Supported where-clause operators."""
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    NOT_AND = "NOT_AND"
    NOT_OR = "NOT_OR"

    @classmethod
    def parse(cls, value: Union["Operator", str, None]) -> "Operator":
        """
        Resolve an operator name, case-insensitively.

        None and unrecognized names fall back to AND.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.AND
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            return cls.AND


def _matches(record: Record, field: str, expected: Any) -> bool:
    return record.get(field, _MISSING) == expected


def compose_predicate(
        where: Optional[Mapping[str, Any]],
        operator: Union[Operator, str, None] = None,
) -> Predicate:
    """
    Build a test function for a where clause.

    Args:
        where: Mapping of field name to expected value
        operator: Operator or operator name (default AND)

    Returns:
        Callable taking a record and returning True if it satisfies the clause

    Examples:
        >>> test = compose_predicate({"id": 1}, "NOT")
        >>> test({"id": 1}), test({"id": 2})
        (False, True)
    """
    items = list((where or {}).items())
    op = Operator.parse(operator)

    if not items:
        return lambda record: True

    if op is Operator.OR:
        return lambda record: any(_matches(record, k, v) for k, v in items)
    if op in (Operator.NOT, Operator.NOT_AND):
        return lambda record: all(not _matches(record, k, v) for k, v in items)
    if op is Operator.NOT_OR:
        return lambda record: any(not _matches(record, k, v) for k, v in items)
    return lambda record: all(_matches(record, k, v) for k, v in items)
