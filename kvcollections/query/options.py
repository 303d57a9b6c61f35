"""
Find Options

The options object accepted by find, find_one and delete.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Union

from .operators import Operator, compose_predicate


@dataclass
class FindOptions:
    """
    A where clause plus the operator that joins its fields.

    Attributes:
        where: Mapping of field name to expected value
        operator: How the fields are combined (AND, OR, NOT, NOT_AND, NOT_OR)
    """
    where: Dict[str, Any] = field(default_factory=dict)
    operator: Operator = Operator.AND

    def __post_init__(self):
        if not isinstance(self.where, Mapping):
            raise TypeError(f"where must be a mapping, got {type(self.where).__name__}")
        self.where = dict(self.where)
        self.operator = Operator.parse(self.operator)

    @classmethod
    def by_id(cls, identity: Any) -> "FindOptions":
        """Match records whose id field equals identity."""
        return cls(where={"id": identity}, operator=Operator.AND)

    @classmethod
    def coerce(cls, value: Union["FindOptions", Mapping[str, Any]]) -> "FindOptions":
        """Accept FindOptions or a {"where": ..., "operator": ...} mapping."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            if "where" not in value:
                raise TypeError("find options need a where clause")
            unknown = set(value) - {"where", "operator"}
            if unknown:
                raise TypeError(f"unknown find options: {sorted(unknown)}")
            return cls(where=value["where"] or {}, operator=value.get("operator"))
        raise TypeError(f"expected find options, got {type(value).__name__}")

    @classmethod
    def from_id_or_options(cls, value: Any) -> "FindOptions":
        """
        Accept either options or a bare identity value.

        Anything that is not FindOptions or a mapping is treated as an
        identity value and matched against the id field.
        """
        if isinstance(value, (cls, Mapping)):
            return cls.coerce(value)
        return cls.by_id(value)

    def predicate(self):
        """Return the record test function for these options."""
        return compose_predicate(self.where, self.operator)
