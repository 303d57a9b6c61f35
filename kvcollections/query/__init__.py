"""Query module for kv-collections."""

from .operators import Operator, compose_predicate
from .options import FindOptions

__all__ = [
    "FindOptions",
    "Operator",
    "compose_predicate",
]
