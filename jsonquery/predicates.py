"""
Predicate Tree

Backend-neutral predicate representation produced by the filter translator.
Conjunctions and disjunctions hold an ordered tuple of operands, so combining
two predicates never replaces one with the other.

Every node renders back to the $-operator wire form via to_dict() and can be
checked against an in-memory record via evaluate().
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping, Union

# Sentinel for a missing record field (distinct from an explicit None)
_MISSING = object()


def _like_to_regex(pattern: str, ignore_case: bool = False) -> re.Pattern:
    """Convert a SQL LIKE pattern (% and _ wildcards) into a compiled regex."""
    parts = []
    for ch in pattern:
        if ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    flags = re.DOTALL | (re.IGNORECASE if ignore_case else 0)
    return re.compile("^" + "".join(parts) + "$", flags)


def _lookup(record: Mapping[str, Any], field_path: str) -> Any:
    """
    Resolve a field against a record.
    "$pictures.age$" and "pictures.age" both walk into record["pictures"]["age"].
    """
    if field_path in record:
        return record[field_path]

    current: Any = record
    for part in field_path.strip("$").split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _compare(op: str, actual: Any, expected: Any) -> bool:
    if op == "eq":
        return actual == expected
    if op == "ne":
        return actual != expected
    if op == "is":
        return actual is expected
    if op == "in":
        return actual in expected
    if op == "notIn":
        return actual not in expected

    # Ordering and pattern operators never match NULL
    if actual is None:
        return False

    if op == "gt":
        return actual > expected
    if op == "gte":
        return actual >= expected
    if op == "lt":
        return actual < expected
    if op == "lte":
        return actual <= expected
    if op == "between":
        low, high = expected
        return low <= actual <= high
    if op == "notBetween":
        low, high = expected
        return not (low <= actual <= high)
    if op == "like":
        return bool(_like_to_regex(expected).match(str(actual)))
    if op == "notLike":
        return not _like_to_regex(expected).match(str(actual))
    if op == "iLike":
        return bool(_like_to_regex(expected, ignore_case=True).match(str(actual)))
    if op == "notILike":
        return not _like_to_regex(expected, ignore_case=True).match(str(actual))
    if op == "startsWith":
        return str(actual).startswith(expected)
    if op == "endsWith":
        return str(actual).endswith(expected)
    if op == "substring":
        return expected in str(actual)
    raise ValueError(f"Unsupported comparison operator '{op}'")


@dataclass(frozen=True)
class TruePredicate:
    """Always-true predicate; the translation of an empty filter."""

    def to_dict(self) -> dict:
        return {}

    def evaluate(self, record: Mapping[str, Any]) -> bool:
        return True


TRUE = TruePredicate()


@dataclass(frozen=True)
class Comparison:
    """A single field/operator/value test."""
    field: str
    op: str
    value: Any = None

    def to_dict(self) -> dict:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {self.field: {f"${self.op}": value}}

    def evaluate(self, record: Mapping[str, Any]) -> bool:
        actual = _lookup(record, self.field)
        if actual is _MISSING:
            actual = None
        return _compare(self.op, actual, self.value)


@dataclass(frozen=True)
class And:
    """Conjunction: every operand must hold."""
    operands: tuple = ()

    def to_dict(self) -> dict:
        return {"$and": [operand.to_dict() for operand in self.operands]}

    def evaluate(self, record: Mapping[str, Any]) -> bool:
        return all(operand.evaluate(record) for operand in self.operands)


@dataclass(frozen=True)
class Or:
    """Disjunction: at least one operand must hold."""
    operands: tuple = ()

    def to_dict(self) -> dict:
        return {"$or": [operand.to_dict() for operand in self.operands]}

    def evaluate(self, record: Mapping[str, Any]) -> bool:
        return any(operand.evaluate(record) for operand in self.operands)


@dataclass(frozen=True)
class Not:
    """Negation of a single operand."""
    operand: Any

    def to_dict(self) -> dict:
        return {"$not": self.operand.to_dict()}

    def evaluate(self, record: Mapping[str, Any]) -> bool:
        return not self.operand.evaluate(record)


Predicate = Union[TruePredicate, Comparison, And, Or, Not]
PREDICATE_TYPES = (TruePredicate, Comparison, And, Or, Not)


def is_predicate(value: Any) -> bool:
    """True if value is already a translated predicate node."""
    return isinstance(value, PREDICATE_TYPES)
