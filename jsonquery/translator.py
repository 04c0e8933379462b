"""
Filter Translator

Translates $-operator filter expressions into predicate trees.

Expression shape:
- Field equality shortcut: {"status": "active"}
- List shortcut (IN): {"id": [1, 2, 3]}
- Operators per field: {"age": {"$gte": 18, "$lt": 65}}
- Logical groups: {"$or": [{...}, {...}]}, {"$and": [...] | {...}}, {"$not": {...}}
- Relation columns: {"$pictures.age$": {"$gt": 3}}

An empty expression ({} or None) translates to the always-true predicate.
Structurally malformed input raises TranslationError; operator semantics
(value types, column existence) are left to the execution engine.
"""

from typing import Any, Mapping, Protocol, runtime_checkable

from .exceptions import TranslationError
from .predicates import TRUE, And, Comparison, Not, Or, Predicate, TruePredicate

# Operators that take a single scalar value
VALUE_OPERATORS = {
    "$eq": "eq",
    "$ne": "ne",
    "$gt": "gt",
    "$gte": "gte",
    "$lt": "lt",
    "$lte": "lte",
    "$is": "is",
    "$like": "like",
    "$notLike": "notLike",
    "$iLike": "iLike",
    "$notILike": "notILike",
    "$startsWith": "startsWith",
    "$endsWith": "endsWith",
    "$substring": "substring",
}

# Operators that take a list value
LIST_OPERATORS = {
    "$in": "in",
    "$notIn": "notIn",
}

# Operators that take a [low, high] pair
RANGE_OPERATORS = {
    "$between": "between",
    "$notBetween": "notBetween",
}

LOGICAL_OPERATORS = {"$and", "$or", "$not"}


@runtime_checkable
class FilterTranslator(Protocol):
    """Anything that turns a filter expression into a backend-native predicate."""

    def translate(self, expression: Any) -> Any:
        ...


def _simplify(operands: list) -> Predicate:
    """Collapse trivial conjunctions produced while walking an expression."""
    operands = [op for op in operands if not isinstance(op, TruePredicate)]
    if not operands:
        return TRUE
    if len(operands) == 1:
        return operands[0]
    return And(tuple(operands))


class JsonFilterTranslator:
    """Default translator for the $-operator filter dialect."""

    def translate(self, expression: Any) -> Predicate:
        if expression is None:
            return TRUE
        return self._translate_group(expression, "filter")

    def _translate_group(self, expression: Any, path: str) -> Predicate:
        if not isinstance(expression, Mapping):
            raise TranslationError(
                f"expected an object, got {type(expression).__name__}", path
            )

        operands = []
        for key, value in expression.items():
            if not isinstance(key, str) or not key:
                raise TranslationError(f"invalid key {key!r}", path)

            key_path = f"{path}.{key}"
            if key in LOGICAL_OPERATORS:
                operands.append(self._translate_logical(key, value, key_path))
            elif key.startswith("$") and not key.endswith("$"):
                raise TranslationError(f"unknown operator '{key}'", path)
            else:
                operands.append(self._translate_field(key, value, key_path))

        return _simplify(operands)

    def _translate_logical(self, op: str, value: Any, path: str) -> Predicate:
        if op == "$not":
            return Not(self._translate_group(value, path))

        # $and / $or accept a list of groups; $and also accepts a single group
        if isinstance(value, Mapping):
            groups = [{k: v} for k, v in value.items()]
        elif isinstance(value, (list, tuple)):
            groups = value
        else:
            raise TranslationError(
                f"'{op}' expects a list of objects, got {type(value).__name__}", path
            )

        operands = tuple(
            self._translate_group(group, f"{path}[{i}]") for i, group in enumerate(groups)
        )
        if op == "$or":
            return Or(operands)
        return And(operands)

    def _translate_field(self, field_name: str, value: Any, path: str) -> Predicate:
        if isinstance(value, (list, tuple)):
            return Comparison(field_name, "in", tuple(value))

        if not isinstance(value, Mapping):
            return Comparison(field_name, "eq", value)

        if not value:
            raise TranslationError("empty operator object", path)

        operands = []
        for op, operand in value.items():
            op_path = f"{path}.{op}"
            if op in VALUE_OPERATORS:
                if isinstance(operand, (Mapping, list, tuple)):
                    raise TranslationError(f"'{op}' expects a scalar value", op_path)
                operands.append(Comparison(field_name, VALUE_OPERATORS[op], operand))
            elif op in LIST_OPERATORS:
                if not isinstance(operand, (list, tuple)):
                    raise TranslationError(f"'{op}' expects a list", op_path)
                operands.append(Comparison(field_name, LIST_OPERATORS[op], tuple(operand)))
            elif op in RANGE_OPERATORS:
                if not isinstance(operand, (list, tuple)) or len(operand) != 2:
                    raise TranslationError(f"'{op}' expects [low, high]", op_path)
                operands.append(Comparison(field_name, RANGE_OPERATORS[op], tuple(operand)))
            elif op == "$not":
                # Field-level negation: {"$not": null} or {"$not": {"$in": [...]}}
                if isinstance(operand, Mapping):
                    operands.append(Not(self._translate_field(field_name, operand, op_path)))
                else:
                    operands.append(Not(Comparison(field_name, "is" if operand is None else "eq", operand)))
            elif op in ("$and", "$or"):
                if not isinstance(operand, (list, tuple)):
                    raise TranslationError(f"'{op}' expects a list", op_path)
                nested = tuple(
                    self._translate_field(field_name, item, f"{op_path}[{i}]")
                    for i, item in enumerate(operand)
                )
                operands.append(Or(nested) if op == "$or" else And(nested))
            else:
                raise TranslationError(f"unknown operator '{op}'", path)

        return _simplify(operands)


default_translator = JsonFilterTranslator()
