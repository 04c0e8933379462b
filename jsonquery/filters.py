"""
Filter Composer

Combines the caller's base predicate, the request filter and the mandatory
access-control filter into one conjunction.

The result is always And((base?, filter, additional_filter)) with every operand
kept as a separate list entry. The access-control filter can therefore never
be overridden or weakened by anything the request filter contains.
"""

from typing import Any, Mapping, Optional

from .predicates import And


def translate_filter(expression: Any, translator) -> Any:
    """Translate a filter expression; a missing expression means always-true."""
    if expression is None:
        expression = {}
    return translator.translate(expression)


def compose_where(
    base_where: Optional[Any],
    filter_expression: Any,
    additional_filter: Any,
    translator,
) -> And:
    """
    Build the final WHERE predicate.

    Args:
        base_where: Caller-supplied predicate (or raw filter expression), optional
        filter_expression: Request filter
        additional_filter: Access-control filter, always applied
        translator: Filter translator

    Returns:
        An And node whose operands are, in order: base (when given), the
        translated filter and the translated additional filter.
    """
    operands = []

    if base_where is not None:
        # Raw filter expressions are translated; anything else is already native
        if isinstance(base_where, Mapping):
            base_where = translator.translate(base_where)
        operands.append(base_where)

    operands.append(translate_filter(filter_expression, translator))
    operands.append(translate_filter(additional_filter, translator))

    return And(tuple(operands))
