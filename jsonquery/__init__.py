"""
JSON Query Compiler

Compiles request-controlled query descriptions (filter, pagination, sort,
expands, attributes) into execution-ready query descriptors.
Performs no I/O; execution belongs to the data-access layer.
"""

from .builder import QueryBuilder
from .exceptions import ContextNotPreparedError, JsonQueryError, TranslationError
from .expands import ExpandDescriptor, resolve_expands
from .filters import compose_where
from .ordering import Direction, OrderTerm, RelationQualifier, parse_order_token, resolve_order
from .predicates import TRUE, And, Comparison, Not, Or
from .query import JsonQuery
from .spec import QuerySpec
from .translator import FilterTranslator, JsonFilterTranslator

__all__ = [
    'QueryBuilder',
    'JsonQuery',
    'QuerySpec',
    'Direction',
    'OrderTerm',
    'RelationQualifier',
    'parse_order_token',
    'resolve_order',
    'ExpandDescriptor',
    'resolve_expands',
    'compose_where',
    'FilterTranslator',
    'JsonFilterTranslator',
    'TRUE',
    'And',
    'Or',
    'Not',
    'Comparison',
    'JsonQueryError',
    'TranslationError',
    'ContextNotPreparedError',
]
