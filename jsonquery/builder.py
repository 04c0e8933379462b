"""
Query Builder

Assembles the execution-ready query descriptor from a QuerySpec.

The descriptor is a plain dict consumed by the data-access layer:
    {
        "offset": 20, "limit": 10,        # only when paginating
        "order": [OrderTerm, ...] | None, # None = explicitly unordered
        "include": [ExpandDescriptor | "name", ...],
        "attributes": ["id", ...],        # only when columns were selected
        "where": And((...)),              # base AND filter AND additionalFilter
    }

Rules:
- allPage disables pagination entirely; caller-supplied offset/limit survive untouched
- Single-row fetches force order/offset/limit to None
- Caller-supplied include/attributes are extended, never overwritten by index
- A fresh dict is built on every call; neither the QuerySpec nor the base is mutated
"""

import logging
from typing import Any, Mapping, Optional

from .expands import resolve_expands
from .filters import compose_where
from .ordering import resolve_order
from .spec import QuerySpec

logger = logging.getLogger(__name__)


def _serialize(obj: Any) -> Any:
    """JSON serialization helper for descriptor values."""
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if isinstance(obj, (list, tuple)):
        return [_serialize(item) for item in obj]
    if isinstance(obj, Mapping):
        return {k: _serialize(v) for k, v in obj.items()}
    return str(obj)


class QueryBuilder:
    """Builds query descriptors from normalized query specs."""

    def __init__(self, translator):
        self.translator = translator

    def _build_pagination(self, spec: QuerySpec, query: dict, single: bool) -> None:
        """Apply offset/limit in place on the descriptor being built."""
        if spec.all_page:
            return

        if single:
            query["offset"] = None
            query["limit"] = None
            return

        if query.get("offset") is None:
            query["offset"] = spec.offset
        if query.get("limit") is None:
            query["limit"] = spec.per_page

    def build_order(self, spec: QuerySpec, registry, diagnostics: Optional[list] = None) -> list:
        """Resolve the QuerySpec's orderBy tokens."""
        return resolve_order(spec.order_by, registry, diagnostics)

    def build_include(self, spec: QuerySpec, registry, diagnostics: Optional[list] = None) -> list:
        """Resolve the QuerySpec's expands."""
        return resolve_expands(spec.expands, registry, self.translator, diagnostics)

    def build_query(
        self,
        spec: QuerySpec,
        registry,
        base: Optional[Mapping[str, Any]] = None,
        single: bool = False,
        diagnostics: Optional[list] = None,
    ) -> dict:
        """
        Build the query descriptor.

        Args:
            spec: Normalized query spec
            registry: Model registry for relation lookups
            base: Caller-supplied descriptor to extend (never mutated)
            single: Single-row fetch; order/offset/limit become None
            diagnostics: Optional list collecting dropped input entries

        Returns:
            A new descriptor dict.
        """
        query = dict(base) if base else {}

        self._build_pagination(spec, query, single)

        if single:
            query["order"] = None
        elif query.get("order") is None:
            query["order"] = self.build_order(spec, registry, diagnostics)

        query["include"] = list(query.get("include") or []) + self.build_include(spec, registry, diagnostics)

        attributes = list(query.get("attributes") or []) + list(spec.attributes)
        if attributes:
            query["attributes"] = attributes
        else:
            query.pop("attributes", None)

        query["where"] = compose_where(
            query.get("where"),
            spec.filter,
            spec.additional_filter,
            self.translator,
        )

        logger.debug(
            "Built query: offset=%s limit=%s order=%d include=%d",
            query.get("offset"), query.get("limit"),
            len(query["order"] or []), len(query["include"]),
        )
        return query

    def to_json(self, spec: QuerySpec, registry) -> dict:
        """Default list-query descriptor rendered as JSON-ready data."""
        return _serialize(self.build_query(spec, registry))
