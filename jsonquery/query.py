"""
JsonQuery

One request's query description bound to the shared query context.

    query = JsonQuery({"page": 2, "perPage": 10, "orderBy": ["-age"]}, context)
    descriptor = query.get_query()
    one = query.get_query({"where": base_where}, is_one=True)
"""

from typing import Any, Mapping, Optional

from .builder import QueryBuilder
from .ordering import resolve_order
from .spec import QuerySpec


class JsonQuery:
    """Compiles a raw query description against a QueryContext."""

    def __init__(self, config: Any = None, context=None, collect_diagnostics: Optional[bool] = None):
        if context is None:
            # Deferred: context imports config, which imports this package
            from context import QueryContext
            context = QueryContext()

        self.context = context
        settings = context.settings
        self.spec = QuerySpec.from_config(
            config,
            default_page=settings.default_page,
            default_per_page=settings.default_per_page,
        )
        self.builder = QueryBuilder(context.translator)

        if collect_diagnostics is None:
            collect_diagnostics = settings.collect_diagnostics
        self.diagnostics: Optional[list] = [] if collect_diagnostics else None

    def _diagnostics(self) -> Optional[list]:
        # Each build reports only its own drops
        if self.diagnostics is None:
            return None
        self.diagnostics = []
        return self.diagnostics

    def get_offset(self) -> int:
        return self.spec.offset

    def get_page(self) -> int:
        return self.spec.page

    def get_per_page(self) -> int:
        return self.spec.per_page

    def get_is_all_page(self) -> bool:
        return self.spec.all_page

    def get_order_by(self, tokens: Optional[list] = None) -> list:
        """Resolve `tokens` (default: the QuerySpec's orderBy) into OrderTerms."""
        if tokens is None:
            return self.builder.build_order(self.spec, self.context.registry, self._diagnostics())
        return resolve_order(tokens, self.context.registry, self._diagnostics())

    def get_include(self) -> list:
        return self.builder.build_include(self.spec, self.context.registry, self._diagnostics())

    def get_query(self, query_config: Optional[Mapping[str, Any]] = None, is_one: bool = False) -> dict:
        """Build the descriptor, extending query_config (never mutated)."""
        return self.builder.build_query(
            self.spec,
            self.context.registry,
            base=query_config,
            single=is_one,
            diagnostics=self._diagnostics(),
        )

    def to_json(self) -> dict:
        return self.builder.to_json(self.spec, self.context.registry)
