"""
Expand Resolver

Normalizes eager-load entries into include descriptors.

Entries may be:
- A plain relation name: "pictures" (passed through as-is)
- A structured entry:
    {"name": "pictures", "modelName": "images", "where": {...}, "required": true,
     "limit": 5, "separate": true, "order": ["-created"], "attributes": ["id"]}

Structured entries whose relation does not resolve are dropped.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from . import diagnostics as diag
from .ordering import resolve_order


@dataclass(frozen=True)
class ExpandDescriptor:
    """A resolved eager-load instruction."""
    model: Any  # Relation handle from the registry
    alias: str  # Name the relation is loaded under ("as")
    key: str  # Registry key that resolved
    where: Optional[Any] = None
    required: Optional[bool] = None
    limit: Optional[int] = None
    separate: Optional[bool] = None
    order: Optional[tuple] = None
    attributes: Optional[Any] = None

    def _options(self) -> dict:
        options = {}
        for name in ("required", "limit", "separate"):
            value = getattr(self, name)
            if value is not None:
                options[name] = value
        return options

    def to_include(self) -> dict:
        """Executor form: {"model": handle, "as": alias, ...options}."""
        include = {"model": self.model, "as": self.alias}
        include.update(self._options())
        if self.order is not None:
            include["order"] = [term.to_list() for term in self.order]
        if self.attributes is not None:
            include["attributes"] = self.attributes
        if self.where is not None:
            include["where"] = self.where
        return include

    def to_dict(self) -> dict:
        result = {"key": self.key, "as": self.alias}
        result.update(self._options())
        if self.order is not None:
            result["order"] = [term.to_dict() for term in self.order]
        if self.attributes is not None:
            result["attributes"] = list(self.attributes) if isinstance(self.attributes, (list, tuple)) else self.attributes
        if self.where is not None:
            result["where"] = self.where.to_dict() if hasattr(self.where, "to_dict") else self.where
        return result


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _resolve_entry(
    entry: Mapping[str, Any],
    registry,
    translator,
    diagnostics: Optional[list],
    path: str,
) -> Optional[ExpandDescriptor]:
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        diag.record(diagnostics, diag.INVALID_EXPAND, path, "Expand entry requires a non-empty 'name'")
        return None

    # modelName takes precedence over name when both resolve
    model_name = entry.get("modelName")
    key = None
    model = registry.resolve(model_name) if model_name is not None else None
    if model is not None:
        key = model_name
    else:
        model = registry.resolve(name)
        if model is not None:
            key = name

    if model is None:
        diag.record(
            diagnostics, diag.UNRESOLVED_EXPAND, path,
            f"Unknown relation '{model_name or name}', expand dropped",
            validRelationships=registry.keys(),
        )
        return None

    required = entry.get("required")
    limit = entry.get("limit")
    separate = entry.get("separate")

    order = None
    raw_order = entry.get("order")
    if isinstance(raw_order, (list, tuple)):
        order = tuple(resolve_order(raw_order, registry, diagnostics, path=f"{path}.order"))
    elif raw_order is not None:
        diag.record(diagnostics, diag.INVALID_EXPAND, f"{path}.order", "Expand order must be a list, ignored")

    raw_where = entry.get("where")
    where = translator.translate(raw_where) if raw_where is not None else None

    return ExpandDescriptor(
        model=model,
        alias=name,
        key=key,
        where=where,
        required=required if isinstance(required, bool) else None,
        limit=limit if _is_int(limit) else None,
        separate=separate if isinstance(separate, bool) else None,
        order=order,
        attributes=entry.get("attributes"),
    )


def resolve_expands(
    entries: Iterable[Any],
    registry,
    translator,
    diagnostics: Optional[list] = None,
    path: str = "expands",
) -> list:
    """
    Resolve expand entries into include entries, preserving input order.

    Plain strings pass through untouched. Structured entries become
    ExpandDescriptor when their relation resolves and are dropped otherwise.
    Any other shape is dropped. Translator failures in nested `where`
    propagate to the caller.
    """
    includes = []

    for i, entry in enumerate(entries):
        entry_path = f"{path}[{i}]"
        if isinstance(entry, str):
            includes.append(entry)
        elif isinstance(entry, Mapping):
            descriptor = _resolve_entry(entry, registry, translator, diagnostics, entry_path)
            if descriptor is not None:
                includes.append(descriptor)
        else:
            diag.record(
                diagnostics, diag.INVALID_EXPAND, entry_path,
                f"Unsupported expand entry of type {type(entry).__name__}, dropped",
            )

    return includes
