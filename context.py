"""
Query Context - model registry and the once-prepared context object

This module provides the single source of truth for the relation registry
and filter translator shared by every compiled query. The context is built
once by ContextProvider.prepare() and passed explicitly to collaborators.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

from config import QuerySettings
from jsonquery.exceptions import ContextNotPreparedError
from jsonquery.translator import default_translator

logger = logging.getLogger(__name__)


class ModelRegistry:
    """
    Read-only mapping from relation key to an opaque relation handle.

    The source is either a mapping or a zero-argument callable returning one.
    Unknown keys resolve to None. Errors raised by a callable source propagate.
    """

    def __init__(self, source: Union[Mapping[str, Any], Callable[[], Mapping[str, Any]], None] = None):
        if source is None:
            source = {}
        if isinstance(source, Mapping):
            source = MappingProxyType(dict(source))
        self._source = source

    def _models(self) -> Mapping[str, Any]:
        if callable(self._source):
            return self._source() or {}
        return self._source

    def resolve(self, key: Any) -> Optional[Any]:
        """Look up a relation handle; None for unknown or non-string keys"""
        if not isinstance(key, str) or not key:
            return None
        return self._models().get(key)

    def keys(self) -> list[str]:
        return list(self._models().keys())

    def __contains__(self, key: Any) -> bool:
        return self.resolve(key) is not None

    def __len__(self) -> int:
        return len(self._models())


@dataclass(frozen=True)
class QueryContext:
    """Everything a compiled query needs besides its own spec"""
    registry: ModelRegistry = field(default_factory=ModelRegistry)
    translator: Any = default_translator
    settings: QuerySettings = field(default_factory=QuerySettings.defaults)


class PrepareStatus(str, Enum):
    PREPARED = "prepared"
    ALREADY_INITIALIZED = "already_initialized"


@dataclass(frozen=True)
class PrepareResult:
    status: PrepareStatus
    context: QueryContext

    @property
    def prepared(self) -> bool:
        return self.status == PrepareStatus.PREPARED


class ContextProvider:
    """
    Builds the QueryContext exactly once.

    Usage:
        provider = ContextProvider()
        result = provider.prepare({"pictures": init_pictures, "users": init_users})
        query = JsonQuery(request_config, result.context)
    """

    def __init__(self):
        self._context: Optional[QueryContext] = None

    def prepare(
        self,
        models: Mapping[str, Callable[[dict], Any]],
        model_config: Optional[dict] = None,
        settings: Optional[QuerySettings] = None,
        translator: Any = None,
    ) -> PrepareResult:
        """
        Register relation handles and build the context.

        Args:
            models: Relation key -> factory called with model_config, returning the handle
            model_config: Options passed to every factory
            settings: Compiler settings (default: loaded from the environment)
            translator: Filter translator (default: JsonFilterTranslator)

        Returns:
            PrepareResult; status is ALREADY_INITIALIZED (with the existing
            context) when prepare() has been called before.
        """
        if self._context is not None:
            logger.warning("Query context already initialized")
            return PrepareResult(PrepareStatus.ALREADY_INITIALIZED, self._context)

        model_config = model_config or {}
        handles: dict[str, Any] = {}
        associations = []

        # Create handles
        for name, init_model in models.items():
            handle = init_model(model_config)
            handles[name] = handle
            if callable(getattr(handle, "associate", None)):
                associations.append(handle.associate)

        registry = ModelRegistry(handles)

        # Create relations once every handle exists
        for associate in associations:
            associate(registry)

        self._context = QueryContext(
            registry=registry,
            translator=translator or default_translator,
            settings=settings or QuerySettings.from_environment(),
        )
        logger.info(f"✅ Query context prepared with {len(handles)} models")
        return PrepareResult(PrepareStatus.PREPARED, self._context)

    @property
    def is_prepared(self) -> bool:
        return self._context is not None

    @property
    def context(self) -> QueryContext:
        if self._context is None:
            raise ContextNotPreparedError("Query context not prepared. Call prepare() first.")
        return self._context
