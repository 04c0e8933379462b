"""
Query Spec

Normalizes the raw request-side query description into an immutable QuerySpec.

Wire shape (all fields optional):
    {
        "filter": {...},              # request filter
        "additionalFilter": {...},    # access-control filter, always ANDed in
        "attributes": ["id", "name"], # selected columns, empty = all
        "page": 1,                    # >= 1
        "perPage": 20,                # >= 1
        "allPage": false,             # disable pagination
        "orderBy": ["-age", "$pictures.created$"],
        "expands": ["pictures", {"name": "owner", "required": true}]
    }

Normalization never fails on shape: any field of the wrong type silently
takes its default.
"""

import copy
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 20


def _is_positive_int(value: Any) -> bool:
    # bool is an int subclass but never a valid page number
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _context_default(info: ValidationInfo, name: str, fallback: int) -> int:
    context = info.context or {}
    value = context.get(name, fallback)
    return value if _is_positive_int(value) else fallback


class QuerySpec(BaseModel):
    """Normalized, immutable declarative query configuration"""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    filter: Any = Field(default=None, validate_default=True)
    additional_filter: Any = Field(default=None, alias="additionalFilter", validate_default=True)
    attributes: tuple[str, ...] = ()
    page: int = Field(default=None, validate_default=True)
    per_page: int = Field(default=None, alias="perPage", validate_default=True)
    all_page: bool = Field(default=False, alias="allPage")
    order_by: tuple[Any, ...] = Field(default=(), alias="orderBy")
    expands: tuple[Any, ...] = ()

    @field_validator('filter', 'additional_filter', mode='before')
    @classmethod
    def default_empty_filter(cls, v):
        """Missing filters mean always-true, never 'skip'"""
        if v is None:
            return {}
        return copy.deepcopy(v)

    @field_validator('page', mode='before')
    @classmethod
    def validate_page(cls, v, info: ValidationInfo):
        if _is_positive_int(v):
            return v
        return _context_default(info, 'default_page', DEFAULT_PAGE)

    @field_validator('per_page', mode='before')
    @classmethod
    def validate_per_page(cls, v, info: ValidationInfo):
        if _is_positive_int(v):
            return v
        return _context_default(info, 'default_per_page', DEFAULT_PER_PAGE)

    @field_validator('all_page', mode='before')
    @classmethod
    def validate_all_page(cls, v):
        return v if isinstance(v, bool) else False

    @field_validator('attributes', mode='before')
    @classmethod
    def validate_attributes(cls, v):
        if not isinstance(v, (list, tuple)):
            return ()
        return tuple(a for a in v if isinstance(a, str))

    @field_validator('order_by', 'expands', mode='before')
    @classmethod
    def validate_sequence(cls, v):
        if not isinstance(v, (list, tuple)):
            return ()
        return tuple(copy.deepcopy(list(v)))

    @classmethod
    def from_config(
        cls,
        config: Any = None,
        default_page: int = DEFAULT_PAGE,
        default_per_page: int = DEFAULT_PER_PAGE,
    ) -> 'QuerySpec':
        """
        Build a QuerySpec from a raw (request-controlled) configuration object.

        Args:
            config: Raw wire-shaped mapping; anything else yields all defaults
            default_page: Page used when the raw value is missing or invalid
            default_per_page: Page size used when the raw value is missing or invalid
        """
        if not isinstance(config, Mapping):
            config = {}
        return cls.model_validate(
            dict(config),
            context={'default_page': default_page, 'default_per_page': default_per_page},
        )

    @property
    def offset(self) -> int:
        """Row offset of the current page"""
        return (self.page - 1) * self.per_page
