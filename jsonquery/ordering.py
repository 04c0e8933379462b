"""
Order Resolver

Parses sort tokens into structured OrderTerm values.

Token grammar:
    token := ["-"] ["$"] path ["$"]
    path  := segment ["." segment]

- A leading "-" sorts descending, anything else ascending.
- "$...$" marks a column of a joined relation: "$pictures.age$".
- Only qualified tokens whose relation resolves in the model registry carry a
  relation qualifier; everything else falls back to a plain column sort.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from . import diagnostics as diag

DESC_SIGIL = "-"
QUALIFIER_SIGIL = "$"
PATH_SEPARATOR = "."

# Leading sigil run, path body, trailing sigil run
_TOKEN_RE = re.compile(r"\A(?P<lead>[-$]*)(?P<path>.*?)(?P<trail>[-$]*)\Z", re.DOTALL)


class Direction(str, Enum):
    """Sort direction."""
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class RelationQualifier:
    """Points an order term at a joined relation's column."""
    key: str  # Registry key the relation resolved under
    alias: str  # Alias of the joined relation in the query
    model: Any  # Opaque relation handle from the registry

    def to_dict(self) -> dict:
        return {"key": self.key, "as": self.alias}


@dataclass(frozen=True)
class OrderTerm:
    """A single ORDER BY entry."""
    column: str
    direction: Direction = Direction.ASC
    relation: Optional[RelationQualifier] = None

    def to_list(self) -> list:
        """Executor form: [column, dir] or [{model, as}, column, dir]."""
        term: list = [self.column, self.direction.value]
        if self.relation is not None:
            term.insert(0, {"model": self.relation.model, "as": self.relation.alias})
        return term

    def to_dict(self) -> dict:
        result = {"column": self.column, "direction": self.direction.value}
        if self.relation is not None:
            result["relation"] = self.relation.to_dict()
        return result


@dataclass(frozen=True)
class ParsedToken:
    """Result of parsing one raw sort token, before registry lookup."""
    column: str
    direction: Direction
    qualified: bool
    relation_key: Optional[str] = None


def parse_order_token(token: str) -> ParsedToken:
    """
    Parse a raw sort token.

    "-age"           -> column=age, DESC
    "$pictures.age$" -> column=age, relation_key=pictures, qualified
    "pictures.age"   -> column=age, relation_key=pictures, not qualified
    """
    direction = Direction.DESC if token.startswith(DESC_SIGIL) else Direction.ASC
    qualified = QUALIFIER_SIGIL in token

    path = _TOKEN_RE.match(token).group("path")
    segments = path.split(PATH_SEPARATOR, 1)

    if len(segments) == 2:
        relation_key, column = segments
    else:
        relation_key, column = None, segments[0]

    return ParsedToken(
        column=column,
        direction=direction,
        qualified=qualified,
        relation_key=relation_key,
    )


def resolve_order(
    tokens: Iterable[Any],
    registry,
    diagnostics: Optional[list] = None,
    path: str = "orderBy",
) -> list[OrderTerm]:
    """
    Resolve raw sort tokens into OrderTerms, in input order.

    Args:
        tokens: Raw sort tokens; empty and non-string entries are skipped
        registry: Model registry used to resolve relation qualifiers
        diagnostics: Optional list collecting degraded/dropped tokens
        path: Input path used in diagnostics

    Returns:
        List of OrderTerm. Never raises for malformed tokens.
    """
    terms = []

    for i, token in enumerate(tokens):
        if not isinstance(token, str) or token == "":
            continue

        parsed = parse_order_token(token)
        if not parsed.column:
            diag.record(
                diagnostics, diag.INVALID_ORDER_TOKEN, f"{path}[{i}]",
                f"Sort token '{token}' has no column",
            )
            continue

        relation = None
        if parsed.qualified and parsed.relation_key is not None:
            model = registry.resolve(parsed.relation_key)
            if model is not None:
                relation = RelationQualifier(
                    key=parsed.relation_key,
                    alias=parsed.relation_key,
                    model=model,
                )
            else:
                diag.record(
                    diagnostics, diag.UNRESOLVED_RELATION, f"{path}[{i}]",
                    f"Unknown relation '{parsed.relation_key}', sorting by '{parsed.column}' unqualified",
                    validRelationships=registry.keys(),
                )

        terms.append(OrderTerm(column=parsed.column, direction=parsed.direction, relation=relation))

    return terms
