"""Advanced search mini-language.

    protocol:hls AND NOT codec:hevc
    "dolby vision" OR hdr10
    bunny host:example.com

Tokens are whitespace-separated; a double-quoted span stays one token.
Recognised, left to right:

  NOT <token>     negates the following field or term match
  field:value     substring match on one field (see FIELDS)
  "phrase"        case-insensitive exact match against any field value
  AND / OR        switch how the next results are combined
  anything else   substring match against any field value

Evaluation is a linear scan: the running result starts True and each
predicate is folded in with the current AND/OR mode. There is no operator
precedence and no grouping, so ``a OR b AND c`` means ``(a OR b) AND c``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from vidcat.catalog.models import Asset

# Field name → canonical field; plural spellings are accepted.
FIELDS: dict[str, str] = {
    "category": "category",
    "protocol": "protocol",
    "protocols": "protocol",
    "codec": "codec",
    "codecs": "codec",
    "host": "host",
    "hdr": "hdr",
    "container": "container",
    "resolution": "resolution",
    "feature": "features",
    "features": "features",
    "notes": "notes",
}

_TOKEN_RE = re.compile(r'(?:[^\s"]+|"[^"]*")+')


@dataclass(frozen=True)
class Operator:
    type: str  # AND | OR | FIELD | EXACT | TERM
    value: str
    field: str | None = None
    negate: bool = False

    @property
    def is_logic(self) -> bool:
        return self.type in ("AND", "OR")


def tokenize_query(query: str) -> list[str]:
    return _TOKEN_RE.findall(query)


def _field_operator(token: str, negate: bool = False) -> Operator:
    field, _, value = token.partition(":")
    return Operator(type="FIELD", field=field.lower(), value=value.replace('"', ""), negate=negate)


def parse_query(query: str) -> list[Operator]:
    """Parse *query* into a flat operator list (empty for a blank query)."""
    tokens = tokenize_query(query)
    operators: list[Operator] = []

    i = 0
    while i < len(tokens):
        token = tokens[i]
        upper = token.upper()

        if upper == "NOT" and i + 1 < len(tokens):
            operand = tokens[i + 1]
            if ":" in operand:
                operators.append(_field_operator(operand, negate=True))
            else:
                operators.append(Operator(type="TERM", value=operand.replace('"', ""), negate=True))
            i += 2
            continue

        if ":" in token:
            operators.append(_field_operator(token))
        elif len(token) >= 2 and token.startswith('"') and token.endswith('"'):
            operators.append(Operator(type="EXACT", value=token[1:-1]))
        elif upper in ("AND", "OR"):
            operators.append(Operator(type=upper, value=token))
        else:
            operators.append(Operator(type="TERM", value=token))
        i += 1

    return operators


def _field_values(asset: Asset, field: str) -> list[str]:
    canonical = FIELDS.get(field)
    if canonical is None:
        return []
    if canonical == "protocol":
        return list(asset.protocol)
    if canonical == "codec":
        return list(asset.codec)
    if canonical == "features":
        return list(asset.features)
    if canonical == "resolution":
        return [asset.resolution.label] if asset.resolution else []
    value = getattr(asset, canonical)
    return [value] if value else []


def matches_operator(asset: Asset, op: Operator) -> bool:
    """Evaluate one non-logic operator; unknown fields never match."""
    needle = op.value.lower()

    if op.type == "FIELD":
        hit = any(needle in v.lower() for v in _field_values(asset, op.field or ""))
    elif op.type == "EXACT":
        hit = any(v.lower() == needle for v in asset.searchable_values())
    elif op.type == "TERM":
        hit = any(needle in v.lower() for v in asset.searchable_values())
    else:
        hit = False

    return not hit if op.negate else hit


def evaluate(asset: Asset, operators: list[Operator]) -> bool:
    result = True
    mode = "AND"
    for op in operators:
        if op.is_logic:
            mode = op.type
            continue
        hit = matches_operator(asset, op)
        result = (result and hit) if mode == "AND" else (result or hit)
    return result


def filter_by_query(assets: Iterable[Asset], query: str) -> list[Asset]:
    """Assets matching the advanced *query*; everything for a blank query."""
    assets = list(assets)
    operators = parse_query(query) if query.strip() else []
    if not operators:
        return assets
    return [a for a in assets if evaluate(a, operators)]
