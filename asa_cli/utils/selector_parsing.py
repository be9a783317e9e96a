# asa_cli/utils/selector_parsing.py
"""
Compact filter/sort expressions -> Selector pieces.

    status=ENABLED      EQUALS
    name~MyApp          CONTAINS
    name!~Test          NOT_CONTAINS
    id@1,2,3            IN (comma separated)
    budget>=100         GREATER_THAN_OR_EQUAL
    budget<=100         LESS_THAN_OR_EQUAL
    budget>100          GREATER_THAN
    budget<100          LESS_THAN

    name                ascending
    name:desc           descending (asc/ascending/desc/descending, any case)
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from asa_cli.http.errors import FilterParseError
from asa_cli.models.selector import (
    DEFAULT_LIMIT,
    Condition,
    Operator,
    OrderSpec,
    Selector,
    SelectorPagination,
    SortOrder,
)

logger = logging.getLogger(__name__)

# Checked in this order: two-char tokens before their one-char prefixes.
OPERATOR_TOKENS: Tuple[Tuple[str, Operator], ...] = (
    (">=", Operator.GREATER_THAN_OR_EQUAL),
    ("<=", Operator.LESS_THAN_OR_EQUAL),
    ("!~", Operator.NOT_CONTAINS),
    ("=", Operator.EQUALS),
    ("~", Operator.CONTAINS),
    ("@", Operator.IN),
    (">", Operator.GREATER_THAN),
    ("<", Operator.LESS_THAN),
)

_DIRECTIONS = {
    "asc": SortOrder.ASCENDING,
    "ascending": SortOrder.ASCENDING,
    "desc": SortOrder.DESCENDING,
    "descending": SortOrder.DESCENDING,
}


def parse_filter(expr: str) -> Optional[Condition]:
    """
    Parse one "<field><op><value>" expression.

    The first token in OPERATOR_TOKENS whose first occurrence sits after a
    non-empty field wins. Returns None when no token qualifies.
    """
    for token, op in OPERATOR_TOKENS:
        idx = expr.find(token)
        if idx > 0:
            field = expr[:idx]
            value = expr[idx + len(token):]
            values = value.split(",") if op is Operator.IN else [value]
            return Condition(field=field, operator=op, values=values)
    return None


def parse_filters(exprs: Iterable[str], strict: bool = False) -> List[Condition]:
    """
    Parse filter expressions in order. Unparseable ones are dropped with a
    warning, or raise FilterParseError when strict is set.
    """
    conditions: List[Condition] = []
    for expr in exprs or []:
        cond = parse_filter(expr)
        if cond is None:
            if strict:
                raise FilterParseError(expr)
            logger.warning("ignoring unparseable filter %r", expr)
            continue
        conditions.append(cond)
    return conditions


def parse_sort(expr: str) -> Optional[OrderSpec]:
    field, _, direction = expr.partition(":")
    if not field:
        return None
    order = _DIRECTIONS.get(direction.strip().lower(), SortOrder.ASCENDING)
    return OrderSpec(field=field, sort_order=order)


def parse_sorts(exprs: Iterable[str]) -> List[OrderSpec]:
    out: List[OrderSpec] = []
    for expr in exprs or []:
        spec = parse_sort(expr)
        if spec is None:
            logger.warning("ignoring sort with empty field %r", expr)
            continue
        out.append(spec)
    return out


def build_selector(
    filters: Optional[Iterable[str]] = None,
    sorts: Optional[Iterable[str]] = None,
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
    fields: Optional[List[str]] = None,
    strict: bool = False,
) -> Selector:
    if limit <= 0:
        limit = DEFAULT_LIMIT
    return Selector(
        conditions=parse_filters(filters or [], strict=strict),
        order_by=parse_sorts(sorts or []),
        fields=list(fields) if fields else None,
        pagination=SelectorPagination(offset=offset, limit=limit),
    )
