# asa_cli/output/formatter.py
from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, TextIO

from pydantic import BaseModel

from asa_cli.http.hooks import truncate
from asa_cli.models.common import Money

FORMAT_TABLE = "table"
FORMAT_JSON = "json"
FORMATS = (FORMAT_TABLE, FORMAT_JSON)

EMPTY_MESSAGE = "No results found."


@dataclass(frozen=True)
class Column:
    header: str
    field: str  # python attribute name on the model
    width: int


CAMPAIGN_COLUMNS = [
    Column("ID", "id", 12),
    Column("NAME", "name", 30),
    Column("STATUS", "status", 10),
    Column("SERVING", "serving_status", 12),
    Column("BUDGET", "budget_amount", 15),
    Column("DAILY BUDGET", "daily_budget_amount", 15),
    Column("COUNTRIES", "countries_or_regions", 15),
]

ADGROUP_COLUMNS = [
    Column("ID", "id", 12),
    Column("NAME", "name", 25),
    Column("STATUS", "status", 10),
    Column("SERVING", "serving_status", 12),
    Column("DEFAULT BID", "default_bid_amount", 15),
    Column("CPA GOAL", "cpa_goal", 12),
]

KEYWORD_COLUMNS = [
    Column("ID", "id", 12),
    Column("TEXT", "text", 30),
    Column("MATCH TYPE", "match_type", 12),
    Column("STATUS", "status", 10),
    Column("BID", "bid_amount", 12),
]

NEGATIVE_KEYWORD_COLUMNS = [
    Column("ID", "id", 12),
    Column("TEXT", "text", 30),
    Column("MATCH TYPE", "match_type", 12),
    Column("STATUS", "status", 10),
]

APP_COLUMNS = [
    Column("ADAM ID", "adam_id", 12),
    Column("APP NAME", "app_name", 30),
    Column("DEVELOPER", "developer_name", 25),
]

GEO_COLUMNS = [
    Column("ID", "id", 10),
    Column("ENTITY", "entity", 15),
    Column("NAME", "display_name", 30),
]

ACL_COLUMNS = [
    Column("ORG ID", "org_id", 12),
    Column("ORG NAME", "org_name", 30),
    Column("CURRENCY", "currency", 8),
    Column("ROLES", "role_names", 30),
]


# ---------------- helpers ----------------


def _jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True, exclude_none=True, mode="json")
    if isinstance(data, (list, tuple)):
        return [_jsonable(d) for d in data]
    return data


def cell(item: Any, field: str) -> str:
    if isinstance(item, dict):
        value = item.get(field)
    else:
        value = getattr(item, field, None)
    if value is None:
        return ""
    if isinstance(value, Money):
        return str(value)
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(str(v) for v in value) + "]"
    return str(value)


def _rows(data: Any) -> List[Any]:
    if data is None:
        return []
    if isinstance(data, (list, tuple)):
        return list(data)
    return [data]


# ---------------- renderers ----------------


def render_json(data: Any, out: TextIO) -> None:
    out.write(json.dumps(_jsonable(data), indent=2, ensure_ascii=False))
    out.write("\n")


def render_table(data: Any, columns: Sequence[Column], out: TextIO) -> None:
    rows = _rows(data)
    if not rows:
        out.write(EMPTY_MESSAGE + "\n")
        return

    def line(values: Sequence[str]) -> str:
        parts = [
            truncate(v, c.width).ljust(c.width) for v, c in zip(values, columns)
        ]
        return "  ".join(parts).rstrip()

    out.write(line([c.header for c in columns]) + "\n")
    out.write(line(["-" * c.width for c in columns]) + "\n")
    for item in rows:
        out.write(line([cell(item, c.field) for c in columns]) + "\n")


def render(
    fmt: str,
    data: Any,
    columns: Sequence[Column],
    out: Optional[TextIO] = None,
) -> None:
    """Print data as JSON or a fixed-width table. Unknown formats fall back to table."""
    out = out or sys.stdout
    if (fmt or "").lower() == FORMAT_JSON:
        render_json(data, out)
    else:
        render_table(data, columns, out)
