# asa_cli/tests/test_output_formatter.py
import io
import json

from asa_cli.models.app import UserACL
from asa_cli.models.campaign import Campaign
from asa_cli.models.common import Money
from asa_cli.output.formatter import (
    ACL_COLUMNS,
    CAMPAIGN_COLUMNS,
    Column,
    cell,
    render,
)


def _render(fmt, data, columns=CAMPAIGN_COLUMNS):
    buf = io.StringIO()
    render(fmt, data, columns, out=buf)
    return buf.getvalue()


def test_empty_table():
    assert _render("table", []) == "No results found.\n"
    assert _render("table", None) == "No results found.\n"


def test_table_rows_and_cells():
    c = Campaign(
        id=7,
        name="Brand",
        status="ENABLED",
        budget_amount=Money(amount="100", currency="USD"),
        countries_or_regions=["US", "GB"],
    )
    lines = _render("table", [c]).splitlines()
    assert lines[0].split()[:2] == ["ID", "NAME"]
    assert "7" in lines[2]
    assert "100 USD" in lines[2]
    assert "[US GB]" in lines[2]


def test_single_item_is_one_row():
    out = _render("table", Campaign(id=1, name="x"))
    assert len(out.splitlines()) == 3


def test_long_cells_are_cut_to_width():
    cols = [Column("NAME", "name", 8)]
    out = _render("table", [{"name": "a very long campaign name"}], cols)
    assert out.splitlines()[2] == "a ver..."


def test_json_uses_wire_names():
    acl = UserACL(org_id=1, org_name="Org", currency="USD", role_names=["Admin"])
    out = json.loads(_render("json", [acl], ACL_COLUMNS))
    assert out == [{"orgName": "Org", "orgId": 1, "currency": "USD", "roleNames": ["Admin"]}]


def test_cell_handles_missing():
    assert cell(Campaign(), "serving_status") == ""
    assert cell({"a": 1}, "b") == ""
