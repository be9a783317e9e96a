# asa_cli/cli.py
"""
asa-cli: command-line client for the Apple Search Ads Campaign Management API.

Usage:
  asa-cli [-o table|json] [-p PROFILE] [-v] <group> <command> [flags]

  asa-cli campaigns find --filter status=ENABLED --filter "id@1,2,3" --sort name:desc --all
  asa-cli -o json adgroups list --campaign-id 123
  asa-cli keywords delete 11,12 --campaign-id 1 --adgroup-id 2
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

import requests
from pydantic import ValidationError

from asa_cli.config.app_config import (
    Settings,
    resolve_settings,
    validate_credentials,
)
from asa_cli.http.auth import AuthTransport, ClientCredentialsTokenProvider
from asa_cli.http.client import ApiClient
from asa_cli.http.errors import AsaError
from asa_cli.http.retry import RetryPolicy
from asa_cli.logging_utils import invocation_scope, setup_logging
from asa_cli.models.adgroup import AdGroup, AdGroupUpdate
from asa_cli.models.campaign import Campaign, CampaignUpdate
from asa_cli.models.common import Money
from asa_cli.models.keyword import Keyword, KeywordUpdate, NegativeKeyword
from asa_cli.models.reporting import ReportingDataResponse, ReportRequest
from asa_cli.models.selector import DEFAULT_LIMIT, Selector
from asa_cli.output.formatter import (
    ACL_COLUMNS,
    ADGROUP_COLUMNS,
    APP_COLUMNS,
    CAMPAIGN_COLUMNS,
    FORMAT_TABLE,
    FORMATS,
    GEO_COLUMNS,
    KEYWORD_COLUMNS,
    NEGATIVE_KEYWORD_COLUMNS,
    Column,
    render,
)
from asa_cli.services.acls import ACLService
from asa_cli.services.adgroups import AdGroupService
from asa_cli.services.apps import AppService
from asa_cli.services.campaigns import CampaignService
from asa_cli.services.keywords import KeywordService
from asa_cli.services.reports import ReportingService
from asa_cli.utils.selector_parsing import build_selector

logger = logging.getLogger(__name__)


class UsageError(AsaError):
    """Flags parsed fine but do not make a valid request."""


@dataclass
class Context:
    client: ApiClient
    settings: Settings
    fmt: str = FORMAT_TABLE

    def show(self, data: Any, columns: Sequence[Column]) -> None:
        render(self.fmt, data, columns)


def new_api_client(settings: Settings) -> ApiClient:
    """Authenticated client for one profile; rate-limited calls are retried."""
    validate_credentials(settings)
    session = requests.Session()
    provider = ClientCredentialsTokenProvider(settings, session=session)
    auth = AuthTransport(provider, settings.org_id)
    return ApiClient(
        session=session,
        auth=auth,
        base_url=settings.base_url,
        timeout=settings.timeout,
        retry_policy=RetryPolicy(),
    )


# ---------------- helpers ----------------


def _split_csv(raw: Optional[str]) -> List[str]:
    return [p.strip() for p in (raw or "").split(",") if p.strip()]


def _parse_ids(raw: str) -> List[int]:
    ids: List[int] = []
    for part in raw.split(","):
        try:
            ids.append(int(part.strip()))
        except ValueError:
            raise UsageError(f"invalid ID: {part.strip()!r}") from None
    return ids


def _selector_from(args: argparse.Namespace) -> Selector:
    # unknown filter syntax is a usage error on the command line
    try:
        return build_selector(
            filters=args.filter,
            sorts=args.sort,
            limit=args.limit,
            offset=args.offset,
            fields=_split_csv(args.fields) or None,
            strict=True,
        )
    except ValidationError as e:
        errs = e.errors()
        if errs:
            loc = ".".join(str(p) for p in errs[0]["loc"])
            detail = f"{loc}: {errs[0]['msg']}" if loc else errs[0]["msg"]
        else:
            detail = str(e)
        raise UsageError(f"invalid selector: {detail}") from e


def _currency(ctx: Context) -> str:
    try:
        cur = ACLService(ctx.client).currency_for(ctx.settings.org_id)
    except AsaError as e:
        logger.warning("could not look up org currency, using %s: %s", ctx.settings.currency, e)
        cur = None
    return cur or ctx.settings.currency


def _money(ctx: Context, amount: Optional[str], currency: Optional[str] = None) -> Optional[Money]:
    if amount is None or amount == "":
        return None
    return Money(amount=amount, currency=currency or _currency(ctx))


def _parse_bool(raw: str) -> bool:
    v = raw.strip().lower()
    if v in {"true", "1", "yes", "y", "on"}:
        return True
    if v in {"false", "0", "no", "n", "off"}:
        return False
    raise UsageError(f"expected true/false, got {raw!r}")


# ---------------- campaigns ----------------


def cmd_campaigns_list(args: argparse.Namespace, ctx: Context) -> None:
    items, _ = CampaignService(ctx.client).list(args.limit, args.offset)
    ctx.show(items, CAMPAIGN_COLUMNS)


def cmd_campaigns_get(args: argparse.Namespace, ctx: Context) -> None:
    ctx.show(CampaignService(ctx.client).get(args.id), CAMPAIGN_COLUMNS)


def cmd_campaigns_find(args: argparse.Namespace, ctx: Context) -> None:
    svc = CampaignService(ctx.client)
    selector = _selector_from(args)
    items = svc.find_all(selector) if args.all else svc.find(selector)[0]
    ctx.show(items, CAMPAIGN_COLUMNS)


def cmd_campaigns_create(args: argparse.Namespace, ctx: Context) -> None:
    currency = _currency(ctx)
    campaign = Campaign(
        name=args.name,
        adam_id=args.app_id,
        status=args.status,
        countries_or_regions=_split_csv(args.countries),
        budget_amount=_money(ctx, args.budget, currency),
        daily_budget_amount=_money(ctx, args.daily_budget, currency),
        ad_channel_type="SEARCH",
        supply_sources=["APPSTORE_SEARCH_RESULTS"],
        billing_event="TAPS",
    )
    ctx.show(CampaignService(ctx.client).create(campaign), CAMPAIGN_COLUMNS)


def cmd_campaigns_update(args: argparse.Namespace, ctx: Context) -> None:
    update = CampaignUpdate(name=args.name, status=args.status)
    if args.budget is not None or args.daily_budget is not None:
        currency = _currency(ctx)
        update.budget_amount = _money(ctx, args.budget, currency)
        update.daily_budget_amount = _money(ctx, args.daily_budget, currency)
    if args.countries is not None:
        update.countries_or_regions = _split_csv(args.countries)
    if not update.model_dump(exclude_none=True):
        raise UsageError("no update flags provided")
    ctx.show(CampaignService(ctx.client).update(args.id, update), CAMPAIGN_COLUMNS)


def cmd_campaigns_delete(args: argparse.Namespace, ctx: Context) -> None:
    CampaignService(ctx.client).delete(args.id)
    print(f"Campaign {args.id} deleted.")


# ---------------- ad groups ----------------


def cmd_adgroups_list(args: argparse.Namespace, ctx: Context) -> None:
    items, _ = AdGroupService(ctx.client).list(args.campaign_id, args.limit, args.offset)
    ctx.show(items, ADGROUP_COLUMNS)


def cmd_adgroups_get(args: argparse.Namespace, ctx: Context) -> None:
    ctx.show(AdGroupService(ctx.client).get(args.campaign_id, args.id), ADGROUP_COLUMNS)


def cmd_adgroups_find(args: argparse.Namespace, ctx: Context) -> None:
    svc = AdGroupService(ctx.client)
    selector = _selector_from(args)
    if args.all:
        items = svc.find_all(args.campaign_id, selector)
    else:
        items, _ = svc.find(args.campaign_id, selector)
    ctx.show(items, ADGROUP_COLUMNS)


def cmd_adgroups_create(args: argparse.Namespace, ctx: Context) -> None:
    currency = _currency(ctx)
    adgroup = AdGroup(
        name=args.name,
        status=args.status,
        default_bid_amount=_money(ctx, args.default_bid, currency),
        cpa_goal=_money(ctx, args.cpa_goal, currency),
        automated_keywords_opt_in=_parse_bool(args.auto_keywords),
        start_time=args.start_time,
        end_time=args.end_time,
    )
    ctx.show(AdGroupService(ctx.client).create(args.campaign_id, adgroup), ADGROUP_COLUMNS)


def cmd_adgroups_update(args: argparse.Namespace, ctx: Context) -> None:
    update = AdGroupUpdate(
        name=args.name,
        status=args.status,
        start_time=args.start_time,
        end_time=args.end_time,
    )
    if args.auto_keywords is not None:
        update.automated_keywords_opt_in = _parse_bool(args.auto_keywords)
    if args.default_bid is not None or args.cpa_goal is not None:
        currency = _currency(ctx)
        update.default_bid_amount = _money(ctx, args.default_bid, currency)
        update.cpa_goal = _money(ctx, args.cpa_goal, currency)
    if not update.model_dump(exclude_none=True):
        raise UsageError("no update flags provided")
    updated = AdGroupService(ctx.client).update(args.campaign_id, args.id, update)
    ctx.show(updated, ADGROUP_COLUMNS)


def cmd_adgroups_delete(args: argparse.Namespace, ctx: Context) -> None:
    AdGroupService(ctx.client).delete(args.campaign_id, args.id)
    print(f"Ad group {args.id} deleted.")


# ---------------- targeting keywords ----------------


def cmd_keywords_list(args: argparse.Namespace, ctx: Context) -> None:
    items, _ = KeywordService(ctx.client).list(
        args.campaign_id, args.adgroup_id, args.limit, args.offset
    )
    ctx.show(items, KEYWORD_COLUMNS)


def cmd_keywords_get(args: argparse.Namespace, ctx: Context) -> None:
    kw = KeywordService(ctx.client).get(args.campaign_id, args.adgroup_id, args.id)
    ctx.show(kw, KEYWORD_COLUMNS)


def cmd_keywords_find(args: argparse.Namespace, ctx: Context) -> None:
    svc = KeywordService(ctx.client)
    selector = _selector_from(args)
    if args.all:
        items = svc.find_all(args.campaign_id, args.adgroup_id, selector)
    else:
        items, _ = svc.find(args.campaign_id, args.adgroup_id, selector)
    ctx.show(items, KEYWORD_COLUMNS)


def cmd_keywords_create(args: argparse.Namespace, ctx: Context) -> None:
    bid = _money(ctx, args.bid)
    keywords = [
        Keyword(text=t, match_type=args.match_type, bid_amount=bid) for t in args.text
    ]
    created = KeywordService(ctx.client).create(args.campaign_id, args.adgroup_id, keywords)
    ctx.show(created, KEYWORD_COLUMNS)


def cmd_keywords_update(args: argparse.Namespace, ctx: Context) -> None:
    if args.status is None and args.bid is None:
        raise UsageError("no update flags provided")
    update = KeywordUpdate(id=args.keyword_id, status=args.status, bid_amount=_money(ctx, args.bid))
    updated = KeywordService(ctx.client).update(args.campaign_id, args.adgroup_id, [update])
    ctx.show(updated, KEYWORD_COLUMNS)


def cmd_keywords_delete(args: argparse.Namespace, ctx: Context) -> None:
    ids = _parse_ids(args.ids)
    KeywordService(ctx.client).delete(args.campaign_id, args.adgroup_id, ids)
    print(f"Deleted {len(ids)} keyword(s).")


# ---------------- negative keywords ----------------


def _neg_adgroup(args: argparse.Namespace) -> Optional[int]:
    return getattr(args, "adgroup_id", None)


def cmd_negatives_list(args: argparse.Namespace, ctx: Context) -> None:
    items, _ = KeywordService(ctx.client).list_negatives(
        args.campaign_id, _neg_adgroup(args), args.limit, args.offset
    )
    ctx.show(items, NEGATIVE_KEYWORD_COLUMNS)


def cmd_negatives_get(args: argparse.Namespace, ctx: Context) -> None:
    kw = KeywordService(ctx.client).get_negative(args.campaign_id, args.id, _neg_adgroup(args))
    ctx.show(kw, NEGATIVE_KEYWORD_COLUMNS)


def cmd_negatives_find(args: argparse.Namespace, ctx: Context) -> None:
    svc = KeywordService(ctx.client)
    selector = _selector_from(args)
    if args.all:
        items = svc.find_all_negatives(args.campaign_id, selector, _neg_adgroup(args))
    else:
        items, _ = svc.find_negatives(args.campaign_id, selector, _neg_adgroup(args))
    ctx.show(items, NEGATIVE_KEYWORD_COLUMNS)


def cmd_negatives_create(args: argparse.Namespace, ctx: Context) -> None:
    keywords = [NegativeKeyword(text=t, match_type=args.match_type) for t in args.text]
    created = KeywordService(ctx.client).create_negatives(
        args.campaign_id, keywords, _neg_adgroup(args)
    )
    ctx.show(created, NEGATIVE_KEYWORD_COLUMNS)


def cmd_negatives_delete(args: argparse.Namespace, ctx: Context) -> None:
    ids = _parse_ids(args.ids)
    KeywordService(ctx.client).delete_negatives(args.campaign_id, ids, _neg_adgroup(args))
    print(f"Deleted {len(ids)} negative keyword(s).")


# ---------------- search / acls ----------------


def cmd_apps_search(args: argparse.Namespace, ctx: Context) -> None:
    items, _ = AppService(ctx.client).search_apps(
        args.query, args.limit, args.offset, owned=args.owned
    )
    ctx.show(items, APP_COLUMNS)


def cmd_geo_search(args: argparse.Namespace, ctx: Context) -> None:
    items, _ = AppService(ctx.client).search_geo(
        args.query,
        args.limit,
        args.offset,
        entity=args.entity,
        country_code=args.country_code,
    )
    ctx.show(items, GEO_COLUMNS)


def cmd_acls_list(args: argparse.Namespace, ctx: Context) -> None:
    ctx.show(ACLService(ctx.client).get_acls(), ACL_COLUMNS)


# ---------------- reports ----------------

REPORT_COLUMNS = [
    Column("ID", "id", 12),
    Column("NAME", "name", 30),
    Column("IMPRESSIONS", "impressions", 12),
    Column("TAPS", "taps", 8),
    Column("INSTALLS", "installs", 9),
    Column("SPEND", "spend", 15),
]

# metadata keys that identify a row, per report level
_REPORT_KEYS = {
    "campaigns": ("campaignId", "campaignName"),
    "adgroups": ("adGroupId", "adGroupName"),
    "keywords": ("keywordId", "keyword"),
    "searchterms": ("keywordId", "searchTermText"),
}


def report_rows(level: str, resp: ReportingDataResponse) -> List[dict]:
    id_key, name_key = _REPORT_KEYS[level]
    rows: List[dict] = []
    for r in resp.row:
        meta = r.metadata or {}
        total = r.total
        rows.append(
            {
                "id": meta.get(id_key),
                "name": meta.get(name_key),
                "impressions": total.impressions if total else None,
                "taps": total.taps if total else None,
                "installs": total.installs if total else None,
                "spend": total.local_spend if total else None,
            }
        )
    return rows


def cmd_reports(args: argparse.Namespace, ctx: Context) -> None:
    req = ReportRequest(
        start_time=args.start_time,
        end_time=args.end_time,
        granularity=args.granularity,
        group_by=_split_csv(args.group_by) or None,
        selector=_selector_from(args),
        return_grand_totals=args.grand_totals or None,
        return_row_totals=True,
        time_zone=args.time_zone,
    )
    svc = ReportingService(ctx.client)
    level = args.level
    if level == "campaigns":
        resp = svc.campaigns(req)
    elif level == "adgroups":
        resp = svc.adgroups(args.campaign_id, req)
    elif level == "keywords":
        resp = svc.keywords(args.campaign_id, req)
    else:
        resp = svc.search_terms(args.campaign_id, req)

    if ctx.fmt == FORMAT_TABLE:
        ctx.show(report_rows(level, resp), REPORT_COLUMNS)
    else:
        ctx.show(resp, REPORT_COLUMNS)


# ---------------- parser ----------------


def _add_paging(p: argparse.ArgumentParser) -> None:
    p.add_argument("--limit", type=int, default=DEFAULT_LIMIT, help="Number of results")
    p.add_argument("--offset", type=int, default=0, help="Results offset")


def _add_find(p: argparse.ArgumentParser, with_all: bool = True) -> None:
    _add_paging(p)
    p.add_argument(
        "--filter",
        action="append",
        default=None,
        help='Filter condition, repeatable (e.g. "status=ENABLED", "name~MyApp", "id@1,2,3")',
    )
    p.add_argument(
        "--sort",
        action="append",
        default=None,
        help='Sort order, repeatable (e.g. "name:asc", "id:desc")',
    )
    p.add_argument("--fields", default=None, help="Comma-separated fields to return")
    if with_all:
        p.add_argument("--all", action="store_true", help="Fetch all pages")


def _cmd(
    sub: Any, name: str, func: Callable[[argparse.Namespace, Context], None], help: str
) -> argparse.ArgumentParser:
    p = sub.add_parser(name, help=help)
    p.set_defaults(func=func)
    return p


def _campaign_parsers(groups: Any) -> None:
    g = groups.add_parser("campaigns", help="Manage campaigns")
    sub = g.add_subparsers(dest="command", required=True)

    _add_paging(_cmd(sub, "list", cmd_campaigns_list, "List campaigns"))

    p = _cmd(sub, "get", cmd_campaigns_get, "Get a campaign by ID")
    p.add_argument("id", type=int)

    _add_find(_cmd(sub, "find", cmd_campaigns_find, "Find campaigns with filters"))

    p = _cmd(sub, "create", cmd_campaigns_create, "Create a campaign")
    p.add_argument("--name", required=True)
    p.add_argument("--app-id", type=int, required=True, help="App Adam ID")
    p.add_argument("--countries", required=True, help="Comma-separated country codes (e.g. US,GB)")
    p.add_argument("--budget", required=True, help="Total budget (e.g. 1000.00)")
    p.add_argument("--daily-budget", required=True, help="Daily budget (e.g. 50.00)")
    p.add_argument("--status", default="ENABLED")

    p = _cmd(sub, "update", cmd_campaigns_update, "Update a campaign")
    p.add_argument("id", type=int)
    p.add_argument("--name")
    p.add_argument("--budget")
    p.add_argument("--daily-budget")
    p.add_argument("--countries")
    p.add_argument("--status", help="ENABLED or PAUSED")

    p = _cmd(sub, "delete", cmd_campaigns_delete, "Delete a campaign")
    p.add_argument("id", type=int)


def _adgroup_parsers(groups: Any) -> None:
    g = groups.add_parser("adgroups", help="Manage ad groups")
    sub = g.add_subparsers(dest="command", required=True)

    def scoped(name, func, help):
        p = _cmd(sub, name, func, help)
        p.add_argument("--campaign-id", type=int, required=True)
        return p

    _add_paging(scoped("list", cmd_adgroups_list, "List ad groups"))
    scoped("get", cmd_adgroups_get, "Get an ad group by ID").add_argument("id", type=int)
    _add_find(scoped("find", cmd_adgroups_find, "Find ad groups with filters"))

    p = scoped("create", cmd_adgroups_create, "Create an ad group")
    p.add_argument("--name", required=True)
    p.add_argument("--default-bid", required=True, help="Default bid amount (e.g. 1.50)")
    p.add_argument("--cpa-goal")
    p.add_argument("--status", default="ENABLED")
    p.add_argument("--auto-keywords", default="true", help="true/false")
    p.add_argument("--start-time", help="ISO 8601")
    p.add_argument("--end-time", help="ISO 8601")

    p = scoped("update", cmd_adgroups_update, "Update an ad group")
    p.add_argument("id", type=int)
    p.add_argument("--name")
    p.add_argument("--default-bid")
    p.add_argument("--cpa-goal")
    p.add_argument("--status", help="ENABLED or PAUSED")
    p.add_argument("--auto-keywords", help="true/false")
    p.add_argument("--start-time")
    p.add_argument("--end-time")

    scoped("delete", cmd_adgroups_delete, "Delete an ad group").add_argument("id", type=int)


def _keyword_parsers(groups: Any) -> None:
    g = groups.add_parser("keywords", help="Manage targeting keywords")
    sub = g.add_subparsers(dest="command", required=True)

    def scoped(name, func, help):
        p = _cmd(sub, name, func, help)
        p.add_argument("--campaign-id", type=int, required=True)
        p.add_argument("--adgroup-id", type=int, required=True)
        return p

    _add_paging(scoped("list", cmd_keywords_list, "List keywords"))
    scoped("get", cmd_keywords_get, "Get a keyword by ID").add_argument("id", type=int)
    _add_find(scoped("find", cmd_keywords_find, "Find keywords with filters"))

    p = scoped("create", cmd_keywords_create, "Create keywords (bulk)")
    p.add_argument("--text", action="append", required=True, help="Keyword text, repeatable")
    p.add_argument("--match-type", default="BROAD", choices=["BROAD", "EXACT"])
    p.add_argument("--bid", help="Bid amount (e.g. 1.50)")

    p = scoped("update", cmd_keywords_update, "Update a keyword")
    p.add_argument("--id", dest="keyword_id", type=int, required=True)
    p.add_argument("--status", help="ACTIVE or PAUSED")
    p.add_argument("--bid")

    p = scoped("delete", cmd_keywords_delete, "Delete keywords (bulk)")
    p.add_argument("ids", help="Comma-separated keyword IDs")


def _negative_parsers(groups: Any) -> None:
    g = groups.add_parser("negative-keywords", help="Manage negative keywords")
    sub = g.add_subparsers(dest="command", required=True)

    for level in ("campaign", "adgroup"):

        def scoped(name, func, help, level=level):
            p = _cmd(sub, f"{level}-{name}", func, help)
            p.add_argument("--campaign-id", type=int, required=True)
            if level == "adgroup":
                p.add_argument("--adgroup-id", type=int, required=True)
            return p

        _add_paging(scoped("list", cmd_negatives_list, f"List {level}-level negative keywords"))
        scoped("get", cmd_negatives_get, f"Get a {level}-level negative keyword").add_argument(
            "id", type=int
        )
        _add_find(scoped("find", cmd_negatives_find, f"Find {level}-level negative keywords"))

        p = scoped("create", cmd_negatives_create, f"Create {level}-level negative keywords")
        p.add_argument("--text", action="append", required=True, help="Keyword text, repeatable")
        p.add_argument("--match-type", default="EXACT", choices=["BROAD", "EXACT"])

        p = scoped("delete", cmd_negatives_delete, f"Delete {level}-level negative keywords")
        p.add_argument("ids", help="Comma-separated keyword IDs")


def _search_parsers(groups: Any) -> None:
    g = groups.add_parser("apps", help="Search apps")
    sub = g.add_subparsers(dest="command", required=True)
    p = _cmd(sub, "search", cmd_apps_search, "Search for apps")
    p.add_argument("--query", required=True)
    _add_paging(p)
    p.add_argument("--owned", action="store_true", help="Return only owned apps")

    g = groups.add_parser("geo", help="Search geo locations")
    sub = g.add_subparsers(dest="command", required=True)
    p = _cmd(sub, "search", cmd_geo_search, "Search for geo locations")
    p.add_argument("--query", required=True)
    _add_paging(p)
    p.add_argument("--entity", help="Entity type filter (e.g. Country, AdminArea, Locality)")
    p.add_argument("--country-code", help="Country code filter")

    g = groups.add_parser("acls", help="Show user access control lists")
    sub = g.add_subparsers(dest="command", required=True)
    _cmd(sub, "list", cmd_acls_list, "List orgs and roles for the current credentials")


def _report_parsers(groups: Any) -> None:
    g = groups.add_parser("reports", help="Fetch reports")
    sub = g.add_subparsers(dest="level", required=True)
    for level in ("campaigns", "adgroups", "keywords", "searchterms"):
        p = _cmd(sub, level, cmd_reports, f"{level} report")
        if level != "campaigns":
            p.add_argument("--campaign-id", type=int, required=True)
        p.add_argument("--start-time", required=True, help="YYYY-MM-DD")
        p.add_argument("--end-time", required=True, help="YYYY-MM-DD")
        p.add_argument(
            "--granularity", choices=["HOURLY", "DAILY", "WEEKLY", "MONTHLY"]
        )
        p.add_argument("--group-by", help="Comma-separated dimensions (e.g. countryOrRegion)")
        p.add_argument("--time-zone", choices=["UTC", "ORTZ"])
        p.add_argument("--grand-totals", action="store_true")
        _add_find(p, with_all=False)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="asa-cli",
        description="A command-line interface for the Apple Search Ads Campaign Management API v5.",
    )
    ap.add_argument("-o", "--output", choices=FORMATS, default=FORMAT_TABLE, help="Output format")
    ap.add_argument("-p", "--profile", default=None, help="Config profile name")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log requests and responses")

    groups = ap.add_subparsers(dest="group", required=True)
    _campaign_parsers(groups)
    _adgroup_parsers(groups)
    _keyword_parsers(groups)
    _negative_parsers(groups)
    _search_parsers(groups)
    _report_parsers(groups)
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else None)

    with invocation_scope() as cid:
        try:
            settings = resolve_settings(args.profile)
            ctx = Context(client=new_api_client(settings), settings=settings, fmt=args.output)
            args.func(args, ctx)
        except AsaError as e:
            logger.debug("command failed cid=%s", cid, exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
