# asa_cli/models/reporting.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from asa_cli.models.common import ApiModel, Money
from asa_cli.models.selector import Selector


class ReportRequest(ApiModel):
    start_time: str
    end_time: str
    granularity: Optional[str] = None  # HOURLY, DAILY, WEEKLY, MONTHLY
    group_by: Optional[List[str]] = None
    selector: Optional[Selector] = None
    return_grand_totals: Optional[bool] = None
    return_records_with_no_metrics: Optional[bool] = None
    return_row_totals: Optional[bool] = None
    time_zone: Optional[str] = None

    def to_wire(self) -> dict:
        body = self.model_dump(
            by_alias=True, exclude_none=True, exclude={"selector"}, mode="json"
        )
        if self.selector is not None:
            body["selector"] = self.selector.to_wire()
        return body


class SpendRow(ApiModel):
    impressions: int = 0
    taps: int = 0
    installs: int = 0
    new_downloads: int = 0
    redownloads: int = 0
    lat_on_installs: int = 0
    lat_off_installs: int = 0
    ttr: float = 0.0
    avg_cpa: Optional[Money] = Field(default=None, alias="avgCPA")
    avg_cpt: Optional[Money] = Field(default=None, alias="avgCPT")
    local_spend: Optional[Money] = None
    conversion_rate: float = 0.0


class GranularityRow(ApiModel):
    date: str = ""
    metrics: Optional[SpendRow] = None


class BidRecommendation(ApiModel):
    suggested_bid_amount: Optional[Money] = None


class InsightData(ApiModel):
    bid_recommendation: Optional[BidRecommendation] = None


class ReportRow(ApiModel):
    other: Optional[bool] = None
    total: Optional[SpendRow] = None
    metadata: Optional[Dict[str, Any]] = None
    granularity: Optional[List[GranularityRow]] = None
    insights: Optional[InsightData] = None


class ReportingDataResponse(ApiModel):
    row: List[ReportRow] = []
    grand_totals: Optional[ReportRow] = None


class ReportResponse(ApiModel):
    reporting_data_response: ReportingDataResponse
