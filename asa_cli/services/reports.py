# asa_cli/services/reports.py
from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from asa_cli.http.client import ApiClient
from asa_cli.http.errors import DecodingError
from asa_cli.models.reporting import (
    ReportingDataResponse,
    ReportRequest,
    ReportResponse,
)


def parse_report(data: Any) -> ReportingDataResponse:
    """
    The reports endpoints answer either {"reportingDataResponse": {...}} or
    the inner object directly; accept both.
    """
    if isinstance(data, dict) and "reportingDataResponse" in data:
        try:
            return ReportResponse.model_validate(data).reporting_data_response
        except ValidationError as e:
            raise DecodingError(f"parsing report response: {e}") from e
    try:
        return ReportingDataResponse.model_validate(data or {})
    except ValidationError as e:
        raise DecodingError(f"parsing report response: {e}") from e


class ReportingService:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def _report(self, path: str, req: ReportRequest) -> ReportingDataResponse:
        # raw data; shape is decided in parse_report
        res = self.client.post(path, body=req)
        return parse_report(res.data)

    def campaigns(self, req: ReportRequest) -> ReportingDataResponse:
        return self._report("/reports/campaigns", req)

    def adgroups(self, campaign_id: int, req: ReportRequest) -> ReportingDataResponse:
        return self._report(f"/reports/campaigns/{campaign_id}/adgroups", req)

    def keywords(self, campaign_id: int, req: ReportRequest) -> ReportingDataResponse:
        return self._report(f"/reports/campaigns/{campaign_id}/keywords", req)

    def search_terms(
        self, campaign_id: int, req: ReportRequest
    ) -> ReportingDataResponse:
        return self._report(f"/reports/campaigns/{campaign_id}/searchterms", req)
