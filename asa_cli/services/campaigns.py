# asa_cli/services/campaigns.py
from __future__ import annotations

from typing import List, Optional, Tuple
from urllib.parse import urlencode

from asa_cli.http.client import ApiClient
from asa_cli.http.pagination import fetch_all
from asa_cli.models.campaign import Campaign, CampaignUpdate
from asa_cli.models.common import PageInfo
from asa_cli.models.selector import DEFAULT_LIMIT, Selector


class CampaignService:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def list(
        self, limit: int = DEFAULT_LIMIT, offset: int = 0
    ) -> Tuple[List[Campaign], Optional[PageInfo]]:
        qs = urlencode({"limit": limit, "offset": offset})
        res = self.client.get(f"/campaigns?{qs}", result_type=List[Campaign])
        return res.data or [], res.page_info

    def get(self, campaign_id: int) -> Campaign:
        return self.client.get(f"/campaigns/{campaign_id}", result_type=Campaign).data

    def find(self, selector: Selector) -> Tuple[List[Campaign], Optional[PageInfo]]:
        res = self.client.post(
            "/campaigns/find", body=selector, result_type=List[Campaign]
        )
        return res.data or [], res.page_info

    def find_all(self, selector: Selector) -> List[Campaign]:
        return fetch_all(self.client, "/campaigns/find", selector, Campaign)

    def create(self, campaign: Campaign) -> Campaign:
        return self.client.post("/campaigns", body=campaign, result_type=Campaign).data

    def update(self, campaign_id: int, update: CampaignUpdate) -> Campaign:
        # CampaignUpdate.to_wire() wraps the fields in {"campaign": ...}
        return self.client.put(
            f"/campaigns/{campaign_id}", body=update, result_type=Campaign
        ).data

    def delete(self, campaign_id: int) -> None:
        self.client.delete(f"/campaigns/{campaign_id}")
