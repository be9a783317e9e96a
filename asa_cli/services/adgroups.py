# asa_cli/services/adgroups.py
from __future__ import annotations

from typing import List, Optional, Tuple
from urllib.parse import urlencode

from asa_cli.http.client import ApiClient
from asa_cli.http.pagination import fetch_all
from asa_cli.models.adgroup import AdGroup, AdGroupUpdate
from asa_cli.models.common import PageInfo
from asa_cli.models.selector import DEFAULT_LIMIT, Selector


def _base(campaign_id: int) -> str:
    return f"/campaigns/{campaign_id}/adgroups"


class AdGroupService:
    """Ad groups always live under one campaign."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def list(
        self, campaign_id: int, limit: int = DEFAULT_LIMIT, offset: int = 0
    ) -> Tuple[List[AdGroup], Optional[PageInfo]]:
        qs = urlencode({"limit": limit, "offset": offset})
        res = self.client.get(f"{_base(campaign_id)}?{qs}", result_type=List[AdGroup])
        return res.data or [], res.page_info

    def get(self, campaign_id: int, adgroup_id: int) -> AdGroup:
        return self.client.get(
            f"{_base(campaign_id)}/{adgroup_id}", result_type=AdGroup
        ).data

    def find(
        self, campaign_id: int, selector: Selector
    ) -> Tuple[List[AdGroup], Optional[PageInfo]]:
        res = self.client.post(
            f"{_base(campaign_id)}/find", body=selector, result_type=List[AdGroup]
        )
        return res.data or [], res.page_info

    def find_all(self, campaign_id: int, selector: Selector) -> List[AdGroup]:
        return fetch_all(self.client, f"{_base(campaign_id)}/find", selector, AdGroup)

    def create(self, campaign_id: int, adgroup: AdGroup) -> AdGroup:
        return self.client.post(
            _base(campaign_id), body=adgroup, result_type=AdGroup
        ).data

    def update(
        self, campaign_id: int, adgroup_id: int, update: AdGroupUpdate
    ) -> AdGroup:
        return self.client.put(
            f"{_base(campaign_id)}/{adgroup_id}", body=update, result_type=AdGroup
        ).data

    def delete(self, campaign_id: int, adgroup_id: int) -> None:
        self.client.delete(f"{_base(campaign_id)}/{adgroup_id}")
