# asa_cli/services/keywords.py
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple
from urllib.parse import urlencode

from asa_cli.http.client import ApiClient
from asa_cli.http.pagination import fetch_all
from asa_cli.models.common import PageInfo
from asa_cli.models.keyword import Keyword, KeywordUpdate, NegativeKeyword
from asa_cli.models.selector import DEFAULT_LIMIT, Selector


def _targeting(campaign_id: int, adgroup_id: int) -> str:
    return f"/campaigns/{campaign_id}/adgroups/{adgroup_id}/targetingkeywords"


def _negative(campaign_id: int, adgroup_id: Optional[int] = None) -> str:
    # no ad group id -> campaign-level negatives
    if adgroup_id is None:
        return f"/campaigns/{campaign_id}/negativekeywords"
    return f"/campaigns/{campaign_id}/adgroups/{adgroup_id}/negativekeywords"


class KeywordService:
    """
    Targeting keywords (per ad group) and negative keywords (per campaign or
    per ad group). Create/update/delete are bulk calls taking lists.
    """

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    # ---- targeting keywords ----

    def list(
        self,
        campaign_id: int,
        adgroup_id: int,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> Tuple[List[Keyword], Optional[PageInfo]]:
        qs = urlencode({"limit": limit, "offset": offset})
        res = self.client.get(
            f"{_targeting(campaign_id, adgroup_id)}?{qs}", result_type=List[Keyword]
        )
        return res.data or [], res.page_info

    def get(self, campaign_id: int, adgroup_id: int, keyword_id: int) -> Keyword:
        return self.client.get(
            f"{_targeting(campaign_id, adgroup_id)}/{keyword_id}", result_type=Keyword
        ).data

    def find(
        self, campaign_id: int, adgroup_id: int, selector: Selector
    ) -> Tuple[List[Keyword], Optional[PageInfo]]:
        res = self.client.post(
            f"{_targeting(campaign_id, adgroup_id)}/find",
            body=selector,
            result_type=List[Keyword],
        )
        return res.data or [], res.page_info

    def find_all(
        self, campaign_id: int, adgroup_id: int, selector: Selector
    ) -> List[Keyword]:
        return fetch_all(
            self.client, f"{_targeting(campaign_id, adgroup_id)}/find", selector, Keyword
        )

    def create(
        self, campaign_id: int, adgroup_id: int, keywords: Sequence[Keyword]
    ) -> List[Keyword]:
        res = self.client.post(
            f"{_targeting(campaign_id, adgroup_id)}/bulk",
            body=list(keywords),
            result_type=List[Keyword],
        )
        return res.data or []

    def update(
        self, campaign_id: int, adgroup_id: int, updates: Sequence[KeywordUpdate]
    ) -> List[Keyword]:
        res = self.client.put(
            f"{_targeting(campaign_id, adgroup_id)}/bulk",
            body=list(updates),
            result_type=List[Keyword],
        )
        return res.data or []

    def delete(
        self, campaign_id: int, adgroup_id: int, keyword_ids: Sequence[int]
    ) -> None:
        self.client.post(
            f"{_targeting(campaign_id, adgroup_id)}/delete/bulk",
            body=[int(k) for k in keyword_ids],
        )

    # ---- negative keywords ----

    def list_negatives(
        self,
        campaign_id: int,
        adgroup_id: Optional[int] = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> Tuple[List[NegativeKeyword], Optional[PageInfo]]:
        qs = urlencode({"limit": limit, "offset": offset})
        res = self.client.get(
            f"{_negative(campaign_id, adgroup_id)}?{qs}",
            result_type=List[NegativeKeyword],
        )
        return res.data or [], res.page_info

    def get_negative(
        self, campaign_id: int, keyword_id: int, adgroup_id: Optional[int] = None
    ) -> NegativeKeyword:
        return self.client.get(
            f"{_negative(campaign_id, adgroup_id)}/{keyword_id}",
            result_type=NegativeKeyword,
        ).data

    def find_negatives(
        self, campaign_id: int, selector: Selector, adgroup_id: Optional[int] = None
    ) -> Tuple[List[NegativeKeyword], Optional[PageInfo]]:
        res = self.client.post(
            f"{_negative(campaign_id, adgroup_id)}/find",
            body=selector,
            result_type=List[NegativeKeyword],
        )
        return res.data or [], res.page_info

    def find_all_negatives(
        self, campaign_id: int, selector: Selector, adgroup_id: Optional[int] = None
    ) -> List[NegativeKeyword]:
        return fetch_all(
            self.client,
            f"{_negative(campaign_id, adgroup_id)}/find",
            selector,
            NegativeKeyword,
        )

    def create_negatives(
        self,
        campaign_id: int,
        keywords: Sequence[NegativeKeyword],
        adgroup_id: Optional[int] = None,
    ) -> List[NegativeKeyword]:
        res = self.client.post(
            f"{_negative(campaign_id, adgroup_id)}/bulk",
            body=list(keywords),
            result_type=List[NegativeKeyword],
        )
        return res.data or []

    def delete_negatives(
        self,
        campaign_id: int,
        keyword_ids: Sequence[int],
        adgroup_id: Optional[int] = None,
    ) -> None:
        self.client.post(
            f"{_negative(campaign_id, adgroup_id)}/delete/bulk",
            body=[int(k) for k in keyword_ids],
        )
