# asa_cli/models/keyword.py
from __future__ import annotations

from typing import Optional

from asa_cli.models.common import ApiModel, Money


class Keyword(ApiModel):
    """Targeting keyword. match_type is BROAD or EXACT."""

    id: Optional[int] = None
    campaign_id: Optional[int] = None
    ad_group_id: Optional[int] = None
    text: str
    match_type: str = "BROAD"
    status: Optional[str] = None
    bid_amount: Optional[Money] = None
    deleted: Optional[bool] = None
    modification_time: Optional[str] = None


class NegativeKeyword(ApiModel):
    """Negative keyword, campaign- or ad-group-level."""

    id: Optional[int] = None
    campaign_id: Optional[int] = None
    ad_group_id: Optional[int] = None
    text: str
    match_type: str = "EXACT"
    status: Optional[str] = None
    deleted: Optional[bool] = None
    modification_time: Optional[str] = None


class KeywordUpdate(ApiModel):
    id: int
    status: Optional[str] = None
    bid_amount: Optional[Money] = None
