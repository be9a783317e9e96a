# asa_cli/models/adgroup.py
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import Field

from asa_cli.models.common import ApiModel, Money


class TargetingDimension(ApiModel):
    included: Optional[List[Any]] = None
    excluded: Optional[List[Any]] = None


class TargetingDimensions(ApiModel):
    age: Optional[TargetingDimension] = None
    gender: Optional[TargetingDimension] = None
    device_class: Optional[TargetingDimension] = None
    locality: Optional[TargetingDimension] = None
    admin_area: Optional[TargetingDimension] = None
    country: Optional[TargetingDimension] = None
    app_downloaders: Optional[TargetingDimension] = None
    daypart: Optional[TargetingDimension] = Field(default=None, alias="daypart")


class AdGroup(ApiModel):
    id: Optional[int] = None
    campaign_id: Optional[int] = None
    org_id: Optional[int] = None
    name: str = ""
    status: Optional[str] = None
    serving_status: Optional[str] = None
    serving_state_reasons: Optional[List[str]] = None
    display_status: Optional[str] = None
    default_bid_amount: Optional[Money] = None
    cpa_goal: Optional[Money] = None
    automated_keywords_opt_in: Optional[bool] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    modification_time: Optional[str] = None
    targeting_dimensions: Optional[TargetingDimensions] = None
    payment_model: Optional[str] = None
    pricing_model: Optional[str] = None


class AdGroupUpdate(ApiModel):
    name: Optional[str] = None
    status: Optional[str] = None
    default_bid_amount: Optional[Money] = None
    cpa_goal: Optional[Money] = None
    automated_keywords_opt_in: Optional[bool] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
