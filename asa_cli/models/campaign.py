# asa_cli/models/campaign.py
from __future__ import annotations

from typing import List, Optional

from asa_cli.models.common import ApiModel, Money


class Campaign(ApiModel):
    id: Optional[int] = None
    org_id: Optional[int] = None
    name: str = ""
    adam_id: Optional[int] = None
    budget_amount: Optional[Money] = None
    daily_budget_amount: Optional[Money] = None
    countries_or_regions: List[str] = []
    status: Optional[str] = None
    serving_status: Optional[str] = None
    serving_state_reasons: Optional[List[str]] = None
    display_status: Optional[str] = None
    supply_sources: Optional[List[str]] = None
    ad_channel_type: Optional[str] = None
    billing_event: Optional[str] = None
    payment_model: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    modification_time: Optional[str] = None
    deleted: Optional[bool] = None


class CampaignUpdate(ApiModel):
    name: Optional[str] = None
    status: Optional[str] = None
    budget_amount: Optional[Money] = None
    daily_budget_amount: Optional[Money] = None
    countries_or_regions: Optional[List[str]] = None

    def to_wire(self) -> dict:
        # PUT /campaigns/{id} expects the changes wrapped in "campaign"
        return {"campaign": super().to_wire()}
