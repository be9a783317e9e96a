# asa_cli/models/app.py
from __future__ import annotations

from typing import List, Optional

from asa_cli.models.common import ApiModel


class AppInfo(ApiModel):
    adam_id: int
    app_name: str = ""
    developer_name: str = ""
    country_or_region_codes: Optional[List[str]] = None


class GeoEntity(ApiModel):
    id: str
    entity: str = ""
    display_name: str = ""


class UserACL(ApiModel):
    org_name: str = ""
    org_id: int
    currency: str = ""
    role_names: List[str] = []
    parent_org_id: Optional[int] = None
