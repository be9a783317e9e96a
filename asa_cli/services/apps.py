# asa_cli/services/apps.py
from __future__ import annotations

from typing import List, Optional, Tuple
from urllib.parse import urlencode

from asa_cli.http.client import ApiClient
from asa_cli.models.app import AppInfo, GeoEntity
from asa_cli.models.common import PageInfo
from asa_cli.models.selector import DEFAULT_LIMIT


class AppService:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def search_apps(
        self,
        query: str,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
        owned: bool = False,
    ) -> Tuple[List[AppInfo], Optional[PageInfo]]:
        qs = urlencode(
            {
                "query": query,
                "limit": limit,
                "offset": offset,
                "returnOwnedApps": "true" if owned else "false",
            }
        )
        res = self.client.get(f"/search/apps?{qs}", result_type=List[AppInfo])
        return res.data or [], res.page_info

    def search_geo(
        self,
        query: str,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
        entity: Optional[str] = None,
        country_code: Optional[str] = None,
    ) -> Tuple[List[GeoEntity], Optional[PageInfo]]:
        params = {"query": query, "limit": limit, "offset": offset}
        if entity:
            params["entity"] = entity
        if country_code:
            params["countrycode"] = country_code
        res = self.client.get(
            f"/search/geo?{urlencode(params)}", result_type=List[GeoEntity]
        )
        return res.data or [], res.page_info
