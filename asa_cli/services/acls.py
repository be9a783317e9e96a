# asa_cli/services/acls.py
from __future__ import annotations

from typing import List, Optional

from asa_cli.http.client import ApiClient
from asa_cli.models.app import UserACL


class ACLService:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def get_acls(self) -> List[UserACL]:
        return self.client.get("/acls", result_type=List[UserACL]).data or []

    def currency_for(self, org_id: str) -> Optional[str]:
        """Currency of the org the caller is scoped to, if the ACL lists it."""
        for acl in self.get_acls():
            if str(acl.org_id) == str(org_id) and acl.currency:
                return acl.currency
        return None
