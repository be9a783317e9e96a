# asa_cli/models/common.py
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Money(ApiModel):
    amount: str
    currency: str

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"


# ---- response envelope ----


class PageInfo(ApiModel):
    total_results: int = 0
    start_index: int = 0
    items_per_page: int = 0


class ErrorDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    message_code: str = Field(default="", alias="messageCode")
    message: str = ""
    field: Optional[str] = None


class ErrorBody(BaseModel):
    errors: List[ErrorDetail] = Field(default_factory=list)


class Envelope(BaseModel):
    """
    Uniform wrapper around every non-204 response body:
      {"data": ..., "pagination": {...}, "error": {"errors": [...]}}
    """

    model_config = ConfigDict(extra="allow")

    data: Any = None
    pagination: Optional[PageInfo] = None
    error: Optional[ErrorBody] = None

    def first_error(self) -> Optional[ErrorDetail]:
        if self.error and self.error.errors:
            return self.error.errors[0]
        return None
