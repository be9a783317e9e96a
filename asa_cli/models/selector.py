# asa_cli/models/selector.py
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_LIMIT = 20


class Operator(str, Enum):
    EQUALS = "EQUALS"
    CONTAINS = "CONTAINS"
    NOT_CONTAINS = "NOT_CONTAINS"
    IN = "IN"
    GREATER_THAN = "GREATER_THAN"
    LESS_THAN = "LESS_THAN"
    GREATER_THAN_OR_EQUAL = "GREATER_THAN_OR_EQUAL"
    LESS_THAN_OR_EQUAL = "LESS_THAN_OR_EQUAL"


class SortOrder(str, Enum):
    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


class Condition(BaseModel):
    field: str = Field(min_length=1)
    operator: Operator
    values: List[str] = Field(min_length=1)

    @model_validator(mode="after")
    def _single_value_unless_in(self) -> "Condition":
        if self.operator is not Operator.IN and len(self.values) != 1:
            raise ValueError(
                f"operator {self.operator.value} takes exactly one value, got {len(self.values)}"
            )
        return self


class OrderSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field: str = Field(min_length=1)
    sort_order: SortOrder = Field(default=SortOrder.ASCENDING, alias="sortOrder")


class SelectorPagination(BaseModel):
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=DEFAULT_LIMIT, gt=0)


class Selector(BaseModel):
    """
    Request body for the POST .../find endpoints.

    Built once per request by the caller. Pagination traversal never mutates a
    caller's selector; it works on copies produced by with_offset().
    """

    model_config = ConfigDict(populate_by_name=True)

    conditions: List[Condition] = Field(default_factory=list)
    order_by: List[OrderSpec] = Field(default_factory=list, alias="orderBy")
    fields: Optional[List[str]] = None
    pagination: SelectorPagination = Field(default_factory=SelectorPagination)

    @classmethod
    def new(cls, limit: int = DEFAULT_LIMIT, offset: int = 0) -> "Selector":
        if limit <= 0:
            limit = DEFAULT_LIMIT
        return cls(pagination=SelectorPagination(offset=offset, limit=limit))

    def with_offset(self, offset: int) -> "Selector":
        return self.model_copy(
            update={"pagination": SelectorPagination(offset=offset, limit=self.pagination.limit)},
            deep=True,
        )

    def to_wire(self) -> dict:
        body: dict = {}
        if self.conditions:
            body["conditions"] = [c.model_dump(mode="json") for c in self.conditions]
        if self.fields is not None:
            body["fields"] = list(self.fields)
        if self.order_by:
            body["orderBy"] = [o.model_dump(by_alias=True, mode="json") for o in self.order_by]
        body["pagination"] = self.pagination.model_dump(mode="json")
        return body
