"""One page of a Pipedrive list response."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Pagination(BaseModel):
    """Pagination block from additional_data."""

    model_config = ConfigDict(extra="allow")

    more_items_in_collection: bool = False
    start: Optional[int] = None
    limit: Optional[int] = None


class AdditionalData(BaseModel):
    model_config = ConfigDict(extra="allow")

    pagination: Optional[Pagination] = None


class ApiPage(BaseModel):
    """
    Response body of a list endpoint.
    Only the envelope is modelled; records in `data` stay untyped.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    success: bool = False
    error_code: Optional[int] = Field(default=None, alias="errorCode")
    error: Optional[str] = None
    data: Optional[list[dict[str, Any]]] = None
    additional_data: Optional[AdditionalData] = None

    @property
    def pagination(self) -> Optional[Pagination]:
        if self.additional_data is None:
            return None
        return self.additional_data.pagination
