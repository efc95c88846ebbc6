"""Pipedrive connection credentials."""

from pydantic import BaseModel, ConfigDict, Field


class Connection(BaseModel):
    """Company domain and API token used to build every request URL."""

    model_config = ConfigDict(frozen=True)

    company_domain: str = Field(..., min_length=1, description="Subdomain, e.g. 'acme' for acme.pipedrive.com")
    api_token: str = Field(..., min_length=1, repr=False)
