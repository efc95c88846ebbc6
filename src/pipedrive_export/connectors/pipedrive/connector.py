"""Pipedrive connector: paginated list fetching with rate-limit retry.

Every list endpoint pages with `start`/`limit` and reports
`additional_data.pagination.more_items_in_collection`. The fetch loop:
1. GET {path}?start={offset}&api_token={token}
2. On 429, wait a fixed interval and retry the same offset
3. Append `data`, then advance to start + limit until no more items remain
"""

import logging
import time
from typing import Any, Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from pipedrive_export.models.connection import Connection
from pipedrive_export.models.page import ApiPage
from pipedrive_export.projection import build_label_table, project_all

from .constants import (
    BASE_URL_TEMPLATE,
    DEFAULT_MAX_RATE_LIMIT_RETRIES,
    RATE_LIMIT_BACKOFF_SECONDS,
    RATE_LIMIT_CODE,
    EndpointDescriptor,
)
from .errors import PipedriveAPIError, RateLimitExceeded

logger = logging.getLogger(__name__)


def build_url(company_domain: str, path: str, params: Optional[dict[str, Any]] = None) -> str:
    """Build a v1 API URL; params are appended in insertion order."""
    url = BASE_URL_TEMPLATE.format(company_domain=company_domain) + path
    if params:
        url += "?" + urlencode(params)
    return url


class PipedriveConnector:
    """
    Connector for the Pipedrive v1 REST API, bound to one Connection.
    Fetches every page of a list endpoint and projects records onto export fields.
    """

    DEFAULT_HEADERS = {
        "User-Agent": "pipedrive-export/0.1",
        "Accept": "application/json",
    }

    def __init__(
        self,
        connection: Connection,
        client: Optional[httpx.Client] = None,
        *,
        backoff_seconds: float = RATE_LIMIT_BACKOFF_SECONDS,
        max_rate_limit_retries: Optional[int] = DEFAULT_MAX_RATE_LIMIT_RETRIES,
    ):
        """
        Args:
            connection: Company domain and API token
            client: Optional httpx client
            backoff_seconds: Fixed wait before retrying a rate-limited request
            max_rate_limit_retries: Consecutive 429 retries allowed per page; None retries forever
        """
        self._connection = connection
        self._client = client or httpx.Client(headers=self.DEFAULT_HEADERS)
        self._backoff_seconds = backoff_seconds
        self._max_rate_limit_retries = max_rate_limit_retries

    @property
    def connection(self) -> Connection:
        return self._connection

    def _get_page(self, path: str, params: dict[str, Any]) -> ApiPage:
        """GET one page and parse its envelope."""
        url = build_url(self._connection.company_domain, path, params)
        resp = self._client.get(url)

        try:
            body = resp.json()
        except ValueError as e:
            if resp.status_code == RATE_LIMIT_CODE:
                body = {
                    "success": False,
                    "errorCode": RATE_LIMIT_CODE,
                    "error": resp.reason_phrase or "Too Many Requests",
                }
            else:
                raise PipedriveAPIError(
                    f"Unparseable response from {path} (HTTP {resp.status_code})"
                ) from e

        if not isinstance(body, dict):
            raise PipedriveAPIError(f"Unexpected response from {path}: expected a JSON object")
        try:
            page = ApiPage.model_validate(body)
        except ValidationError as e:
            raise PipedriveAPIError(f"Unexpected response shape from {path}: {e}") from e

        if resp.status_code == RATE_LIMIT_CODE and page.error_code is None:
            page = page.model_copy(update={"success": False, "error_code": RATE_LIMIT_CODE})
        return page

    def fetch_all(self, path: str, params: Optional[dict[str, Any]] = None) -> list[dict[str, Any]]:
        """
        Fetch every page of a list endpoint and return records in server order.
        Extra params are sent after start and api_token.
        """
        records: list[dict[str, Any]] = []
        start = 0
        rate_limited = 0

        while True:
            query = {"start": start, "api_token": self._connection.api_token}
            query.update({k: v for k, v in (params or {}).items() if k not in query})
            page = self._get_page(path, query)

            if not page.success or page.error_code == RATE_LIMIT_CODE:
                logger.warning("Error %s: %s", page.error_code, page.error)
                if page.error_code != RATE_LIMIT_CODE:
                    raise PipedriveAPIError(page.error or f"Request to {path} failed", page.error_code)

                rate_limited += 1
                limit = self._max_rate_limit_retries
                if limit is not None and rate_limited > limit:
                    raise RateLimitExceeded(
                        f"Still rate limited on {path} (start={start}) after {limit} retries",
                        RATE_LIMIT_CODE,
                    )
                time.sleep(self._backoff_seconds)
                continue

            rate_limited = 0
            if page.data:
                records.extend(page.data)

            pagination = page.pagination
            if pagination is None:
                raise PipedriveAPIError(f"Missing pagination metadata in response from {path}")
            if not pagination.more_items_in_collection:
                break
            if pagination.start is None or pagination.limit is None:
                raise PipedriveAPIError(f"Incomplete pagination metadata in response from {path}")
            start = pagination.start + pagination.limit

        logger.debug("Fetched %d records from %s", len(records), path)
        return records

    def field_labels(self, descriptor: EndpointDescriptor) -> dict[str, str]:
        """Fetch the metadata endpoint and return raw key -> display label."""
        return build_label_table(self.fetch_all(descriptor.fields_path))

    def fetch_records(self, descriptor: EndpointDescriptor) -> list[dict[str, Any]]:
        """Fetch raw records for an object type."""
        return self.fetch_all(descriptor.path)

    def fetch_rows(self, descriptor: EndpointDescriptor) -> list[dict[str, Any]]:
        """Fetch records and project them onto the descriptor's labelled fields."""
        labels = self.field_labels(descriptor)
        return project_all(descriptor.fields, labels, self.fetch_records(descriptor))

    def close(self) -> None:
        self._client.close()
