"""Pipedrive REST API connector."""

from pipedrive_export.connectors.pipedrive.connector import PipedriveConnector
from pipedrive_export.connectors.pipedrive.constants import ENDPOINTS, EndpointDescriptor, descriptor_for
from pipedrive_export.connectors.pipedrive.errors import PipedriveAPIError, RateLimitExceeded

__all__ = [
    "ENDPOINTS",
    "EndpointDescriptor",
    "PipedriveAPIError",
    "PipedriveConnector",
    "RateLimitExceeded",
    "descriptor_for",
]
