"""Source connectors for CRM export."""

from pipedrive_export.connectors.pipedrive import PipedriveConnector

__all__ = ["PipedriveConnector"]
