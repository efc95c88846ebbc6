"""Data models for connections, API pages and export jobs."""

from pipedrive_export.models.connection import Connection
from pipedrive_export.models.job import ExportJob
from pipedrive_export.models.object_type import ObjectType
from pipedrive_export.models.page import ApiPage, Pagination

__all__ = ["ApiPage", "Connection", "ExportJob", "ObjectType", "Pagination"]
