"""Export Pipedrive CRM records to CSV files."""

__version__ = "0.1.0"
