"""Business logic services for tablebridge."""

from tablebridge.services.api_client import ApiResponse, IngestApiClient
from tablebridge.services.export_writer import DelimitedFileWriter
from tablebridge.services.ingestion import (
    IngestionOrchestrator,
    derive_table_name,
    target_display_name,
)
from tablebridge.services.preview_fetcher import PreviewFetcher
from tablebridge.services.schema_loader import SchemaLoader
from tablebridge.services.source_selector import SourceTargetSelector
from tablebridge.services.task_runner import AsyncTaskRunner
from tablebridge.services.workflow import IngestionWorkflow

__all__ = [
    "ApiResponse",
    "AsyncTaskRunner",
    "DelimitedFileWriter",
    "IngestApiClient",
    "IngestionOrchestrator",
    "IngestionWorkflow",
    "PreviewFetcher",
    "SchemaLoader",
    "SourceTargetSelector",
    "derive_table_name",
    "target_display_name",
]
