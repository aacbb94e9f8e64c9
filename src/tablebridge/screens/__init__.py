"""Screen classes for tablebridge."""

from tablebridge.screens.ingestion import IngestionPane
from tablebridge.screens.preview import PreviewModal

__all__ = [
    "IngestionPane",
    "PreviewModal",
]
