"""fileshift ingestion — drop traversal, renaming and concurrent reads."""

from fileshift.ingest.entries import Drop, drop_from_paths
from fileshift.ingest.pipeline import Ingestor, read_records
from fileshift.ingest.rename import CONVERSION_OPTIONS, normalize_extension, rename_path
from fileshift.ingest.walker import IngestError, walk_drop

__all__ = [
    "CONVERSION_OPTIONS",
    "Drop",
    "IngestError",
    "Ingestor",
    "drop_from_paths",
    "normalize_extension",
    "read_records",
    "rename_path",
    "walk_drop",
]
