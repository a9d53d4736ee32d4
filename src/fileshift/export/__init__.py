"""fileshift exports — zip archive, combined text, download-all."""

from fileshift.export.archive import ExportError, build_archive, combined_text
from fileshift.export.writer import download_all, validate_output_path, write_output

__all__ = [
    "ExportError",
    "build_archive",
    "combined_text",
    "download_all",
    "validate_output_path",
    "write_output",
]
