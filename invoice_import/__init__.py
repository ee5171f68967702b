"""Invoice tabular import & reconciliation engine.

Reads delimited text, spreadsheet workbooks and JSON documents describing
invoices and their lines, and returns validated invoice aggregates.
"""

from .models.config_models import ImportOptions
from .models.import_result import FileType, ImportResult, Structure, ValidationReport
from .services.pipeline import import_file, import_file_async, validate_file

__all__ = [
    "FileType",
    "ImportOptions",
    "ImportResult",
    "Structure",
    "ValidationReport",
    "import_file",
    "import_file_async",
    "validate_file",
]
