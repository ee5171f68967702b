"""Domain models for the invoice import engine.

This package contains the value objects passed between readers, the
extraction/aggregation services and callers of the pipeline.
"""

from .config_models import ImportConfig, ImportOptions
from .error_record import FILE_LEVEL_ROW, ImportErrorRecord, ImportWarningRecord
from .import_result import FileType, ImportAccumulator, ImportResult, Structure, ValidationReport
from .invoice import InvoiceAggregate, InvoiceHeaderCandidate, InvoiceLineCandidate
from .table import Table

__all__ = [
    # Configuration models
    "ImportConfig",
    "ImportOptions",
    # Source data
    "Table",
    # Invoice models
    "InvoiceAggregate",
    "InvoiceHeaderCandidate",
    "InvoiceLineCandidate",
    # Result models
    "FILE_LEVEL_ROW",
    "FileType",
    "ImportAccumulator",
    "ImportErrorRecord",
    "ImportResult",
    "ImportWarningRecord",
    "Structure",
    "ValidationReport",
]
