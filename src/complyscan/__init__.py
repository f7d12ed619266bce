"""complyscan package root."""

from complyscan.exceptions import (
    AnnotationSyntaxError,
    CatalogUnavailableError,
    ComplyscanError,
    NeverThrown,
)
from complyscan.invariants import never
from complyscan.report import ReportResult, generate_report

__all__ = [
    "__version__",
    "AnnotationSyntaxError",
    "CatalogUnavailableError",
    "ComplyscanError",
    "NeverThrown",
    "ReportResult",
    "generate_report",
    "never",
]

__version__ = "0.1.0"
