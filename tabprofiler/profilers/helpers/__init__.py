"""This package provides helper functions for generating reports."""
from .report_helpers import _prepare_report, flat_dict

__all__ = [
    "_prepare_report",
    "flat_dict",
]
