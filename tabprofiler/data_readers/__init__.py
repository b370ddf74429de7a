"""Package for the in-memory tabular dataset consumed by the profilers."""
from .dataset import CATEGORICAL, COLUMN_KINDS, NUMERIC, Column, Dataset, infer_kind

__all__ = [
    "CATEGORICAL",
    "COLUMN_KINDS",
    "NUMERIC",
    "Column",
    "Dataset",
    "infer_kind",
]
