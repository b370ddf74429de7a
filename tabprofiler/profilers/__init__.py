"""Package for providing statistics for a given tabular dataset."""
from .base_column_profilers import BaseColumnProfiler
from .categorical_column_profile import CategoricalColumn
from .numeric_column_profile import NumericColumn
from .numerical_column_stats import NumericStatsMixin
from .profile_builder import (
    StructuredColProfiler,
    StructuredProfiler,
    df_status,
    freq,
    profiling_num,
)
from .profiler_options import (
    BaseInspectorOptions,
    BaseOption,
    BooleanOption,
    CategoricalOptions,
    NumericalOptions,
    PresentationOptions,
    ProfilerOptions,
    StatusOptions,
)
from .status_column_profile import StatusColumn
