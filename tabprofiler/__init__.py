"""Package for tabprofiler."""
from .data_readers.dataset import Column, Dataset
from .errors import ConfigurationError, DegenerateColumnWarning, InputShapeError
from .profilers.profile_builder import (
    StructuredProfiler,
    df_status,
    freq,
    profiling_num,
)
from .profilers.profiler_options import ProfilerOptions
from .reports import graphs
from .tp_logging import get_logger, set_verbosity
from .version import __version__
