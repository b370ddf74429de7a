"""Contains functions for the profilers."""
from __future__ import annotations

import functools
import multiprocessing as mp
import time
import warnings
from multiprocessing.pool import Pool
from typing import Any, Callable

import numpy as np
import psutil
from pandas import Series

from .. import tp_logging

logger = tp_logging.get_child_logger(__name__)


def warn_on_profile(col_profile: str, e: Exception) -> None:
    """
    Warn that a column failed to profile while the run carries on.

    :param col_profile: Name of the column profile
    :type col_profile: str
    :param e: Error message from profiler error
    :type e: Exception
    """
    warning_msg = "\n\n!!! WARNING Partial Profiler Failure !!!\n\n"
    warning_msg += f"Profiling Column: {col_profile}"
    warning_msg += f"\nException: {type(e).__name__}"
    warning_msg += f"\nMessage: {e}"
    warning_msg += "\n\nThe remaining columns are profiled as usual.\n"
    logger.info(f"Column '{col_profile}' failed with {type(e).__name__}: {e}")
    warnings.warn(warning_msg, RuntimeWarning, stacklevel=2)


def suggest_pool_size(data_size: int = None, cols: int = None) -> int | None:
    """
    Suggest the pool size based on resources.

    :param data_size: size of the dataset
    :type data_size: int
    :param cols: columns of the dataset
    :type cols: int
    :return suggested_pool_size: suggested pool size
    :rtype suggested_pool_size: int
    """
    # Return if there's no data_size
    if data_size is None:
        return None

    try:
        # Determine safest level of processes based on memory
        mb = 1000000
        svmem = psutil.virtual_memory()
        max_pool_mem = (data_size * 50) / (svmem.available / mb)
    except NotImplementedError:
        max_pool_mem = 4

    try:
        # Determine safest level of processes based on CPUs
        max_pool_cpu = psutil.cpu_count() - 1
    except (NotImplementedError, TypeError):
        max_pool_cpu = 1

    # Limit to cols if less than threads
    suggested_pool_size = min(max_pool_mem, max_pool_cpu)
    if cols is not None:
        suggested_pool_size = min(suggested_pool_size, cols)

    return int(suggested_pool_size)


def generate_pool(
    max_pool_size: int = None,
    data_size: int = None,
    cols: int = None,
) -> tuple[Pool | None, int | None]:
    """
    Generate a multiprocessing pool to allocate functions too.

    :param max_pool_size: Max number of processes assigned to the pool
    :type max_pool_size: Union[int, None]
    :param data_size: size of the dataset
    :type data_size: int
    :param cols: columns of the dataset
    :type cols: int
    :return pool: Multiprocessing pool to allocate processes to
    :rtype pool: Multiproessing.Pool
    :return cpu_count: Number of processes (cpu bound) to utilize
    :rtype cpu_count: int
    """
    suggested_pool_size = suggest_pool_size(data_size, cols)
    if max_pool_size is None or suggested_pool_size is None:
        max_pool_size = suggested_pool_size

    # Pools of one or two workers are slower than the single process path
    pool = None
    if max_pool_size is not None and max_pool_size > 2:
        try:
            pool = mp.Pool(max_pool_size)
        except Exception:
            pool = None
            warnings.warn(
                "Multiprocessing disabled, please change the multiprocessing"
                + " start method, via: multiprocessing.set_start_method(<method>)"
                + " Possible methods include: fork, spawn, forkserver, None"
            )

    return pool, max_pool_size


def typed_key(value: Any) -> tuple[type, Any]:
    """
    Return the key a cell is counted under in a mixed-type column.

    Labels which compare equal across types, e.g. True, 1, 1.0, stay
    distinct. Numpy scalars are keyed as the Python value they hold.

    :param value: a non-missing cell
    :type value: Any
    :return: the (type, value) pair of the cell
    :rtype: tuple
    """
    if isinstance(value, np.generic):
        value = value.item()
    return (type(value), value)


def percentiles(values: np.ndarray, points: list[float]) -> np.ndarray:
    """
    Calculate percentiles by linear interpolation between order statistics.

    This is the Hyndman & Fan type 7 rule (numpy's ``linear`` method).

    :param values: finite values, in any order
    :type values: numpy.ndarray
    :param points: percentiles to compute, each in [0, 100]
    :type points: list[float]
    :return: the percentile values, NaN for every point if values is empty
    :rtype: numpy.ndarray
    """
    if not len(values):
        return np.full(len(points), np.nan)
    return np.percentile(values, points, method="linear")


def biased_skew(df_series: Series) -> np.float64:
    """
    Calculate the biased estimator for skewness of the given data.

    The definition is formalized as g_1 here:
        https://en.wikipedia.org/wiki/Skewness#Sample_skewness
    :param df_series: data to get skewness of, assuming floats
    :type df_series: pandas Series
    :return: biased skewness
    :rtype: np.float64
    """
    n = len(df_series)
    if n < 1:
        return np.float64(np.nan)

    mean = sum(df_series) / n
    if np.isinf(mean) or np.isnan(mean):
        return np.float64(np.nan)

    diffs = df_series - mean
    squared_diffs = diffs**2
    cubed_diffs = squared_diffs * diffs
    M2 = sum(squared_diffs)
    M3 = sum(cubed_diffs)
    # Zero out values within floating point error, as pandas does
    M2 = 0 if np.abs(M2) < 1e-14 else M2
    M3 = 0 if np.abs(M3) < 1e-14 else M3

    if M2 == 0:
        return np.float64(0.0)

    with np.errstate(all="ignore"):
        skew: np.float64 = np.sqrt(n) * M3 / np.power(M2, 1.5)
    return skew


def biased_kurt(df_series: Series) -> np.float64:
    """
    Calculate the biased estimator for excess kurtosis of the given data.

    The definition is formalized as g_2 here:
        https://en.wikipedia.org/wiki/Kurtosis#A_natural_but_biased_estimator
    :param df_series: data to get kurtosis of, assuming floats
    :type df_series: pandas Series
    :return: biased kurtosis
    :rtype: np.float64
    """
    n = len(df_series)
    if n < 1:
        return np.float64(np.nan)

    mean = sum(df_series) / n
    if np.isinf(mean) or np.isnan(mean):
        return np.float64(np.nan)

    diffs = df_series - mean
    squared_diffs = diffs**2
    fourth_diffs = squared_diffs * squared_diffs
    M2 = sum(squared_diffs)
    M4 = sum(fourth_diffs)
    # Zero out values within floating point error, as pandas does
    M2 = 0 if np.abs(M2) < 1e-14 else M2
    M4 = 0 if np.abs(M4) < 1e-14 else M4

    if M2 == 0:
        return np.float64(-3.0)

    with np.errstate(all="ignore"):
        kurt: np.float64 = n * M4 / np.power(M2, 2) - 3
    return kurt


def method_timeit(method: Callable = None, name: str = None) -> Callable:
    """
    Measure execution time of provided method.

    Record time into times dictionary.

    :param method: method to time
    :type method: Callable
    :param name: key argument for the times dictionary
    :type name: str
    """

    def decorator(method: Callable, name_dec: str = None) -> Callable:
        @functools.wraps(method)
        def wrapper(self: Any, *args: Any, **kw: Any) -> Any:
            # necessary bc can't reassign external name
            name_dec = name
            if not name_dec:
                name_dec = method.__name__
            ts = time.time()
            result = method(self, *args, **kw)
            te = time.time()
            self.times[name_dec] += te - ts
            return result

        return wrapper

    if callable(method):
        return decorator(method, name_dec=name)
    return decorator
