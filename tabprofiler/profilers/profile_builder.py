"""Build a profile of a tabular dataset: status, frequency and numeric tables."""

from __future__ import annotations

import copy
import json
import logging
import os
from collections import OrderedDict, defaultdict
from datetime import datetime
from typing import Dict, Generator, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .. import tp_logging
from .._typing import TabularInput
from ..data_readers.dataset import CATEGORICAL, NUMERIC, Column, Dataset
from ..errors import InputShapeError
from . import profiler_utils
from .categorical_column_profile import CategoricalColumn
from .helpers.report_helpers import _prepare_report
from .numeric_column_profile import NumericColumn
from .numerical_column_stats import PERCENTILES, percentile_key
from .profiler_options import ProfilerOptions
from .status_column_profile import StatusColumn

logger = tp_logging.get_child_logger(__name__)

STATUS_COLUMNS = [
    "variable",
    "q_zeros",
    "p_zeros",
    "q_na",
    "p_na",
    "q_inf",
    "p_inf",
    "type",
    "unique",
]

NUMERIC_PROFILE_COLUMNS = (
    ["variable", "mean", "std_dev", "variation_coef"]
    + [percentile_key(percentile) for percentile in PERCENTILES]
    + [
        "skewness",
        "kurtosis",
        "iqr",
        "range_98",
        "range_80",
        "count",
        "q_na_excluded",
        "q_inf_excluded",
    ]
)


def _progress(names: Sequence[str]) -> Generator[str, None, None]:
    """Iterate over column names, showing progress with tqdm when available."""
    try:
        from tqdm import tqdm

        has_tqdm = True
    except ImportError:
        has_tqdm = False

    if has_tqdm and logger.getEffectiveLevel() <= logging.INFO:
        yield from tqdm(names)
        return

    for i, name in enumerate(names):
        # These will automatically be ignored if user sets
        # logger level as higher than INFO
        logger.info(f"Profiling column {i + 1}/{len(names)}")
        yield name


class StructuredColProfiler(object):
    """For profiling a single column of a dataset."""

    def __init__(self, column: Column, options: ProfilerOptions = None) -> None:
        """
        Instantiate the StructuredColProfiler class for a given column.

        The profilers are created empty; call update_column_profilers with
        the cells of the column to fill them.

        :param column: column to be profiled
        :type column: Column
        :param options: Options for the profiler.
        :type options: ProfilerOptions
        """
        if options is None:
            options = ProfilerOptions()
        self.name: str = column.name
        self.kind: str = column.kind
        self.error: Optional[str] = None
        self.profiles: Dict = {}

        if options.status.is_enabled:
            self.profiles["status"] = StatusColumn(
                self.name, kind=self.kind, options=options.status
            )
        if self.kind == CATEGORICAL and options.category.is_enabled:
            self.profiles["statistics"] = CategoricalColumn(
                self.name, options=options.category
            )
        elif self.kind == NUMERIC and options.numerical.is_enabled:
            self.profiles["statistics"] = NumericColumn(
                self.name, options=options.numerical
            )

    def update_column_profilers(self, df_series: pd.Series) -> StructuredColProfiler:
        """
        Update every profiler of the column with the given cells.

        :param df_series: cells of the column, missing ones included
        :type df_series: pandas.Series
        :return: the updated column profiler
        :rtype: StructuredColProfiler
        """
        for profile in self.profiles.values():
            profile.update(df_series)
        return self

    @property
    def status(self) -> Optional[StatusColumn]:
        """Return the status profiler, None if disabled or failed."""
        if self.error is not None:
            return None
        return self.profiles.get("status")

    @property
    def statistics(self) -> Optional[Union[CategoricalColumn, NumericColumn]]:
        """Return the categorical or numeric profiler, None if disabled or failed."""
        if self.error is not None:
            return None
        return self.profiles.get("statistics")

    def report(self, remove_disabled_flag: bool = False) -> OrderedDict:
        """
        Return the report of the column.

        A column which failed to profile reports None for its status and
        statistics together with its error.

        :param remove_disabled_flag: flag to determine if disabled
            options should be excluded in the report.
        :type remove_disabled_flag: boolean
        """
        status = self.status
        statistics = self.statistics
        report: OrderedDict = OrderedDict(
            [
                ("column_name", self.name),
                ("kind", self.kind),
                ("status", status.report(remove_disabled_flag) if status else None),
                (
                    "statistics",
                    statistics.report(remove_disabled_flag) if statistics else None,
                ),
            ]
        )
        if self.error is not None:
            report["error"] = self.error
        return report

    @property
    def profile(self) -> Dict:
        """Return a report."""
        return self.report(remove_disabled_flag=False)


class StructuredProfiler(object):
    """For profiling tabular data."""

    def __init__(
        self,
        data: Union[Dataset, TabularInput],
        options: ProfilerOptions = None,
        kinds: Dict[str, str] = None,
    ) -> None:
        """
        Instantiate the StructuredProfiler class and profile the data.

        :param data: Data to be profiled
        :type data: Dataset, pandas.DataFrame or dict of column -> cells
        :param options: Options for the profiler.
        :type options: ProfilerOptions Object
        :param kinds: overrides of the inferred column kinds, used when data
            is not already a Dataset
        :type kinds: dict[str, str]
        :return: StructuredProfiler
        """
        if not options:
            options = ProfilerOptions()
        elif not isinstance(options, ProfilerOptions):
            raise ValueError(
                "The profile options must be passed as a ProfilerOptions object."
            )
        options.validate()

        self.options: ProfilerOptions = options
        self.dataset: Dataset = Dataset.from_input(data, kinds)
        self.times: Dict[str, float] = defaultdict(float)
        self.errors: Dict[str, str] = OrderedDict()
        self._profile: Dict[str, StructuredColProfiler] = OrderedDict(
            (column.name, StructuredColProfiler(column, options))
            for column in self.dataset
        )

        self._update_profile_from_dataset()

    @property
    def profile(self) -> Dict[str, StructuredColProfiler]:
        """Return the column profilers keyed by column name."""
        return self._profile

    def _record_failure(self, name: str, e: Exception) -> None:
        """Isolate a column which raised while being profiled."""
        profiler_utils.warn_on_profile(name, e)
        self.errors[name] = f"{type(e).__name__}: {e}"
        failed = StructuredColProfiler(self.dataset[name], self.options)
        failed.error = self.errors[name]
        self._profile[name] = failed

    def _profile_single_process(self, names: Sequence[str]) -> None:
        for name in _progress(names):
            try:
                self._profile[name].update_column_profilers(
                    self.dataset[name].values
                )
            except Exception as e:
                self._record_failure(name, e)

    @profiler_utils.method_timeit(name="profile")
    def _update_profile_from_dataset(self) -> None:
        """
        Iterate over the columns of the dataset and profile each of them.

        Columns are profiled independently; with multiprocessing enabled the
        results are merged back by column name so the order of the profile
        is always the order of the dataset.

        :return: None
        """
        names = self.dataset.column_names
        if not names:
            logger.info("The dataset has no columns to profile.")
            return

        # Generate pool and estimate datasize
        pool = None
        if self.options.multiprocess.is_enabled:
            est_data_size = (
                self.dataset.to_frame().memory_usage(index=False, deep=True).sum()
            )
            pool, pool_size = profiler_utils.generate_pool(
                max_pool_size=None, data_size=est_data_size, cols=len(names)
            )

        notification_str = "Calculating the statistics... "
        if pool is None:
            logger.info(notification_str)
            self._profile_single_process(names)
            return

        notification_str += " (with " + str(pool_size) + " processes)"
        logger.info(notification_str)

        multi_process_dict = OrderedDict()
        single_process_list = []
        for name in names:
            try:
                multi_process_dict[name] = pool.apply_async(
                    self._profile[name].update_column_profilers,
                    (self.dataset[name].values,),
                )
            except Exception as e:
                logger.info(e)
                single_process_list.append(name)

        # Merge by name, never by completion order
        for name in _progress(list(multi_process_dict.keys())):
            try:
                self._profile[name] = multi_process_dict[name].get()
            except Exception as e:
                logger.info(e)
                single_process_list.append(name)

        pool.close()  # Close pool for new tasks
        pool.join()  # Wait for all workers to complete

        # Clean up any columns which errored
        if single_process_list:
            logger.info(
                f"Errors in multiprocessing occurred: {len(single_process_list)} "
                "errors, reprocessing..."
            )
            for name in single_process_list:
                self._profile[name] = StructuredColProfiler(
                    self.dataset[name], self.options
                )
            self._profile_single_process(single_process_list)

    def _present(self, table: pd.DataFrame, name: str) -> None:
        """Print and export a result table as the presentation options ask."""
        presentation = self.options.presentation
        if presentation.print_results:
            print(table.to_string(index=False))
        if presentation.path_out is not None:
            os.makedirs(presentation.path_out, exist_ok=True)
            filepath = os.path.join(presentation.path_out, f"{name}.csv")
            table.to_csv(filepath, index=False)
            logger.info(f"Saved '{name}' table to {filepath}")

    def _status_row(self, col_profiler: StructuredColProfiler) -> Dict:
        status = col_profiler.status
        if status is None:
            row = {key: np.nan for key in STATUS_COLUMNS}
            row.update(variable=col_profiler.name, type=col_profiler.kind)
            return row
        report = status.report()
        return {key: report[key] for key in STATUS_COLUMNS}

    def df_status(self) -> pd.DataFrame:
        """
        Return the status table: one row per column, in column order.

        Percentages are rounded to two decimals. Failed columns keep their
        name and kind with NaN counts.

        :return: status table
        :rtype: pandas.DataFrame
        """
        rows = [self._status_row(col) for col in self._profile.values()]
        table = pd.DataFrame(rows, columns=STATUS_COLUMNS)
        for key in ["p_zeros", "p_na", "p_inf"]:
            table[key] = table[key].astype(float).round(2)
        self._present(table, "df_status")
        return table

    def _categorical_profiler(self, name: str) -> Optional[CategoricalColumn]:
        """Return the frequency profiler of a column, building it if needed."""
        col_profiler = self._profile[name]
        if col_profiler.error is not None:
            return None
        if col_profiler.kind == CATEGORICAL and col_profiler.statistics is not None:
            return col_profiler.statistics

        # Numeric columns, or categorical ones with tables disabled
        profiler = CategoricalColumn(name, options=self.options.category)
        return profiler.update(self.dataset[name].values)

    def freq(
        self, columns: Optional[Union[str, Sequence[str]]] = None, rounded: bool = True
    ) -> Dict[str, pd.DataFrame]:
        """
        Return the frequency table of categorical columns.

        :param columns: columns to tabulate, every categorical column if None.
            Numeric columns are tabulated by value when named explicitly.
        :type columns: Union[str, list[str], None]
        :param rounded: round percentages to two decimals
        :type rounded: bool
        :return: frequency table per column name, in column order
        :rtype: dict[str, pandas.DataFrame]
        """
        if columns is None:
            names = [col.name for col in self.dataset.columns_of_kind(CATEGORICAL)]
        else:
            names = [col.name for col in self.dataset.select(columns)]
        if not names:
            logger.info("There are no categorical columns to tabulate.")

        tables: Dict[str, pd.DataFrame] = OrderedDict()
        for name in names:
            profiler = self._categorical_profiler(name)
            if profiler is None:
                tables[name] = CategoricalColumn(name).frequency_table(rounded)
                continue
            table = profiler.frequency_table(rounded=rounded)
            tables[name] = table
            self._present(table, name)
            if self.options.category.plot and not table.empty:
                from ..reports import graphs

                graphs.plot_frequency(
                    table, title=name, path_out=self.options.presentation.path_out
                )
        return tables

    def _numeric_row(self, col_profiler: StructuredColProfiler) -> Dict:
        statistics = col_profiler.statistics
        if statistics is None:
            return dict(variable=col_profiler.name)
        return statistics.report(remove_disabled_flag=True)

    def profiling_num(
        self, columns: Optional[Union[str, Sequence[str]]] = None
    ) -> pd.DataFrame:
        """
        Return the numeric profile table: one row per numeric column.

        Disabled statistics are left out of the table.

        :param columns: numeric columns to profile, every numeric column if
            None
        :type columns: Union[str, list[str], None]
        :return: numeric profile table
        :rtype: pandas.DataFrame
        """
        if columns is None:
            selected = self.dataset.columns_of_kind(NUMERIC)
        else:
            selected = self.dataset.select(columns)
            not_numeric = [col.name for col in selected if not col.is_numeric]
            if not_numeric:
                raise InputShapeError(
                    f"Columns {not_numeric} are not numeric and cannot be profiled."
                )
        if not selected:
            logger.info("There are no numeric columns to profile.")

        rows = [self._numeric_row(self._profile[col.name]) for col in selected]
        present = set().union(*rows) if rows else set(NUMERIC_PROFILE_COLUMNS)
        table = pd.DataFrame(
            rows, columns=[key for key in NUMERIC_PROFILE_COLUMNS if key in present]
        )
        self._present(table, "profiling_num")
        return table

    def plot_num(self, columns: Optional[Union[str, Sequence[str]]] = None):
        """
        Plot the histograms of the numeric columns.

        Bucket count and output directory come from the presentation options.

        :param columns: numeric columns to plot, every numeric column if None
        :type columns: Union[str, list[str], None]
        :return: matplotlib figure, None if nothing could be plotted
        """
        from ..reports import graphs

        presentation = self.options.presentation
        return graphs.plot_num(
            self.dataset,
            bins=presentation.bins,
            path_out=presentation.path_out,
            columns=columns,
        )

    def report(self, report_options: Dict = None) -> Dict:
        """
        Return a report.

        :param report_options: options for the report, supports
            output_format, omit_keys and remove_disabled_flag
        :type report_options: dict
        :return: report of the global and per column statistics
        :rtype: dict
        """
        if not report_options:
            report_options = {
                "output_format": None,
                "remove_disabled_flag": False,
            }

        output_format = report_options.get("output_format", None)
        omit_keys = report_options.get("omit_keys", [])
        remove_disabled_flag = report_options.get("remove_disabled_flag", False)

        report: Dict = OrderedDict(
            [
                (
                    "global_stats",
                    {
                        "column_count": len(self.dataset),
                        "row_count": self.dataset.row_count,
                        "total_cells": self.dataset.total_cells,
                        "missing_cells": self.dataset.missing_cells,
                        "missing_ratio": self.dataset.missing_ratio,
                        "profile_schema": self.dataset.schema,
                        "times": dict(self.times),
                    },
                ),
                ("data_stats", []),
                ("errors", dict(self.errors)),
            ]
        )

        for col_profiler in self._profile.values():
            report["data_stats"].append(col_profiler.report(remove_disabled_flag))

        return _prepare_report(report, output_format, omit_keys)

    def save(self, filepath: str = None) -> str:
        """
        Save the serializable report to disk as JSON.

        :param filepath: Path of file to save to
        :type filepath: String
        :return: the path the report was saved to
        :rtype: str
        """
        from .json_encoder import ProfileEncoder

        # Set Default filepath
        if filepath is None:
            filepath = "profile-{}.json".format(
                datetime.now().strftime("%d-%b-%Y-%H:%M:%S.%f")
            )

        report = self.report(report_options={"output_format": "serializable"})
        with open(filepath, "w") as outfile:
            json.dump(report, outfile, cls=ProfileEncoder)
        return filepath


def _convenience_options(
    options: Optional[ProfilerOptions], settings: Dict
) -> ProfilerOptions:
    """Copy the given options, or create them, and apply the settings."""
    if options is None:
        options = ProfilerOptions()
    elif not isinstance(options, ProfilerOptions):
        raise ValueError(
            "The profile options must be passed as a ProfilerOptions object."
        )
    else:
        options = copy.deepcopy(options)
    options.set(settings)
    return options


def df_status(
    data: Union[Dataset, TabularInput],
    print_results: bool = True,
    path_out: str = None,
    options: ProfilerOptions = None,
    kinds: Dict[str, str] = None,
) -> pd.DataFrame:
    """
    Return the status table (zeros, missing, infinite, unique) of every column.

    :param data: Data to be profiled
    :type data: Dataset, pandas.DataFrame or dict of column -> cells
    :param print_results: print the table to stdout
    :type print_results: bool
    :param path_out: directory to save the table to as df_status.csv
    :type path_out: str
    :param options: Options for the profiler.
    :type options: ProfilerOptions
    :param kinds: overrides of the inferred column kinds
    :type kinds: dict[str, str]
    :return: status table
    :rtype: pandas.DataFrame
    """
    options = _convenience_options(
        options,
        {
            "presentation.print_results": print_results,
            "presentation.path_out": path_out,
            "category.is_enabled": False,
            "numerical.is_enabled": False,
        },
    )
    return StructuredProfiler(data, options=options, kinds=kinds).df_status()


def freq(
    data: Union[Dataset, TabularInput],
    columns: Optional[Union[str, Sequence[str]]] = None,
    include_missing: bool = True,
    na_rm: bool = None,
    plot: bool = False,
    path_out: str = None,
    print_results: bool = True,
    options: ProfilerOptions = None,
    kinds: Dict[str, str] = None,
) -> Dict[str, pd.DataFrame]:
    """
    Return the frequency table of categorical columns.

    :param data: Data to be profiled
    :type data: Dataset, pandas.DataFrame or dict of column -> cells
    :param columns: columns to tabulate, every categorical column if None
    :type columns: Union[str, list[str], None]
    :param include_missing: count missing cells under the NA label
    :type include_missing: bool
    :param na_rm: drop missing cells, overrides include_missing when given
    :type na_rm: bool
    :param plot: draw a bar chart of each table
    :type plot: bool
    :param path_out: directory to save the tables and charts to
    :type path_out: str
    :param print_results: print the tables to stdout
    :type print_results: bool
    :param options: Options for the profiler.
    :type options: ProfilerOptions
    :param kinds: overrides of the inferred column kinds
    :type kinds: dict[str, str]
    :return: frequency table per column name
    :rtype: dict[str, pandas.DataFrame]
    """
    if na_rm is not None:
        include_missing = not na_rm
    options = _convenience_options(
        options,
        {
            "presentation.print_results": print_results,
            "presentation.path_out": path_out,
            "category.include_missing": include_missing,
            "category.plot": plot,
            "numerical.is_enabled": False,
        },
    )
    return StructuredProfiler(data, options=options, kinds=kinds).freq(columns)


def profiling_num(
    data: Union[Dataset, TabularInput],
    print_results: bool = True,
    path_out: str = None,
    options: ProfilerOptions = None,
    kinds: Dict[str, str] = None,
) -> pd.DataFrame:
    """
    Return the numeric profile of every numeric column.

    :param data: Data to be profiled
    :type data: Dataset, pandas.DataFrame or dict of column -> cells
    :param print_results: print the table to stdout
    :type print_results: bool
    :param path_out: directory to save the table to as profiling_num.csv
    :type path_out: str
    :param options: Options for the profiler.
    :type options: ProfilerOptions
    :param kinds: overrides of the inferred column kinds
    :type kinds: dict[str, str]
    :return: numeric profile table
    :rtype: pandas.DataFrame
    """
    options = _convenience_options(
        options,
        {
            "presentation.print_results": print_results,
            "presentation.path_out": path_out,
            "category.is_enabled": False,
        },
    )
    return StructuredProfiler(data, options=options, kinds=kinds).profiling_num()
