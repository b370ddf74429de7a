"""Contains class for categorical column profiler."""
from __future__ import annotations

from collections import Counter, OrderedDict

import numpy as np
import pandas as pd

from .. import tp_logging
from . import profiler_utils
from .base_column_profilers import BaseColumnProfiler
from .profiler_options import CategoricalOptions

logger = tp_logging.get_child_logger(__name__)


class _MissingCategory(object):
    """Key under which missing cells are counted."""

    def __repr__(self) -> str:
        return "<missing>"

    def __reduce__(self) -> str:
        # Unpickles to the module level singleton
        return "MISSING"


MISSING = _MissingCategory()

FREQUENCY_COLUMNS = ["frequency", "percentage", "cumulative_perc"]


class CategoricalColumn(BaseColumnProfiler["CategoricalColumn"]):
    """
    Categorical column profile subclass of BaseColumnProfiler.

    Represents a column in the dataset which is a categorical column and
    builds its frequency table.
    """

    type = "category"

    def __init__(self, name: str | None, options: CategoricalOptions = None) -> None:
        """
        Initialize column base properties and itself.

        :param name: Name of data
        :type name: String
        :param options: Options for the categorical column
        :type options: CategoricalOptions
        """
        if options and not isinstance(options, CategoricalOptions):
            raise ValueError(
                "CategoricalColumn parameter 'options' must be of"
                " type CategoricalOptions."
            )
        super().__init__(name)
        # Insertion order is the order in which labels were first seen
        self._categories: OrderedDict = OrderedDict()
        self.include_missing = True
        self.missing_label = "NA"
        if options:
            self.include_missing = options.include_missing
            self.missing_label = options.missing_label

    @property
    def missing_count(self) -> int:
        """Return the number of missing cells seen."""
        return self._categories.get(MISSING, 0)

    @property
    def categories(self) -> list:
        """Return the labels seen in first-seen order, missing excluded."""
        return [key[1] for key in self._categories if key is not MISSING]

    @property
    def unique_count(self) -> int:
        """Return the number of distinct non-missing labels."""
        return len(self.categories)

    @property
    def total_count(self) -> int:
        """Return the number of cells the percentages are relative to."""
        total = self.sample_size
        if not self.include_missing:
            total -= self.missing_count
        return total

    def _display_label(self, key: object) -> object:
        return self.missing_label if key is MISSING else key[1]

    def _sorted_counts(self) -> list[tuple]:
        """Return (key, count) sorted by descending count, stable on ties."""
        counted = [
            (key, count)
            for key, count in self._categories.items()
            if count and (key is not MISSING or self.include_missing)
        ]
        return sorted(counted, key=lambda item: -item[1])

    def frequency_table(self, rounded: bool = True) -> pd.DataFrame:
        """
        Return the frequency table of the column.

        Rows are sorted by descending frequency; ties keep the order in which
        the labels were first seen.

        :param rounded: round percentages to two decimals
        :type rounded: bool
        :return: table with the label, frequency, percentage and cumulative
            percentage columns
        :rtype: pandas.DataFrame
        """
        label_column = self.name if self.name is not None else "category"
        sorted_counts = self._sorted_counts()
        if not sorted_counts:
            return pd.DataFrame(columns=[label_column] + FREQUENCY_COLUMNS)

        labels = [self._display_label(key) for key, _ in sorted_counts]
        frequency = np.array([count for _, count in sorted_counts], dtype=np.int64)
        percentage = 100.0 * frequency / frequency.sum()
        cumulative_perc = np.cumsum(percentage)
        if rounded:
            percentage = np.round(percentage, 2)
            cumulative_perc = np.round(cumulative_perc, 2)

        return pd.DataFrame(
            {
                label_column: pd.Series(labels, dtype=object),
                "frequency": frequency,
                "percentage": percentage,
                "cumulative_perc": cumulative_perc,
            }
        )

    @property
    def profile(self) -> dict:
        """
        Return the profile of the column.

        :return:
        """
        table = self.frequency_table(rounded=False)
        rows = []
        for row in table.itertuples(index=False):
            rows.append(
                dict(
                    category=row[0],
                    frequency=int(row[1]),
                    percentage=float(row[2]),
                    cumulative_perc=float(row[3]),
                )
            )
        return dict(
            variable=self.name,
            categories=self.categories,
            unique_count=self.unique_count,
            missing_count=self.missing_count,
            include_missing=self.include_missing,
            total_count=self.total_count,
            frequency_table=rows,
            times=self.times,
        )

    def report(self, remove_disabled_flag: bool = False) -> dict:
        """
        Return the profile of the column.

        :param remove_disabled_flag: flag to determine if disabled
            options should be excluded in the report.
        :type remove_disabled_flag: boolean
        """
        return self.profile

    @BaseColumnProfiler._timeit(name="categories")
    def _update_categories(self, df_series: pd.Series) -> None:
        """
        Count the labels of the batch, missing cells under their own key.

        Labels are keyed by (type, value) so that True, 1 and 1.0 are
        separate categories.

        :param df_series: cells of the column, missing ones included
        :type df_series: pandas.Series
        :return: None
        """
        na_mask = df_series.isna().tolist()
        counts = Counter(
            MISSING if is_missing else profiler_utils.typed_key(cell)
            for cell, is_missing in zip(df_series.tolist(), na_mask)
        )
        for key, count in counts.items():
            self._categories[key] = self._categories.get(key, 0) + count

    def _update_helper(self, df_series_clean: pd.Series, profile: dict) -> None:
        """
        Update the column profile properties with the batch.

        :param df_series_clean: cells of the batch
        :type df_series_clean: pandas.Series
        :param profile: categorical profile dictionary
        :type profile: dict
        :return: None
        """
        self._update_categories(df_series_clean)
        self.sample_size += profile["sample_size"]

    def update(self, df_series: pd.Series) -> CategoricalColumn:
        """
        Update the column profile.

        :param df_series: cells of the column, missing ones included
        :type df_series: pandas.Series
        :return: updated CategoricalColumn
        :rtype: CategoricalColumn
        """
        if len(df_series) == 0:
            return self

        profile = dict(sample_size=len(df_series))
        self._update_helper(df_series, profile)
        if not self.total_count:
            logger.info(f"Column '{self.name}' has no counted cells.")
        return self
