"""Contains class for the per column status report (zeros, missing, infinite)."""
from __future__ import annotations

import numpy as np
import pandas as pd

from ..data_readers.dataset import CATEGORICAL, COLUMN_KINDS, NUMERIC
from . import profiler_utils
from .base_column_profilers import BaseColumnProfiler
from .profiler_options import StatusOptions


class StatusColumn(BaseColumnProfiler["StatusColumn"]):
    """
    Status column profile subclass of BaseColumnProfiler.

    Counts the zero, missing, infinite and unique cells of a column. Zeros
    and infinite values are only counted for numeric columns.
    """

    type = "status"

    def __init__(
        self,
        name: str | None,
        kind: str = NUMERIC,
        options: StatusOptions = None,
    ) -> None:
        """
        Initialize column base properties and itself.

        :param name: Name of the column
        :type name: String
        :param kind: declared kind of the column, "numeric" or "categorical"
        :type kind: String
        :param options: Options for the status report
        :type options: StatusOptions
        """
        if options and not isinstance(options, StatusOptions):
            raise ValueError(
                "StatusColumn parameter 'options' must be of type StatusOptions."
            )
        if kind not in COLUMN_KINDS:
            raise ValueError(
                f"StatusColumn parameter 'kind' must be one of {list(COLUMN_KINDS)}."
            )
        super().__init__(name)
        self.kind = kind
        self.q_zeros: int = 0
        self.q_na: int = 0
        self.q_inf: int = 0
        self._unique_values: set = set()
        self.__calculations = {
            "unique": StatusColumn._get_unique,
        }
        self._filter_properties_w_options(self.__calculations, options)

    @property
    def unique(self) -> int | None:
        """Return the number of distinct non-missing values."""
        if "unique" not in self.__calculations:
            return None
        return len(self._unique_values)

    def _percent(self, count: int) -> float:
        """Return count as a percentage of the rows, 0 if there are none."""
        if not self.sample_size:
            return 0.0
        return 100.0 * count / self.sample_size

    @property
    def p_zeros(self) -> float:
        """Return the percentage of zero cells."""
        return self._percent(self.q_zeros)

    @property
    def p_na(self) -> float:
        """Return the percentage of missing cells."""
        return self._percent(self.q_na)

    @property
    def p_inf(self) -> float:
        """Return the percentage of infinite cells."""
        return self._percent(self.q_inf)

    @property
    def profile(self) -> dict:
        """Return the profile of the column."""
        return dict(
            variable=self.name,
            q_zeros=self.q_zeros,
            p_zeros=self.p_zeros,
            q_na=self.q_na,
            p_na=self.p_na,
            q_inf=self.q_inf,
            p_inf=self.p_inf,
            type=self.kind,
            unique=self.unique,
            times=self.times,
        )

    def report(self, remove_disabled_flag: bool = False) -> dict:
        """
        Return the status report of the column.

        :param remove_disabled_flag: flag to determine if disabled
            options should be excluded in the report.
        :type remove_disabled_flag: boolean
        """
        report = self.profile
        if remove_disabled_flag and "unique" not in self.__calculations:
            report.pop("unique")
        return report

    @BaseColumnProfiler._timeit(name="unique")
    def _get_unique(
        self,
        df_series: pd.Series,
        prev_dependent_properties: dict,
        subset_properties: dict,
    ) -> None:
        """
        Add the distinct non-missing values of the batch.

        Categorical cells are keyed by (type, value), as in the frequency
        tables, so True, 1 and 1.0 count as three values.

        :param df_series: non-missing cells
        :type df_series: pandas.Series
        :param prev_dependent_properties: previous dependent properties
        :type prev_dependent_properties: dict
        :param subset_properties: subset of properties
        :type subset_properties: dict
        :return: None
        """
        if self.kind == CATEGORICAL:
            self._unique_values.update(
                profiler_utils.typed_key(cell) for cell in df_series.tolist()
            )
        else:
            self._unique_values.update(pd.unique(df_series))
        subset_properties["unique"] = len(self._unique_values)

    @BaseColumnProfiler._timeit(name="counts")
    def _update_helper(self, df_series_clean: pd.Series, profile: dict) -> None:
        """
        Update the zero and infinite counts from the non-missing cells.

        :param df_series_clean: df series with missing cells removed
        :type df_series_clean: pandas.Series
        :param profile: status profile dictionary of the batch
        :type profile: dict
        :return: None
        """
        if self.kind == NUMERIC and len(df_series_clean):
            values = df_series_clean.to_numpy(dtype="float64")
            profile["q_zeros"] = int(np.sum(values == 0))
            profile["q_inf"] = int(np.sum(np.isinf(values)))
        self.q_zeros += profile.get("q_zeros", 0)
        self.q_inf += profile.get("q_inf", 0)
        self.q_na += profile["q_na"]
        self.sample_size += profile["sample_size"]

    def update(self, df_series: pd.Series) -> StatusColumn:
        """
        Update the column status with a batch of cells.

        :param df_series: cells of the column, missing ones included
        :type df_series: pandas.Series
        :return: updated StatusColumn
        :rtype: StatusColumn
        """
        na_mask = df_series.isna()
        df_series_clean = df_series[~na_mask]
        profile = dict(sample_size=len(df_series), q_na=int(na_mask.sum()))

        if self.kind == CATEGORICAL:
            df_series_clean = df_series_clean.astype(object)
        self._perform_property_calcs(
            self.__calculations,
            df_series=df_series_clean,
            prev_dependent_properties={},
            subset_properties=profile,
        )
        self._update_helper(df_series_clean, profile)
        return self
