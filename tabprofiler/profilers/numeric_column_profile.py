"""Numeric profile analysis for individual col within structured profiling."""
from __future__ import annotations

import warnings

import numpy as np
import pandas as pd

from .. import tp_logging
from ..errors import DegenerateColumnWarning
from .base_column_profilers import BaseColumnProfiler
from .numerical_column_stats import NumericStatsMixin
from .profiler_options import NumericalOptions

logger = tp_logging.get_child_logger(__name__)


class NumericColumn(NumericStatsMixin["NumericColumn"]):
    """
    Numeric column profile mixin with numerical stats.

    Missing and infinite values are excluded from every statistic; how many
    were excluded is recorded next to the statistics.
    """

    type = "numeric"

    def __init__(self, name: str | None, options: NumericalOptions = None) -> None:
        """
        Initialize column base properties and itself.

        :param name: Name of the data
        :type name: String
        :param options: Options for the numeric column
        :type options: NumericalOptions
        """
        if options and not isinstance(options, NumericalOptions):
            raise ValueError(
                "NumericColumn parameter 'options' must be of type"
                " NumericalOptions."
            )
        NumericStatsMixin.__init__(self, options)
        BaseColumnProfiler.__init__(self, name)
        self.q_na_excluded: int = 0
        self.q_inf_excluded: int = 0

    @property
    def profile(self) -> dict:
        """
        Return the profile of the column.

        :return:
        """
        profile = dict(variable=self.name)
        profile.update(NumericStatsMixin.profile(self))
        profile.update(self._exclusion_counts())
        return profile

    def report(self, remove_disabled_flag: bool = False) -> dict:
        """
        Return the profile of the column with disabled statistics handled.

        :param remove_disabled_flag: flag to determine if disabled
            options should be excluded in the report.
        :type remove_disabled_flag: boolean
        """
        report = dict(variable=self.name)
        report.update(NumericStatsMixin.report(self, remove_disabled_flag))
        report.update(self._exclusion_counts())
        return report

    def _exclusion_counts(self) -> dict:
        return dict(
            count=self.match_count,
            q_na_excluded=self.q_na_excluded,
            q_inf_excluded=self.q_inf_excluded,
        )

    def _warn_if_degenerate(self) -> None:
        """Warn once per update when an enabled statistic is undefined or overflows."""
        messages = []
        undefined = self.undefined_stats
        if undefined:
            messages.append(
                "Column '{}' has {} finite value(s); {} undefined and reported "
                "as NaN.".format(
                    self.name,
                    self.match_count,
                    ", ".join(undefined) + (" is" if len(undefined) == 1 else " are"),
                )
            )
        overflowed = self.overflowed_stats
        if overflowed:
            messages.append(
                "Column '{}': {} too large for a float and reported as "
                "inf.".format(
                    self.name,
                    ", ".join(overflowed) + (" is" if len(overflowed) == 1 else " are"),
                )
            )
        for message in messages:
            logger.info(message)
            warnings.warn(message, DegenerateColumnWarning)

    def _update_helper(self, df_series_clean: pd.Series, profile: dict) -> None:
        """
        Update column profile properties with cleaned dataset and its known profile.

        :param df_series_clean: df series with missing and infinite values removed
        :type df_series_clean: pandas.core.series.Series
        :param profile: numeric profile dictionary
        :type profile: dict
        :return: None
        """
        NumericStatsMixin._update_helper(self, df_series_clean, profile)
        self.match_count += int(profile["match_count"])
        self.q_na_excluded += int(profile["q_na"])
        self.q_inf_excluded += int(profile["q_inf"])
        self.sample_size += int(profile["sample_size"])

    def update(self, df_series: pd.Series) -> NumericColumn:
        """
        Update the column profile.

        :param df_series: df series, missing and infinite values included
        :type df_series: pandas.core.series.Series
        :return: updated NumericColumn
        :rtype: NumericColumn
        """
        values = pd.to_numeric(df_series).astype("float64")
        na_mask = values.isna()
        inf_mask = np.isinf(values.fillna(0.0))
        finite_values = values[~na_mask & ~inf_mask]
        profile = dict(
            match_count=len(finite_values),
            sample_size=len(values),
            q_na=int(na_mask.sum()),
            q_inf=int(inf_mask.sum()),
        )

        self._update_helper(df_series_clean=finite_values, profile=profile)
        self._warn_if_degenerate()
        return self
