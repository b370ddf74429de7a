#!/usr/bin/env python
"""Contains the descriptive statistics shared by numeric column profiles."""
from __future__ import annotations

import abc
from typing import TypeVar

import numpy as np
import pandas as pd

from . import profiler_utils
from .base_column_profilers import BaseColumnProfiler
from .profiler_options import NumericalOptions

NumericStatsMixinT = TypeVar("NumericStatsMixinT", bound="NumericStatsMixin")

PERCENTILES = [1, 5, 10, 25, 50, 75, 90, 95, 99]


def percentile_key(percentile: int) -> str:
    """Return the report key of a percentile, e.g. 1 -> p_01."""
    return f"p_{percentile:02d}"


class NumericStatsMixin(BaseColumnProfiler[NumericStatsMixinT], metaclass=abc.ABCMeta):
    """
    Abstract numerical column profile subclass of BaseColumnProfiler.

    Holds the moments and percentiles of the finite values of a column.
    The finite values are kept, so moments and percentiles are exact over
    every update. Percentiles use linear interpolation between order
    statistics.
    """

    type: str | None = None

    def __init__(self, options: NumericalOptions = None) -> None:
        """
        Initialize column base properties and itself.

        :param options: Options for the numerical stats.
        :type options: NumericalOptions
        """
        if options and not isinstance(options, NumericalOptions):
            raise ValueError(
                "NumericalStatsMixin parameter 'options' must be "
                "of type NumericalOptions."
            )
        self._mean: float | np.float64 = np.nan
        self._biased_variance: float | np.float64 = np.nan
        self._biased_skewness: float | np.float64 = np.nan
        self._biased_kurtosis: float | np.float64 = np.nan
        self.bias_correction: bool = True  # By default, we correct for bias
        self._finite_values: np.ndarray = np.array([], dtype=np.float64)
        self._percentiles: dict[int, float] = {
            percentile: np.nan for percentile in PERCENTILES
        }
        self._enabled_stats: set[str] = set(NumericalOptions._NUMERIC_STATS)
        if options:
            self.bias_correction = options.bias_correction.is_enabled
            self._enabled_stats = {
                stat
                for stat in NumericalOptions._NUMERIC_STATS
                if options.is_prop_enabled(stat)
            }
        self.__calculations = {
            "std_dev": NumericStatsMixin._get_variance,
            "skewness": NumericStatsMixin._get_skewness,
            "kurtosis": NumericStatsMixin._get_kurtosis,
            "percentiles": NumericStatsMixin._get_percentiles,
        }
        self._filter_properties_w_options(self.__calculations, options)
        self.match_count: int = 0

    def _is_enabled(self, stat: str) -> bool:
        return stat in self._enabled_stats

    @property
    def mean(self) -> float | np.float64:
        """Return mean value, NaN if there are no finite values."""
        if self.match_count == 0:
            return np.nan
        return self._mean

    @property
    def variance(self) -> float | np.float64:
        """Return variance, NaN with fewer than 2 finite values."""
        if self.match_count < 2:
            return np.nan
        return (
            self._biased_variance
            if not self.bias_correction
            else self._correct_bias_variance(self.match_count, self._biased_variance)
        )

    @property
    def std_dev(self) -> float | np.float64:
        """Return standard deviation, sample (n-1) when bias corrected."""
        return np.sqrt(self.variance)

    @property
    def variation_coef(self) -> float | np.float64:
        """Return std_dev / mean, NaN if the mean is 0 or undefined."""
        mean = self.mean
        if np.isnan(mean) or mean == 0:
            return np.nan
        return self.std_dev / mean

    @property
    def skewness(self) -> float | np.float64:
        """Return skewness value."""
        if self.match_count < 2:
            return np.nan
        return (
            self._biased_skewness
            if not self.bias_correction
            else self._correct_bias_skewness(self.match_count, self._biased_skewness)
        )

    @property
    def kurtosis(self) -> float | np.float64:
        """Return excess kurtosis value."""
        if self.match_count < 2:
            return np.nan
        return (
            self._biased_kurtosis
            if not self.bias_correction
            else self._correct_bias_kurtosis(self.match_count, self._biased_kurtosis)
        )

    @property
    def percentiles(self) -> dict[str, float]:
        """Return the fixed percentiles keyed p_01 ... p_99."""
        return {
            percentile_key(percentile): value
            for percentile, value in self._percentiles.items()
        }

    @property
    def iqr(self) -> float | np.float64:
        """Return the inter-quartile range p_75 - p_25."""
        return self._percentiles[75] - self._percentiles[25]

    @property
    def range_98(self) -> tuple[float, float]:
        """Return the (p_01, p_99) bounds holding the central 98% of values."""
        return (self._percentiles[1], self._percentiles[99])

    @property
    def range_80(self) -> tuple[float, float]:
        """Return the (p_10, p_90) bounds holding the central 80% of values."""
        return (self._percentiles[10], self._percentiles[90])

    @property
    def undefined_stats(self) -> list[str]:
        """Return the enabled statistics that could not be computed."""
        undefined = []
        for stat in ["mean", "std_dev", "variation_coef", "skewness", "kurtosis"]:
            if self._is_enabled(stat) and np.isnan(getattr(self, stat)):
                undefined.append(stat)
        if self._is_enabled("percentiles") and not self.match_count:
            undefined.append("percentiles")
        return undefined

    @property
    def overflowed_stats(self) -> list[str]:
        """Return the enabled statistics too large for a float, reported as inf."""
        return [
            stat
            for stat in ["std_dev", "variation_coef", "iqr"]
            if self._is_enabled(stat) and np.isinf(getattr(self, stat))
        ]

    def profile(self) -> dict:
        """
        Return profile of the column.

        :return:
        """
        profile = dict(
            mean=self.np_type_to_type(self.mean),
            std_dev=self.np_type_to_type(self.std_dev),
            variation_coef=self.np_type_to_type(self.variation_coef),
        )
        profile.update(
            {key: self.np_type_to_type(value) for key, value in self.percentiles.items()}
        )
        profile.update(
            skewness=self.np_type_to_type(self.skewness),
            kurtosis=self.np_type_to_type(self.kurtosis),
            iqr=self.np_type_to_type(self.iqr),
            range_98=self.np_type_to_type(self.range_98),
            range_80=self.np_type_to_type(self.range_80),
            times=self.times,
        )
        return profile

    def report(self, remove_disabled_flag: bool = False) -> dict:
        """
        Call the profile and remove the disabled statistics from the report.

        Disabled statistics are reported as NaN unless remove_disabled_flag
        is set, in which case they are omitted.

        :param remove_disabled_flag: flag to determine if disabled
            options should be excluded in the report.
        :type remove_disabled_flag: boolean
        """
        profile = NumericStatsMixin.profile(self)
        disabled = set(NumericalOptions._NUMERIC_STATS) - self._enabled_stats
        for stat in disabled:
            keys = [stat]
            if stat == "percentiles":
                keys = [percentile_key(percentile) for percentile in PERCENTILES]
            for key in keys:
                if remove_disabled_flag:
                    profile.pop(key, None)
                else:
                    profile[key] = np.nan
        return profile

    @staticmethod
    def _correct_bias_variance(
        match_count: int, biased_variance: float | np.float64
    ) -> float | np.float64:
        """Apply Bessel's correction to the biased variance."""
        if match_count is None or biased_variance is None or match_count < 2:
            return np.nan

        variance = match_count / (match_count - 1) * biased_variance
        return variance

    @staticmethod
    def _correct_bias_skewness(
        match_count: int, biased_skewness: float | np.float64
    ) -> float | np.float64:
        """
        Apply bias correction to skewness.

        :param match_count: number of samples
        :param biased_skewness: skewness without bias correction
        :return: unbiased estimator of skewness
        :rtype: NaN if sample size is too small, float otherwise
        """
        if np.isnan(biased_skewness) or match_count < 3:
            return np.nan

        skewness: np.float64 = (
            np.sqrt(match_count * (match_count - 1))
            * biased_skewness
            / (match_count - 2)
        )
        return skewness

    @staticmethod
    def _correct_bias_kurtosis(
        match_count: int, biased_kurtosis: float | np.float64
    ) -> float | np.float64:
        """
        Apply bias correction to excess kurtosis.

        :param match_count: number of samples
        :param biased_kurtosis: kurtosis without bias correction
        :return: unbiased estimator of kurtosis
        :rtype: NaN if sample size is too small, float otherwise
        """
        if np.isnan(biased_kurtosis) or match_count < 4:
            return np.nan

        kurtosis = (
            (match_count - 1)
            / ((match_count - 2) * (match_count - 3))
            * ((match_count + 1) * (biased_kurtosis + 3) - 3 * (match_count - 1))
        )
        return kurtosis

    def _update_helper(self, df_series_clean: pd.Series, profile: dict) -> None:
        """
        Update base numerical profile properties w/ the finite values of a batch.

        Every statistic is recomputed over all the finite values seen so far,
        so repeated updates match a single update over the concatenated data.

        :param df_series_clean: df series with missing and infinite values
            removed
        :type df_series_clean: pandas.core.series.Series
        :param profile: numerical profile dictionary
        :type profile: dict
        :return: None
        """
        if df_series_clean.empty:
            return

        self._finite_values = np.concatenate(
            [self._finite_values, df_series_clean.to_numpy(dtype=np.float64)]
        )
        values = pd.Series(self._finite_values)
        scale = np.max(np.abs(self._finite_values))
        subset_properties = dict(profile, scale=scale if scale else 1.0)
        self._get_mean(values, {}, subset_properties)
        self._perform_property_calcs(
            self.__calculations,
            df_series=values,
            prev_dependent_properties={},
            subset_properties=subset_properties,
        )

    @BaseColumnProfiler._timeit(name="mean")
    def _get_mean(
        self,
        df_series: pd.Series,
        prev_dependent_properties: dict,
        subset_properties: dict,
    ) -> None:
        with np.errstate(over="ignore"):
            mean = np.mean(df_series.to_numpy())
        if not np.isfinite(mean):
            # the sum overflowed, average the values divided by their scale
            scale = subset_properties["scale"]
            mean = scale * np.mean(df_series.to_numpy() / scale)
        self._mean = mean

    @BaseColumnProfiler._timeit(name="std_dev")
    def _get_variance(
        self,
        df_series: pd.Series,
        prev_dependent_properties: dict,
        subset_properties: dict,
    ) -> None:
        with np.errstate(over="ignore", invalid="ignore"):
            biased_variance = np.var(df_series.to_numpy())
            if not np.isfinite(biased_variance):
                scale = subset_properties["scale"]
                std = scale * np.sqrt(np.var(df_series.to_numpy() / scale))
                biased_variance = np.square(std)
        self._biased_variance = biased_variance

    @BaseColumnProfiler._timeit(name="skewness")
    def _get_skewness(
        self,
        df_series: pd.Series,
        prev_dependent_properties: dict,
        subset_properties: dict,
    ) -> None:
        """
        Compute the biased skewness of the finite values.

        Skewness does not depend on the scale of the data, so it is computed
        over the values divided by their largest magnitude.

        :param df_series: every finite value seen so far
        :type df_series: pandas series
        :param prev_dependent_properties: unused, kept for the calculation
            signature
        :type prev_dependent_properties: dict
        :param subset_properties: holds the scale of the values
        :type subset_properties: dict
        :return None
        """
        self._biased_skewness = profiler_utils.biased_skew(
            df_series / subset_properties["scale"]
        )

    @BaseColumnProfiler._timeit(name="kurtosis")
    def _get_kurtosis(
        self,
        df_series: pd.Series,
        prev_dependent_properties: dict,
        subset_properties: dict,
    ) -> None:
        """
        Compute the biased excess kurtosis of the finite values.

        :param df_series: every finite value seen so far
        :type df_series: pandas series
        :param prev_dependent_properties: unused, kept for the calculation
            signature
        :type prev_dependent_properties: dict
        :param subset_properties: holds the scale of the values
        :type subset_properties: dict
        :return None
        """
        self._biased_kurtosis = profiler_utils.biased_kurt(
            df_series / subset_properties["scale"]
        )

    @BaseColumnProfiler._timeit(name="percentiles")
    def _get_percentiles(
        self,
        df_series: pd.Series,
        prev_dependent_properties: dict,
        subset_properties: dict,
    ) -> None:
        values = profiler_utils.percentiles(df_series.to_numpy(), PERCENTILES)
        self._percentiles = dict(zip(PERCENTILES, values.tolist()))

    @abc.abstractmethod
    def update(self, df_series: pd.Series) -> NumericStatsMixin:
        """
        Update the numerical profile properties with an uncleaned dataset.

        :param df_series: df series with nulls removed
        :type df_series: pandas.core.series.Series
        :return: None
        """
        raise NotImplementedError()
