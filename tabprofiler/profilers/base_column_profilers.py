#!/usr/bin/env python
"""Contains parent column profiler class."""

from __future__ import annotations

import abc
from collections import defaultdict
from typing import Any, Callable, Generic, TypeVar

import numpy as np
import pandas as pd

from . import profiler_utils
from .profiler_options import BaseInspectorOptions

BaseColumnProfilerT = TypeVar("BaseColumnProfilerT", bound="BaseColumnProfiler")


class BaseColumnProfiler(Generic[BaseColumnProfilerT], metaclass=abc.ABCMeta):
    """Abstract class for profiling a column of data."""

    type: str | None = None

    def __init__(self, name: str | None, options: BaseInspectorOptions | None = None):
        """
        Initialize base class properties for the subclass.

        :param name: Name of the column
        :type name: String
        """
        self.name: str | None = name
        self.sample_size: int = 0
        self.times: dict = defaultdict(float)

    @staticmethod
    def _timeit(method: Callable = None, name: str = None) -> Callable:
        """
        Measure execution time of provided method.

        Records time into times dictionary.

        :param method: method to time
        :type method: Callable
        :param name: key argument for the times dictionary
        :type name: str
        """
        return profiler_utils.method_timeit(method, name)

    @staticmethod
    def _filter_properties_w_options(
        calculations: dict, options: BaseInspectorOptions | None
    ) -> None:
        """
        Cycle through the calculations and turns off the ones that are disabled.

        :param calculations: Contains all the column calculations.
        :type calculations: Dict
        :param options: Contains all the options.
        :type options: BaseInspectorOptions
        """
        for prop in list(calculations):
            if options and not options.is_prop_enabled(prop):
                del calculations[prop]

    def _perform_property_calcs(
        self,
        calculations: dict,
        df_series: pd.Series,
        prev_dependent_properties: dict,
        subset_properties: dict,
    ) -> None:
        """
        Cycle through the properties of the columns and calculate them.

        Calculations run in insertion order, so a calculation may read what
        an earlier one stored in subset_properties.

        :param calculations: Contains all the column calculations.
        :type calculations: dict
        :param df_series: Data to be profiled
        :type df_series: pandas.Series
        :param prev_dependent_properties: Contains all the previous properties
            that the calculations depend on.
        :type prev_dependent_properties: dict
        :param subset_properties: Contains the results of the properties of the
            subset before they are merged into the main data profile.
        :type subset_properties: dict
        :return: None
        """
        for prop in calculations:
            calculations[prop](
                self, df_series, prev_dependent_properties, subset_properties
            )

    @staticmethod
    def np_type_to_type(val: Any) -> Any:
        """
        Convert numpy variables to base python type variables.

        :param val: value to check & change
        :type val: numpy type or base type
        :return val: base python type
        :rtype val: int or float
        """
        if isinstance(val, np.integer):
            return int(val)
        if isinstance(val, np.floating):
            return float(val)
        if isinstance(val, tuple):
            return tuple(BaseColumnProfiler.np_type_to_type(v) for v in val)
        return val

    @abc.abstractmethod
    def _update_helper(self, df_series_clean: pd.Series, profile: dict) -> None:
        """Help update the profile."""
        raise NotImplementedError()

    @abc.abstractmethod
    def update(self, df_series: pd.Series) -> BaseColumnProfiler:
        """
        Update the profile.

        :param df_series: Data to profile.
        :type df_series: pandas.Series
        """
        raise NotImplementedError()

    @property
    @abc.abstractmethod
    def profile(self) -> dict:
        """Return the profile of the column."""
        raise NotImplementedError()

    @abc.abstractmethod
    def report(self, remove_disabled_flag: bool = False) -> dict:
        """
        Return report.

        :param remove_disabled_flag: flag to determine if disabled
            options should be excluded in the report.
        :type remove_disabled_flag: boolean
        """
        raise NotImplementedError()
