#!/usr/bin/env python
"""Specify the options when running the tabular profiler."""
from __future__ import annotations

import abc
import copy
import os
import warnings

from ..errors import ConfigurationError


class BaseOption:
    """For configuring options."""

    @property
    def properties(self) -> dict[str, BooleanOption]:
        """
        Return a copy of the option properties.

        :return: dictionary of the option's properties attr: value
        :rtype: dict
        """
        return copy.deepcopy(self.__dict__)

    def _set_helper(self, options: dict[str, bool], variable_path: str) -> None:
        """
        Set all the options.

        Send in a dict that contains all of or a subset of
        the appropriate options. Set the values of the options. Will raise error
        if the formatting is improper.

        :param options: dict containing the options you want to set.
        :type options: dict
        :param variable_path: current path to variable set.
        :type variable_path: str
        :return: None
        """
        if not isinstance(options, dict):
            raise ValueError("The options must be a dictionary.")

        if not isinstance(variable_path, str):
            raise ValueError("The variable path must be a string.")

        for option in options:
            option_list = option.split(".", 1)
            option_name = option_list[0]

            is_check_all = False
            if option_name == "*":
                option_list = option_list[1].split(".", 1)
                option_name = option_list[0]
                is_check_all = True

            option_variable_path = (
                variable_path + "." + option_name if variable_path else option_name
            )
            if option_name in self.properties:
                option_prop = getattr(self, option_name)
                if isinstance(option_prop, BaseOption):
                    option_key = option_list[1]
                    option_prop._set_helper(
                        {option_key: options[option]},
                        variable_path=option_variable_path,
                    )
                elif len(option_list) > 1:
                    raise AttributeError(
                        "type object '{}' has no attribute '{}'".format(
                            option_variable_path, option_list[1]
                        )
                    )
                else:
                    setattr(self, option_name, options[option])
            elif len(option_list) > 1 or is_check_all:
                for class_option_name in self.properties:
                    class_option = getattr(self, class_option_name)
                    if isinstance(class_option, BaseOption):
                        option_variable_path = (
                            variable_path + "." + class_option_name
                            if variable_path
                            else class_option_name
                        )
                        class_option._set_helper(
                            {option: options[option]},
                            variable_path=option_variable_path,
                        )
            else:
                error_path = variable_path if variable_path else self.__class__.__name__
                raise AttributeError(
                    f"type object '{error_path}' has no attribute '{option}'"
                )

    def set(self, options: dict[str, bool]) -> None:
        """
        Set all the options.

        Send in a dict that contains all of or a subset of
        the appropriate options. Set the values of the options. Will raise error
        if the formatting is improper.

        :param options: dict containing the options you want to set.
        :type options: dict
        :return: None
        """
        if not isinstance(options, dict):
            raise ValueError("The options must be a dictionary.")
        self._set_helper(options, variable_path="")

    @abc.abstractmethod
    def _validate_helper(self, variable_path: str = "") -> list[str]:
        """
        Validate the options don't cause errors and return possible errors.

        :param variable_path: Current path to variable set.
        :type variable_path: str
        :return: List of errors (if raise_error is false)
        :rtype: list(str)
        """
        raise NotImplementedError()

    def validate(self, raise_error: bool = True) -> list[str] | None:
        """
        Validate the options do not conflict and cause errors.

        Raises error/warning if so.

        :param raise_error: Flag that raises errors if true. Returns errors if
            false.
        :type raise_error: bool
        :return: list of errors (if raise_error is false)
        :rtype: list(str)
        """
        errors = self._validate_helper()
        if raise_error and errors:
            raise ConfigurationError("\n".join(errors), errors)
        elif errors:
            return errors
        return None

    def __eq__(self, other: object) -> bool:
        """
        Determine equality by ensuring equality of all attributes.

        Some of the attributes may be Options objects themselves.
        """
        if not isinstance(other, self.__class__):
            return False

        return self.__dict__ == other.__dict__


class BooleanOption(BaseOption):
    """For setting Boolean options."""

    def __init__(self, is_enabled: bool = True) -> None:
        """
        Initialize Boolean option.

        :ivar is_enabled: boolean option to enable/disable the option.
        :vartype is_enabled: bool
        """
        self.is_enabled = is_enabled

    def _validate_helper(self, variable_path: str = "BooleanOption") -> list[str]:
        """
        Validate the options do not conflict and cause errors.

        :param variable_path: current path to variable set.
        :type variable_path: str
        :return: list of errors (if raise_error is false)
        :rtype: list(str)
        """
        if not isinstance(variable_path, str):
            raise ValueError("The variable path must be a string.")

        errors: list[str] = []
        if not isinstance(self.is_enabled, bool):
            errors = [f"{variable_path}.is_enabled must be a Boolean."]
        return errors


class BaseInspectorOptions(BooleanOption):
    """For setting Base options."""

    def __init__(self, is_enabled: bool = True) -> None:
        """
        Initialize Base options for all the columns.

        :ivar is_enabled: boolean option to enable/disable the column.
        :vartype is_enabled: bool
        """
        super().__init__(is_enabled=is_enabled)

    def _validate_helper(
        self, variable_path: str = "BaseInspectorOptions"
    ) -> list[str]:
        """
        Validate the options do not conflict and cause errors.

        :param variable_path: current path to variable set.
        :type variable_path: str
        :return: list of errors (if raise_error is false)
        :rtype: list(str)
        """
        return super()._validate_helper(variable_path)

    def is_prop_enabled(self, prop: str) -> bool:
        """
        Check to see if a property is enabled or not and returns boolean.

        :param prop: The option to check if it is enabled
        :type prop: String
        :return: Whether or not the property is enabled
        :rtype: Boolean
        """
        is_enabled = True
        if prop not in self.properties:
            raise AttributeError(
                'Property "{}" does not exist in {}.'.format(
                    prop, self.__class__.__name__
                )
            )
        option_prop = getattr(self, prop)
        if isinstance(option_prop, bool):
            is_enabled = option_prop
        elif isinstance(option_prop, BooleanOption):
            is_enabled = option_prop.is_enabled
        return is_enabled


class StatusOptions(BaseInspectorOptions):
    """For configuring options for the column status report."""

    def __init__(self, is_enabled: bool = True) -> None:
        """
        Initialize options for the column status report.

        :ivar is_enabled: boolean option to enable/disable the status report.
        :vartype is_enabled: bool
        :ivar unique: boolean option to enable/disable the unique count
        :vartype unique: BooleanOption
        """
        BaseInspectorOptions.__init__(self, is_enabled=is_enabled)
        self.unique = BooleanOption(is_enabled=True)

    def _validate_helper(self, variable_path: str = "StatusOptions") -> list[str]:
        """
        Validate the options do not conflict and cause errors.

        :param variable_path: current path to variable set.
        :type variable_path: str
        :return: list of errors (if raise_error is false)
        :rtype: list(str)
        """
        errors = super()._validate_helper(variable_path)
        if not isinstance(self.unique, BooleanOption):
            errors.append(f"{variable_path}.unique must be a BooleanOption.")
        else:
            errors += self.unique._validate_helper(variable_path + ".unique")
        return errors


class CategoricalOptions(BaseInspectorOptions):
    """For configuring options Categorical Column."""

    def __init__(
        self,
        is_enabled: bool = True,
        include_missing: bool = True,
        plot: bool = False,
        missing_label: str = "NA",
    ) -> None:
        """
        Initialize options for the Categorical Column.

        :ivar is_enabled: boolean option to enable/disable the column.
        :vartype is_enabled: bool
        :ivar include_missing: count missing cells as their own category
        :vartype include_missing: bool
        :ivar plot: render a bar chart of each frequency table
        :vartype plot: bool
        :ivar missing_label: label used for the missing category
        :vartype missing_label: str
        """
        BaseInspectorOptions.__init__(self, is_enabled=is_enabled)
        self.include_missing = include_missing
        self.plot = plot
        self.missing_label = missing_label

    def _validate_helper(self, variable_path: str = "CategoricalOptions") -> list[str]:
        """
        Validate the options do not conflict and cause errors.

        :param variable_path: current path to variable set.
        :type variable_path: str
        :return: list of errors (if raise_error is false)
        :rtype: list(str)
        """
        errors = super()._validate_helper(variable_path)
        for item in ["include_missing", "plot"]:
            if not isinstance(getattr(self, item), bool):
                errors.append(f"{variable_path}.{item} must be a Boolean.")
        if not isinstance(self.missing_label, str) or not self.missing_label:
            errors.append(f"{variable_path}.missing_label must be a non-empty string.")
        return errors


class NumericalOptions(BaseInspectorOptions):
    """For configuring options for the numeric column profile."""

    _NUMERIC_STATS = [
        "mean",
        "std_dev",
        "variation_coef",
        "percentiles",
        "skewness",
        "kurtosis",
        "iqr",
        "range_98",
        "range_80",
    ]

    def __init__(self) -> None:
        """
        Initialize Options for the numeric column profile.

        :ivar is_enabled: boolean option to enable/disable the column.
        :vartype is_enabled: bool
        :ivar mean: boolean option to enable/disable mean
        :vartype mean: BooleanOption
        :ivar std_dev: boolean option to enable/disable std_dev
        :vartype std_dev: BooleanOption
        :ivar variation_coef: boolean option to enable/disable variation_coef
        :vartype variation_coef: BooleanOption
        :ivar percentiles: boolean option to enable/disable p_01 ... p_99
        :vartype percentiles: BooleanOption
        :ivar skewness: boolean option to enable/disable skewness
        :vartype skewness: BooleanOption
        :ivar kurtosis: boolean option to enable/disable kurtosis
        :vartype kurtosis: BooleanOption
        :ivar iqr: boolean option to enable/disable iqr
        :vartype iqr: BooleanOption
        :ivar range_98: boolean option to enable/disable range_98
        :vartype range_98: BooleanOption
        :ivar range_80: boolean option to enable/disable range_80
        :vartype range_80: BooleanOption
        :ivar bias_correction : boolean option to enable/disable existence of bias
        :vartype bias: BooleanOption
        """
        self.mean = BooleanOption(is_enabled=True)
        self.std_dev = BooleanOption(is_enabled=True)
        self.variation_coef = BooleanOption(is_enabled=True)
        self.percentiles = BooleanOption(is_enabled=True)
        self.skewness = BooleanOption(is_enabled=True)
        self.kurtosis = BooleanOption(is_enabled=True)
        self.iqr = BooleanOption(is_enabled=True)
        self.range_98 = BooleanOption(is_enabled=True)
        self.range_80 = BooleanOption(is_enabled=True)
        # By default, we correct for bias
        self.bias_correction = BooleanOption(is_enabled=True)
        BaseInspectorOptions.__init__(self)

    @property
    def is_numeric_stats_enabled(self) -> bool:
        """
        Return the state of numeric stats being enabled / disabled.

        If any numeric stats property is enabled it will return True,
        otherwise it will return False.

        :return: true if any numeric stats property is enabled, otherwise false
        :rtype bool:
        """
        return any(getattr(self, stat).is_enabled for stat in self._NUMERIC_STATS)

    @is_numeric_stats_enabled.setter
    def is_numeric_stats_enabled(self, value: bool) -> None:
        """
        Enable or disable all numeric stats properties.

        :param value: boolean to enable/disable all numeric stats properties
        :type value: bool
        :return: None
        """
        for stat in self._NUMERIC_STATS:
            getattr(self, stat).is_enabled = value

    @property
    def properties(self) -> dict[str, BooleanOption]:
        """
        Include is_numeric_stats_enabled.

            is_numeric_stats_enabled: Turns on or off every statistic.
        """
        props: dict = super().properties
        props["is_numeric_stats_enabled"] = self.is_numeric_stats_enabled
        return props

    def _validate_helper(self, variable_path: str = "NumericalOptions") -> list[str]:
        """
        Validate the options do not conflict and cause errors.

        :param variable_path: current path to variable set.
        :type variable_path: str
        :return: list of errors (if raise_error is false)
        :rtype: list(str)
        """
        if not variable_path:
            variable_path = self.__class__.__name__

        errors = super()._validate_helper(variable_path=variable_path)
        for item in self._NUMERIC_STATS + ["bias_correction"]:
            if not isinstance(self.properties[item], BooleanOption):
                errors.append(f"{variable_path}.{item} must be a BooleanOption.")
            else:
                errors += self.properties[item]._validate_helper(
                    variable_path=variable_path + "." + item
                )
        if errors:
            return errors

        # Error checks for dependent calculations
        mean_disabled = not self.mean.is_enabled
        std_disabled = not self.std_dev.is_enabled
        skew_disabled = not self.skewness.is_enabled
        percentiles_disabled = not self.percentiles.is_enabled
        if (mean_disabled or std_disabled) and self.variation_coef.is_enabled:
            errors.append(
                "{}: The numeric stats must toggle on the mean and std_dev "
                "if the variation_coef is toggled on.".format(variable_path)
            )
        if std_disabled and not skew_disabled:
            errors.append(
                "{}: The numeric stats must toggle on the std_dev "
                "if skewness is toggled on.".format(variable_path)
            )
        if (std_disabled or skew_disabled) and self.kurtosis.is_enabled:
            errors.append(
                "{}: The numeric stats must toggle on std_dev and "
                "skewness if kurtosis is toggled on.".format(variable_path)
            )
        for item in ["iqr", "range_98", "range_80"]:
            if percentiles_disabled and getattr(self, item).is_enabled:
                errors.append(
                    "{}: The numeric stats must toggle on percentiles "
                    "if {} is toggled on.".format(variable_path, item)
                )

        # warn user if all stats are disabled
        if not errors and not self.is_numeric_stats_enabled:
            warnings.warn(
                "{}.numeric_stats: The numeric stats are completely "
                "disabled.".format(variable_path)
            )
        return errors


class PresentationOptions(BaseOption):
    """For configuring how profiling results are echoed and exported."""

    def __init__(
        self,
        print_results: bool = False,
        path_out: str | None = None,
        bins: int = 10,
    ) -> None:
        """
        Initialize options for the presentation of the results.

        None of these options change a computed value.

        :ivar print_results: print the result tables to stdout
        :vartype print_results: bool
        :ivar path_out: directory where rendered tables and figures are saved
        :vartype path_out: Union[str, None]
        :ivar bins: number of histogram buckets for numeric plots
        :vartype bins: int
        """
        self.print_results = print_results
        self.path_out = path_out
        self.bins = bins

    def _validate_helper(
        self, variable_path: str = "PresentationOptions"
    ) -> list[str]:
        """
        Validate the options do not conflict and cause errors.

        :param variable_path: current path to variable set.
        :type variable_path: str
        :return: list of errors (if raise_error is false)
        :rtype: list(str)
        """
        if not isinstance(variable_path, str):
            raise ValueError("The variable path must be a string.")

        errors = []
        if not isinstance(self.print_results, bool):
            errors.append(f"{variable_path}.print_results must be a Boolean.")
        if self.path_out is not None and (
            not isinstance(self.path_out, (str, os.PathLike))
            or not str(self.path_out)
        ):
            errors.append(
                f"{variable_path}.path_out must be either None or a non-empty path."
            )
        if (
            isinstance(self.bins, bool)
            or not isinstance(self.bins, int)
            or self.bins < 1
        ):
            errors.append(f"{variable_path}.bins must be a positive integer.")
        return errors


class ProfilerOptions(BaseOption):
    """For configuring options for profiler."""

    def __init__(self, presets: str = None) -> None:
        """
        Initialize the ProfilerOptions object.

        :ivar multiprocess: profile columns in a process pool
        :vartype multiprocess: BooleanOption
        :ivar status: option set for the column status report
        :vartype status: StatusOptions
        :ivar category: option set for frequency tables
        :vartype category: CategoricalOptions
        :ivar numerical: option set for numeric profiles
        :vartype numerical: NumericalOptions
        :ivar presentation: option set for echoing and exporting results
        :vartype presentation: PresentationOptions
        """
        self.multiprocess = BooleanOption(is_enabled=False)
        self.status = StatusOptions()
        self.category = CategoricalOptions()
        self.numerical = NumericalOptions()
        self.presentation = PresentationOptions()
        self.presets = presets
        if self.presets:
            if self.presets == "complete":
                self._complete_presets()
            elif self.presets == "numeric_stats_disabled":
                self._numeric_stats_disabled_presets()

    def _complete_presets(self) -> None:
        self.set({"*.is_enabled": True})
        self.multiprocess.is_enabled = False

    def _numeric_stats_disabled_presets(self) -> None:
        self.set({"numerical.is_numeric_stats_enabled": False})

    def _validate_helper(self, variable_path: str = "ProfilerOptions") -> list[str]:
        """
        Validate the options do not conflict and cause errors.

        :param variable_path: current path to variable set.
        :type variable_path: str
        :return: list of errors (if raise_error is false)
        :rtype: list(str)
        """
        if not isinstance(variable_path, str):
            raise ValueError("The variable path must be a string.")

        errors = []
        if self.presets not in (None, "complete", "numeric_stats_disabled"):
            errors.append(
                "{}.presets must be one of None, 'complete' or "
                "'numeric_stats_disabled'.".format(variable_path)
            )
        option_types = {
            "multiprocess": BooleanOption,
            "status": StatusOptions,
            "category": CategoricalOptions,
            "numerical": NumericalOptions,
            "presentation": PresentationOptions,
        }
        for item, option_type in option_types.items():
            option = getattr(self, item)
            if not isinstance(option, option_type):
                errors.append(
                    "{}.{} must be a(n) {}.".format(
                        variable_path, item, option_type.__name__
                    )
                )
            else:
                errors += option._validate_helper(
                    variable_path=variable_path + "." + item
                )
        return errors
