"""Contains functions for formatting profiler reports."""
from __future__ import annotations

import numpy as np


def flat_dict(od: dict, separator: str = "_", key: str = "") -> dict:
    """
    Flatten nested dictionary.

    Each level is collapsed and joined with the specified separator.

    :param od: dictionary or dictionary-like object
    :type od: dict
    :param separator: character(s) joining successive levels
    :type separator: str
    :param key: concatenated keys
    :type key: str
    :returns: unnested dictionary
    :rtype: dict
    """
    return (
        {
            str(key).replace(" ", "_") + separator + str(k) if key else k: v
            for kk, vv in od.items()
            for k, v in flat_dict(vv, separator, kk).items()
        }
        if isinstance(od, dict)
        else {key: od}
    )


def _split_omit_keys(omit_keys: list[str], key: str) -> list[str]:
    """Return the omit keys that apply one level below key."""
    next_layer_omit_keys = []
    for omit_key in omit_keys:
        omit_key_split = omit_key.split(".", 1)
        if len(omit_key_split) > 1 and omit_key_split[1]:
            if omit_key_split[0] in {"*", key}:
                next_layer_omit_keys.append(omit_key_split[1])
    return next_layer_omit_keys


def _format_list(value: list | tuple | np.ndarray, output_format: str | None):
    """Format a list-like report value for the requested output format."""
    max_str_len = 50
    max_array_len = 5

    if output_format == "pretty":
        value = np.array(value)
        str_value = np.array2string(value, separator=", ")
        if len(str_value) > max_str_len and len(value) > max_array_len:
            ind = 1
            str_value = ""
            while len(str_value) <= max_str_len:
                str_value = (
                    np.array2string(value[:ind], separator=", ")[:-1]
                    + ", ... , "
                    + np.array2string(value[-ind:], separator=", ")[1:]
                )
                ind += 1
        return str_value
    elif output_format == "serializable":
        if isinstance(value, np.ndarray):
            return value.tolist()
        return list(value)
    return value


def _prepare_report(
    report: dict, output_format: str = None, omit_keys: list[str] = None
) -> dict:
    """
    Prepare report dictionary for users upon request.

    output_format options:

    - Pretty: floats are rounded to four decimal places & lists are shortened.
    - Compact: Similar to pretty, but removes detailed statistics such as
               runtimes and the full frequency tables
    - Serializable: Output is json serializable and not prettified
    - Flat: Nested output is returned as a flattened dictionary

    :param report: contains the values identified from the profile
    :type report: dict()
    :param output_format: designation for how to format the returned report;
                          possible options: pretty, serializable, flat, compact
    :type output_format: str
    :param omit_keys: Keys to omit from the output report, to omit keys in the
                      report a '.' represents a level of recursion example:
                      report: { 'test1': { 'test2': val, 'test3': val },
                      to omit key 'test3' from report: omit_keys=['test1.test3']
                      wildcards are also possible, so: omit_keys=['*.test3']
    :type omit_keys: list(str)
    :return report: handle to the updated report
    :type report: dict()
    """
    if output_format is not None:
        output_format = output_format.lower()
    omit_keys = list(omit_keys) if omit_keys else []

    fmt_report: dict = {}

    if output_format == "compact":
        omit_keys.extend(
            [
                "global_stats.times",
                "data_stats.*.status.times",
                "data_stats.*.statistics.times",
                "data_stats.*.statistics.frequency_table",
            ]
        )
        output_format = "pretty"

    if "*" in omit_keys:
        return fmt_report

    for key in report:

        # Remove any keys omitted
        if key in omit_keys:
            continue

        value = report[key]

        # Convert set to list, for report generation
        if isinstance(value, set):
            value = sorted(list(value))

        # For data_stats, need to recurse through a list of columns
        if key == "data_stats" and isinstance(value, list):

            fmt_report["data_stats"] = []

            for col_report in value:
                col_name = str(col_report.get("column_name"))

                next_layer_omit_keys = []
                is_omitted_col = False
                for omit_key in omit_keys:

                    # Omit this column
                    if omit_key in {
                        f"*.{col_name}",
                        "data_stats.*",
                        f"data_stats.{col_name}",
                    }:
                        fmt_report["data_stats"].append(None)
                        is_omitted_col = True
                        break

                    # Skip this omit_key if it doesn't involve data_stat cols
                    omit_key_split = omit_key.split(".", 1)
                    if len(omit_key_split) == 1 or omit_key_split[0] not in {
                        "data_stats",
                        "*",
                    }:
                        continue

                    next_key_split = omit_key_split[1].split(".", 1)
                    if len(next_key_split) > 1 and next_key_split[0] in {
                        "*",
                        col_name,
                    }:
                        next_layer_omit_keys.append(next_key_split[1])

                if not is_omitted_col:
                    fmt_report["data_stats"].append(
                        _prepare_report(col_report, output_format, next_layer_omit_keys)
                    )

        # Do not recurse or modify profile_schema
        elif key == "profile_schema":
            fmt_report[key] = value

        elif isinstance(value, dict):
            fmt_report[key] = _prepare_report(
                value, output_format, _split_omit_keys(omit_keys, key)
            )

        elif isinstance(value, list) and value and isinstance(value[0], dict):
            # Rows of a frequency table
            fmt_report[key] = [
                _prepare_report(row, output_format, _split_omit_keys(omit_keys, key))
                for row in value
            ]

        elif isinstance(value, (list, tuple, np.ndarray)):
            fmt_report[key] = _format_list(value, output_format)

        elif isinstance(value, float) and output_format == "pretty":
            fmt_report[key] = round(value, 4)
        else:
            fmt_report[key] = value

    if output_format == "flat":
        fmt_report = flat_dict(fmt_report)

    return fmt_report
