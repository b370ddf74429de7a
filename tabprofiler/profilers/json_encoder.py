"""Contains ProfileEncoder class."""

import json
from datetime import datetime

import numpy as np
import pandas as pd

from . import (
    base_column_profilers,
    categorical_column_profile,
    numerical_column_stats,
    profile_builder,
    profiler_options,
)


class ProfileEncoder(json.JSONEncoder):
    """JSONify profiler objects and it subclasses and contents."""

    def default(self, to_serialize):
        """
        Specify how an object should be serialized.

        :param to_serialize: an object to be serialized
        :type to_serialize: a BaseColumnProfile object

        :raises: TypeError

        :return: a datatype serializble by json.JSONEncoder
        """
        if isinstance(to_serialize, categorical_column_profile.CategoricalColumn):
            # Category labels are not all valid JSON keys
            data = dict(to_serialize.__dict__)
            data["_categories"] = [
                [None if key is categorical_column_profile.MISSING else key[1], count]
                for key, count in to_serialize._categories.items()
            ]
            return {"class": type(to_serialize).__name__, "data": data}
        elif isinstance(
            to_serialize,
            (
                base_column_profilers.BaseColumnProfiler,
                numerical_column_stats.NumericStatsMixin,
                profiler_options.BaseOption,
                profile_builder.StructuredColProfiler,
            ),
        ):
            return {"class": type(to_serialize).__name__, "data": to_serialize.__dict__}
        elif isinstance(to_serialize, set):
            return list(to_serialize)
        elif isinstance(to_serialize, np.integer):
            return int(to_serialize)
        elif isinstance(to_serialize, np.floating):
            return float(to_serialize)
        elif isinstance(to_serialize, np.bool_):
            return bool(to_serialize)
        elif isinstance(to_serialize, np.ndarray):
            return to_serialize.tolist()
        elif isinstance(to_serialize, pd.DataFrame):
            return to_serialize.to_dict(orient="records")
        elif isinstance(to_serialize, (pd.Timestamp, datetime)):
            return to_serialize.isoformat()
        elif callable(to_serialize):
            return to_serialize.__name__

        return json.JSONEncoder.default(self, to_serialize)
