import json
import unittest
from datetime import datetime

import numpy as np
import pandas as pd

from tabprofiler.data_readers.dataset import NUMERIC, Column
from tabprofiler.profilers.categorical_column_profile import CategoricalColumn
from tabprofiler.profilers.json_encoder import ProfileEncoder
from tabprofiler.profilers.numeric_column_profile import NumericColumn
from tabprofiler.profilers.profile_builder import StructuredColProfiler
from tabprofiler.profilers.profiler_options import BooleanOption, ProfilerOptions
from tabprofiler.profilers.status_column_profile import StatusColumn


class TestJsonEncoder(unittest.TestCase):
    def test_encode_status_column(self):
        profile = StatusColumn("0", kind=NUMERIC)

        serialized = json.loads(json.dumps(profile, cls=ProfileEncoder))
        self.assertEqual("StatusColumn", serialized["class"])
        data = serialized["data"]
        self.assertEqual("0", data["name"])
        self.assertEqual(0, data["sample_size"])
        self.assertEqual(0, data["q_zeros"])
        self.assertEqual([], data["_unique_values"])
        self.assertDictEqual(
            {"unique": "_get_unique"}, data["_StatusColumn__calculations"]
        )

    def test_encode_categorical_column_after_update(self):
        profile = CategoricalColumn("letters")
        profile.update(pd.Series(["a", "b", "a", None]))

        serialized = json.loads(json.dumps(profile, cls=ProfileEncoder))
        self.assertEqual("CategoricalColumn", serialized["class"])
        self.assertListEqual(
            [["a", 2], ["b", 1], [None, 1]], serialized["data"]["_categories"]
        )
        self.assertEqual(4, serialized["data"]["sample_size"])

    def test_encode_numeric_column_after_update(self):
        profile = NumericColumn("x")
        profile.update(pd.Series([1, 2, 3, 4, 100]))

        serialized = json.loads(json.dumps(profile, cls=ProfileEncoder))
        self.assertEqual("NumericColumn", serialized["class"])
        data = serialized["data"]
        self.assertEqual(5, data["match_count"])
        self.assertEqual(22.0, data["_mean"])
        self.assertListEqual([1.0, 2.0, 3.0, 4.0, 100.0], data["_finite_values"])
        self.assertEqual(3.0, data["_percentiles"]["50"])

    def test_encode_options(self):
        serialized = json.loads(json.dumps(BooleanOption(), cls=ProfileEncoder))
        self.assertDictEqual(
            {"class": "BooleanOption", "data": {"is_enabled": True}}, serialized
        )

        serialized = json.loads(json.dumps(ProfilerOptions(), cls=ProfileEncoder))
        self.assertEqual("ProfilerOptions", serialized["class"])
        self.assertEqual("NumericalOptions", serialized["data"]["numerical"]["class"])
        self.assertEqual(10, serialized["data"]["presentation"]["data"]["bins"])

    def test_encode_structured_col_profiler(self):
        column = Column("x", [0.0, 1.5, np.nan], kind=NUMERIC)
        profile = StructuredColProfiler(column).update_column_profilers(column.values)

        serialized = json.loads(json.dumps(profile, cls=ProfileEncoder))
        self.assertEqual("StructuredColProfiler", serialized["class"])
        profiles = serialized["data"]["profiles"]
        self.assertEqual("StatusColumn", profiles["status"]["class"])
        self.assertEqual("NumericColumn", profiles["statistics"]["class"])

    def test_encode_numpy_and_pandas_values(self):
        to_serialize = {
            "int": np.int64(3),
            "float": np.float32(0.5),
            "bool": np.bool_(True),
            "array": np.array([1, 2]),
            "set": {1},
            "frame": pd.DataFrame({"a": [1, 2]}),
            "when": datetime(2022, 1, 2, 3, 4),
            "stamp": pd.Timestamp("2022-01-02"),
        }
        serialized = json.loads(json.dumps(to_serialize, cls=ProfileEncoder))
        self.assertDictEqual(
            {
                "int": 3,
                "float": 0.5,
                "bool": True,
                "array": [1, 2],
                "set": [1],
                "frame": [{"a": 1}, {"a": 2}],
                "when": "2022-01-02T03:04:00",
                "stamp": "2022-01-02T00:00:00",
            },
            serialized,
        )

    def test_unknown_object_raises(self):
        with self.assertRaises(TypeError):
            json.dumps(object(), cls=ProfileEncoder)
