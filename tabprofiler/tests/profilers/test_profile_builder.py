import io
import json
import os
import tempfile
import unittest
import warnings
from unittest import mock

import numpy as np
import pandas as pd
import scipy.stats

from tabprofiler.data_readers.dataset import CATEGORICAL, NUMERIC, Dataset
from tabprofiler.errors import (
    ConfigurationError,
    DegenerateColumnWarning,
    InputShapeError,
)
from tabprofiler.profilers import profile_builder
from tabprofiler.profilers.numeric_column_profile import NumericColumn
from tabprofiler.profilers.profile_builder import (
    NUMERIC_PROFILE_COLUMNS,
    STATUS_COLUMNS,
    StructuredProfiler,
)
from tabprofiler.profilers.profiler_options import ProfilerOptions

TIME_KEYS = [
    "global_stats.times",
    "data_stats.*.status.times",
    "data_stats.*.statistics.times",
]


def build_quietly(data, options=None, kinds=None):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", DegenerateColumnWarning)
        return StructuredProfiler(data, options=options, kinds=kinds)


class FakeResult:
    def __init__(self, func, args, fail):
        self.func = func
        self.args = args
        self.fail = fail

    def get(self):
        if self.fail:
            raise RuntimeError("worker died")
        return self.func(*self.args)


class FakePool:
    """Runs tasks in process, optionally failing some columns."""

    def __init__(self, fail=()):
        self.fail = set(fail)
        self.submitted = []
        self.closed = False
        self.joined = False

    def apply_async(self, func, args):
        name = func.__self__.name
        self.submitted.append(name)
        return FakeResult(func, args, name in self.fail)

    def close(self):
        self.closed = True

    def join(self):
        self.joined = True


class TestStructuredProfiler(unittest.TestCase):
    def setUp(self):
        self.data = pd.DataFrame(
            {
                "letters": ["a", "a", "b", "c", None],
                "x": [1, 2, 3, 4, 100],
                "y": [0.0, np.inf, np.nan, 0.0, 2.5],
            }
        )

    def test_bad_options(self):
        with self.assertRaisesRegex(ValueError, "ProfilerOptions object"):
            StructuredProfiler(self.data, options="bad")

        options = ProfilerOptions()
        options.set({"presentation.bins": 0})
        with self.assertRaises(ConfigurationError):
            StructuredProfiler(self.data, options=options)

    def test_profile_keeps_column_order(self):
        profiler = build_quietly(self.data)
        self.assertListEqual(["letters", "x", "y"], list(profiler.profile.keys()))
        self.assertEqual(CATEGORICAL, profiler.profile["letters"].kind)
        self.assertEqual(NUMERIC, profiler.profile["x"].kind)
        self.assertIn("profile", profiler.times)
        self.assertDictEqual({}, dict(profiler.errors))

    def test_df_status(self):
        table = build_quietly(self.data).df_status()

        self.assertListEqual(STATUS_COLUMNS, list(table.columns))
        self.assertListEqual(["letters", "x", "y"], table["variable"].tolist())
        self.assertListEqual(
            [CATEGORICAL, NUMERIC, NUMERIC], table["type"].tolist()
        )

        y_row = table.iloc[2]
        self.assertEqual(2, y_row["q_zeros"])
        self.assertEqual(40.0, y_row["p_zeros"])
        self.assertEqual(1, y_row["q_na"])
        self.assertEqual(20.0, y_row["p_na"])
        self.assertEqual(1, y_row["q_inf"])
        self.assertEqual(20.0, y_row["p_inf"])
        self.assertEqual(3, y_row["unique"])

        letters_row = table.iloc[0]
        self.assertEqual(1, letters_row["q_na"])
        self.assertEqual(0, letters_row["q_zeros"])
        self.assertEqual(3, letters_row["unique"])

    def test_status_percentages_are_rounded(self):
        data = pd.DataFrame({"x": [0.0, 1.0, 2.0]})
        table = build_quietly(data).df_status()
        self.assertEqual(33.33, table["p_zeros"][0])

    def test_missing_ratio_matches_status_counts(self):
        profiler = build_quietly(self.data)
        table = profiler.df_status()
        global_stats = profiler.report()["global_stats"]

        self.assertEqual(15, global_stats["total_cells"])
        self.assertEqual(2, global_stats["missing_cells"])
        self.assertAlmostEqual(
            table["q_na"].sum() / global_stats["total_cells"],
            global_stats["missing_ratio"],
        )

    def test_freq(self):
        profiler = build_quietly(self.data)
        tables = profiler.freq()

        self.assertListEqual(["letters"], list(tables.keys()))
        table = tables["letters"]
        self.assertListEqual(["a", "b", "c", "NA"], table["letters"].tolist())
        self.assertListEqual([2, 1, 1, 1], table["frequency"].tolist())
        self.assertListEqual([40.0, 20.0, 20.0, 20.0], table["percentage"].tolist())
        self.assertListEqual(
            [40.0, 60.0, 80.0, 100.0], table["cumulative_perc"].tolist()
        )

    def test_freq_of_named_numeric_column(self):
        profiler = build_quietly(self.data)
        tables = profiler.freq(columns="y")

        table = tables["y"]
        self.assertListEqual([0.0, np.inf, "NA", 2.5], table["y"].tolist())
        self.assertListEqual([2, 1, 1, 1], table["frequency"].tolist())

        with self.assertRaisesRegex(InputShapeError, "not in the dataset"):
            profiler.freq(columns=["missing"])

    def test_freq_with_kinds_override(self):
        profiler = build_quietly(self.data, kinds={"x": CATEGORICAL})
        self.assertListEqual(["letters", "x"], list(profiler.freq().keys()))
        self.assertListEqual(["y"], profiler.profiling_num()["variable"].tolist())

    def test_freq_plot(self):
        options = ProfilerOptions()
        options.set({"category.plot": True})
        profiler = build_quietly(self.data, options=options)

        with mock.patch("tabprofiler.reports.graphs.plot_frequency") as mock_plot:
            tables = profiler.freq()
        mock_plot.assert_called_once_with(
            tables["letters"], title="letters", path_out=None
        )

    def test_profiling_num(self):
        table = build_quietly(self.data).profiling_num()

        self.assertListEqual(NUMERIC_PROFILE_COLUMNS, list(table.columns))
        self.assertListEqual(["x", "y"], table["variable"].tolist())

        x_row = table.iloc[0]
        self.assertEqual(22.0, x_row["mean"])
        self.assertEqual(3.0, x_row["p_50"])
        self.assertGreater(x_row["skewness"], 0)
        self.assertLess(x_row["range_98"][1], 100)
        self.assertEqual(5, x_row["count"])

        y_row = table.iloc[1]
        self.assertAlmostEqual(2.5 / 3, y_row["mean"])
        self.assertEqual(3, y_row["count"])
        self.assertEqual(1, y_row["q_na_excluded"])
        self.assertEqual(1, y_row["q_inf_excluded"])
        self.assertTrue(np.isnan(y_row["kurtosis"]))

        with self.assertRaisesRegex(InputShapeError, "not numeric"):
            build_quietly(self.data).profiling_num(columns=["letters", "x"])

    def test_profiling_num_disabled_stats(self):
        options = ProfilerOptions()
        options.set(
            {"numerical.kurtosis.is_enabled": False, "numerical.skewness.is_enabled": False}
        )
        table = build_quietly(self.data, options=options).profiling_num()
        self.assertNotIn("kurtosis", table.columns)
        self.assertNotIn("skewness", table.columns)
        self.assertIn("mean", table.columns)

    def test_profiling_num_matches_reference_moments(self):
        rng = np.random.default_rng(7)
        data = pd.DataFrame(
            {"a": rng.exponential(size=1000), "b": rng.normal(5.0, 2.0, size=1000)}
        )
        table = build_quietly(data).profiling_num()

        for _, row in table.iterrows():
            values = data[row["variable"]]
            self.assertAlmostEqual(values.mean(), row["mean"])
            self.assertAlmostEqual(values.std(ddof=1), row["std_dev"])
            self.assertAlmostEqual(
                scipy.stats.skew(values, bias=False), row["skewness"]
            )
            self.assertAlmostEqual(
                scipy.stats.kurtosis(values, fisher=True, bias=False), row["kurtosis"]
            )
            self.assertAlmostEqual(np.percentile(values, 25), row["p_25"])

    def test_all_missing_numeric_column(self):
        data = pd.DataFrame(
            {"z": [np.nan] * 4, "x": [1.0, 2.0, 3.0, 4.0]}
        )
        with self.assertWarnsRegex(DegenerateColumnWarning, "Column 'z'"):
            profiler = StructuredProfiler(data)

        table = profiler.profiling_num()
        z_row = table.iloc[0]
        for key in ["mean", "std_dev", "p_50", "skewness", "kurtosis", "iqr"]:
            self.assertTrue(np.isnan(z_row[key]), key)
        self.assertEqual(0, z_row["count"])
        self.assertEqual(4, z_row["q_na_excluded"])
        self.assertEqual(2.5, table.iloc[1]["mean"])
        self.assertDictEqual({}, dict(profiler.errors))

    def test_zero_rows(self):
        data = pd.DataFrame(
            {"a": pd.Series([], dtype=float), "b": pd.Series([], dtype=object)}
        )
        profiler = build_quietly(data)

        table = profiler.df_status()
        self.assertListEqual(["a", "b"], table["variable"].tolist())
        for key in ["q_zeros", "q_na", "q_inf", "unique"]:
            self.assertListEqual([0, 0], table[key].tolist(), key)
        for key in ["p_zeros", "p_na", "p_inf"]:
            self.assertListEqual([0.0, 0.0], table[key].tolist(), key)

        self.assertTrue(profiler.freq()["b"].empty)
        self.assertEqual(0, profiler.profiling_num().iloc[0]["count"])

        global_stats = profiler.report()["global_stats"]
        self.assertEqual(0, global_stats["row_count"])
        self.assertEqual(0.0, global_stats["missing_ratio"])

    def test_zero_columns(self):
        profiler = StructuredProfiler(pd.DataFrame())

        table = profiler.df_status()
        self.assertTrue(table.empty)
        self.assertListEqual(STATUS_COLUMNS, list(table.columns))
        self.assertDictEqual({}, dict(profiler.freq()))
        num_table = profiler.profiling_num()
        self.assertTrue(num_table.empty)
        self.assertListEqual(NUMERIC_PROFILE_COLUMNS, list(num_table.columns))
        self.assertEqual(0, profiler.report()["global_stats"]["column_count"])

    def test_failed_column_is_isolated(self):
        original_update = NumericColumn.update

        def fail_on_x(self, df_series):
            if self.name == "x":
                raise ValueError("boom")
            return original_update(self, df_series)

        with mock.patch.object(
            NumericColumn, "update", autospec=True, side_effect=fail_on_x
        ):
            with self.assertWarnsRegex(RuntimeWarning, "Partial Profiler Failure"):
                profiler = StructuredProfiler(self.data)

        self.assertDictEqual({"x": "ValueError: boom"}, dict(profiler.errors))

        report = profiler.report()
        x_report = report["data_stats"][1]
        self.assertEqual("x", x_report["column_name"])
        self.assertIsNone(x_report["status"])
        self.assertIsNone(x_report["statistics"])
        self.assertEqual("ValueError: boom", x_report["error"])
        self.assertDictEqual({"x": "ValueError: boom"}, report["errors"])
        self.assertNotIn("error", report["data_stats"][2])

        status = profiler.df_status()
        self.assertEqual(NUMERIC, status.iloc[1]["type"])
        self.assertTrue(np.isnan(status.iloc[1]["q_zeros"]))
        self.assertEqual(2, status.iloc[2]["q_zeros"])

        num_table = profiler.profiling_num()
        self.assertTrue(np.isnan(num_table.iloc[0]["mean"]))
        self.assertEqual(3, num_table.iloc[1]["count"])

        self.assertTrue(profiler.freq(columns="x")["x"].empty)

    def test_profiling_is_idempotent(self):
        data = pd.DataFrame({"letters": ["a", "a", "b", "c", None], "x": [1, 2, 3, 4, 100]})
        first = build_quietly(data)
        second = build_quietly(data)

        self.assertEqual(
            first.report({"omit_keys": TIME_KEYS}),
            second.report({"omit_keys": TIME_KEYS}),
        )
        pd.testing.assert_frame_equal(first.df_status(), second.df_status())
        pd.testing.assert_frame_equal(first.profiling_num(), second.profiling_num())

    def test_dataset_is_not_modified(self):
        dataset = Dataset.from_dataframe(self.data)
        before = dataset.to_frame()
        build_quietly(dataset)
        pd.testing.assert_frame_equal(before, dataset.to_frame())

    def test_report_formats(self):
        profiler = build_quietly(self.data)

        report = profiler.report()
        self.assertListEqual(
            ["global_stats", "data_stats", "errors"], list(report.keys())
        )
        self.assertDictEqual(
            {"letters": CATEGORICAL, "x": NUMERIC, "y": NUMERIC},
            dict(report["global_stats"]["profile_schema"]),
        )
        self.assertEqual(3, len(report["data_stats"]))

        compact = profiler.report({"output_format": "compact"})
        self.assertNotIn("times", compact["global_stats"])
        self.assertNotIn("frequency_table", compact["data_stats"][0]["statistics"])
        self.assertNotIn("times", compact["data_stats"][1]["status"])
        self.assertEqual(0.1333, compact["global_stats"]["missing_ratio"])

        pretty = profiler.report({"output_format": "pretty"})
        self.assertIsInstance(pretty["data_stats"][1]["statistics"]["range_98"], str)

        flat = profiler.report({"output_format": "flat"})
        self.assertEqual(5, flat["global_stats_row_count"])

        report = profiler.report(
            {"remove_disabled_flag": True, "omit_keys": ["data_stats"]}
        )
        self.assertNotIn("data_stats", report)

    def test_save(self):
        profiler = build_quietly(self.data)
        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = os.path.join(tmpdir, "profile.json")
            self.assertEqual(filepath, profiler.save(filepath))
            with open(filepath) as infile:
                saved = json.load(infile)

        self.assertEqual(5, saved["global_stats"]["row_count"])
        self.assertEqual(["letters", "x", "y"], [
            col["column_name"] for col in saved["data_stats"]
        ])
        self.assertEqual([1.04, 96.16], [
            round(v, 2) for v in saved["data_stats"][1]["statistics"]["range_98"]
        ])

    def test_path_out(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            options = ProfilerOptions()
            options.set({"presentation.path_out": os.path.join(tmpdir, "out")})
            profiler = build_quietly(self.data, options=options)

            profiler.df_status()
            profiler.freq()
            profiler.profiling_num()

            out_dir = os.path.join(tmpdir, "out")
            self.assertListEqual(
                ["df_status.csv", "letters.csv", "profiling_num.csv"],
                sorted(os.listdir(out_dir)),
            )
            status = pd.read_csv(os.path.join(out_dir, "df_status.csv"))
            self.assertListEqual(["letters", "x", "y"], status["variable"].tolist())

    def test_print_results(self):
        options = ProfilerOptions()
        options.set({"presentation.print_results": True})
        profiler = build_quietly(self.data, options=options)

        with mock.patch("sys.stdout", new_callable=io.StringIO) as mock_stdout:
            profiler.df_status()
        self.assertIn("q_zeros", mock_stdout.getvalue())
        self.assertIn("letters", mock_stdout.getvalue())

        with mock.patch("sys.stdout", new_callable=io.StringIO) as mock_stdout:
            build_quietly(self.data).df_status()
        self.assertEqual("", mock_stdout.getvalue())


class TestMultiprocessProfiling(unittest.TestCase):
    def setUp(self):
        self.data = pd.DataFrame(
            {
                "letters": ["a", "a", "b", "c", None],
                "x": [1, 2, 3, 4, 100],
                "w": [5.0, -1.0, 2.0, 2.0, 0.0],
            }
        )
        self.options = ProfilerOptions()
        self.options.set({"multiprocess.is_enabled": True})

    def test_pool_results_merge_by_name(self):
        pool = FakePool()
        with mock.patch.object(
            profile_builder.profiler_utils, "generate_pool", return_value=(pool, 3)
        ):
            profiler = build_quietly(self.data, options=self.options)

        self.assertListEqual(["letters", "x", "w"], pool.submitted)
        self.assertTrue(pool.closed)
        self.assertTrue(pool.joined)
        pd.testing.assert_frame_equal(
            build_quietly(self.data).df_status(), profiler.df_status()
        )
        pd.testing.assert_frame_equal(
            build_quietly(self.data).profiling_num(), profiler.profiling_num()
        )

    def test_failed_workers_are_reprocessed(self):
        pool = FakePool(fail={"x"})
        with mock.patch.object(
            profile_builder.profiler_utils, "generate_pool", return_value=(pool, 3)
        ):
            profiler = build_quietly(self.data, options=self.options)

        self.assertDictEqual({}, dict(profiler.errors))
        self.assertEqual(22.0, profiler.profile["x"].statistics.mean)
        self.assertEqual(5, profiler.profile["x"].status.sample_size)

    def test_no_pool_falls_back_to_single_process(self):
        with mock.patch.object(
            profile_builder.profiler_utils, "generate_pool", return_value=(None, 1)
        ) as mock_pool:
            profiler = build_quietly(self.data, options=self.options)
        mock_pool.assert_called_once()
        self.assertEqual(22.0, profiler.profile["x"].statistics.mean)


class TestConvenienceFunctions(unittest.TestCase):
    def setUp(self):
        self.data = {
            "letters": ["a", "a", "b", "c", None],
            "x": [1, 2, 3, 4, 100],
        }

    def test_df_status(self):
        with mock.patch("sys.stdout", new_callable=io.StringIO) as mock_stdout:
            table = profile_builder.df_status(self.data)
        self.assertIn("variable", mock_stdout.getvalue())
        self.assertListEqual(["letters", "x"], table["variable"].tolist())

    def test_df_status_does_not_change_options(self):
        options = ProfilerOptions()
        profile_builder.df_status(self.data, print_results=False, options=options)
        self.assertTrue(options.numerical.is_enabled)
        self.assertFalse(options.presentation.print_results)

        with self.assertRaisesRegex(ValueError, "ProfilerOptions object"):
            profile_builder.df_status(self.data, options={"bins": 3})

    def test_freq(self):
        tables = profile_builder.freq(self.data, print_results=False)
        self.assertListEqual(["a", "b", "c", "NA"], tables["letters"]["letters"].tolist())

        tables = profile_builder.freq(self.data, na_rm=True, print_results=False)
        self.assertListEqual(["a", "b", "c"], tables["letters"]["letters"].tolist())
        self.assertListEqual(
            [50.0, 25.0, 25.0], tables["letters"]["percentage"].tolist()
        )

        tables = profile_builder.freq(
            self.data, include_missing=False, na_rm=False, print_results=False
        )
        self.assertIn("NA", tables["letters"]["letters"].tolist())

        tables = profile_builder.freq(self.data, columns=["x"], print_results=False)
        self.assertListEqual(["x"], list(tables.keys()))
        self.assertListEqual([20.0] * 5, tables["x"]["percentage"].tolist())

    def test_profiling_num(self):
        table = profile_builder.profiling_num(self.data, print_results=False)
        self.assertListEqual(["x"], table["variable"].tolist())
        self.assertEqual(22.0, table["mean"][0])

    def test_kinds(self):
        table = profile_builder.profiling_num(
            self.data, print_results=False, kinds={"x": CATEGORICAL}
        )
        self.assertTrue(table.empty)
