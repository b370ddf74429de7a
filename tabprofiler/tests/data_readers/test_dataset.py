import unittest

import numpy as np
import pandas as pd

from tabprofiler.data_readers.dataset import (
    CATEGORICAL,
    NUMERIC,
    Column,
    Dataset,
    infer_kind,
)
from tabprofiler.errors import InputShapeError


class TestColumn(unittest.TestCase):
    def test_infer_kind(self):
        self.assertEqual(NUMERIC, infer_kind(pd.Series([1, 2, 3])))
        self.assertEqual(NUMERIC, infer_kind(pd.Series([1.5, np.nan])))
        self.assertEqual(CATEGORICAL, infer_kind(pd.Series([True, False])))
        self.assertEqual(CATEGORICAL, infer_kind(pd.Series(["a", "b"])))
        self.assertEqual(CATEGORICAL, infer_kind(pd.Series([1, "a"], dtype=object)))

    def test_numeric_column_is_float(self):
        column = Column("x", [1, None, 3], kind=NUMERIC)
        self.assertEqual("float64", column.values.dtype)
        self.assertTrue(column.is_numeric)
        self.assertEqual([False, True, False], column.missing_mask.tolist())

    def test_numeric_column_keeps_infinity(self):
        column = Column("x", [1.0, np.inf, -np.inf])
        self.assertEqual(NUMERIC, column.kind)
        self.assertEqual([False, True, True], np.isinf(column.values).tolist())
        self.assertEqual([False, False, False], column.missing_mask.tolist())

    def test_categorical_column_is_object(self):
        column = Column("x", pd.Series([1, 2, 1]), kind=CATEGORICAL)
        self.assertEqual(object, column.values.dtype)
        self.assertFalse(column.is_numeric)

    def test_non_numeric_cells_in_numeric_column(self):
        with self.assertRaisesRegex(InputShapeError, "declared numeric"):
            Column("x", ["1", "a"], kind=NUMERIC)

    def test_unknown_kind(self):
        with self.assertRaisesRegex(InputShapeError, "unknown kind"):
            Column("x", [1, 2], kind="date")


class TestDataset(unittest.TestCase):
    def test_from_dataframe(self):
        data = pd.DataFrame(
            {"num": [1, 2, np.nan], "cat": ["a", None, "b"], "flag": [True, False, True]}
        )
        dataset = Dataset.from_dataframe(data)

        self.assertEqual(["num", "cat", "flag"], dataset.column_names)
        self.assertEqual(
            {"num": NUMERIC, "cat": CATEGORICAL, "flag": CATEGORICAL},
            dict(dataset.schema),
        )
        self.assertEqual(3, dataset.row_count)
        self.assertEqual(9, dataset.total_cells)
        self.assertEqual(2, dataset.missing_cells)
        self.assertAlmostEqual(2 / 9, dataset.missing_ratio)

    def test_kinds_override(self):
        data = pd.DataFrame({"code": [1, 2, 1]})
        dataset = Dataset.from_dataframe(data, kinds={"code": CATEGORICAL})
        self.assertEqual(CATEGORICAL, dataset["code"].kind)

        with self.assertRaisesRegex(InputShapeError, "unknown columns"):
            Dataset.from_dataframe(data, kinds={"other": NUMERIC})

    def test_from_dict_unequal_lengths(self):
        with self.assertRaisesRegex(InputShapeError, "same number of rows"):
            Dataset.from_dict({"a": [1, 2, 3], "b": [1, 2]})

    def test_duplicate_names(self):
        with self.assertRaisesRegex(InputShapeError, "Duplicate column name"):
            Dataset([Column("a", [1]), Column("a", [2])])

    def test_labels_equal_as_strings(self):
        data = pd.DataFrame([[1, 2]], columns=[0, "0"])
        with self.assertRaisesRegex(
            InputShapeError, "Column labels 0, '0' are all named '0'"
        ):
            Dataset.from_dataframe(data)

        # integer labels that stay distinct are kept as strings
        dataset = Dataset.from_dataframe(pd.DataFrame([[1, 2]], columns=[0, 1]))
        self.assertEqual(["0", "1"], dataset.column_names)

    def test_from_input(self):
        dataset = Dataset.from_dict({"a": [1, 2]})
        self.assertIs(dataset, Dataset.from_input(dataset))
        self.assertEqual(["s"], Dataset.from_input(pd.Series([1], name="s")).column_names)
        self.assertEqual(["a"], Dataset.from_input({"a": [1]}).column_names)

        with self.assertRaisesRegex(InputShapeError, "kinds are fixed"):
            Dataset.from_input(dataset, kinds={"a": CATEGORICAL})
        with self.assertRaisesRegex(InputShapeError, "must be a Dataset"):
            Dataset.from_input([1, 2, 3])

    def test_empty_dataset(self):
        dataset = Dataset()
        self.assertEqual(0, len(dataset))
        self.assertEqual(0, dataset.row_count)
        self.assertEqual(0, dataset.total_cells)
        self.assertEqual(0.0, dataset.missing_ratio)
        self.assertTrue(dataset.to_frame().empty)

    def test_zero_rows(self):
        dataset = Dataset.from_dataframe(
            pd.DataFrame({"a": pd.Series([], dtype=float), "b": pd.Series([], dtype=object)})
        )
        self.assertEqual(2, len(dataset))
        self.assertEqual(0, dataset.row_count)
        self.assertEqual(0.0, dataset.missing_ratio)

    def test_select_and_lookup(self):
        dataset = Dataset.from_dict({"a": [1, 2], "b": ["x", "y"]})
        self.assertIn("a", dataset)
        self.assertNotIn("c", dataset)
        self.assertEqual(["b"], [col.name for col in dataset.select("b")])
        self.assertEqual(["a", "b"], [col.name for col in dataset.select()])
        self.assertEqual(["a"], [col.name for col in dataset.columns_of_kind(NUMERIC)])

        with self.assertRaisesRegex(InputShapeError, "not in the dataset"):
            dataset["c"]

    def test_to_frame_is_a_copy(self):
        dataset = Dataset.from_dict({"a": [1.0, 2.0]})
        frame = dataset.to_frame()
        frame.loc[0, "a"] = 100.0
        self.assertEqual(1.0, dataset["a"].values[0])
