"""Contains the in-memory, column typed dataset consumed by the profilers."""
from __future__ import annotations

from collections import OrderedDict
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Union

import pandas as pd

from .. import tp_logging
from .._typing import DataArray, TabularInput
from ..errors import InputShapeError

logger = tp_logging.get_child_logger(__name__)

NUMERIC = "numeric"
CATEGORICAL = "categorical"
COLUMN_KINDS = (NUMERIC, CATEGORICAL)


def infer_kind(values: pd.Series) -> str:
    """
    Determine the kind of a column from its pandas dtype.

    Booleans are treated as labels, every other numeric dtype is numeric.

    :param values: column values
    :type values: pandas.Series
    :return: the column kind
    :rtype: str
    """
    if pd.api.types.is_bool_dtype(values):
        return CATEGORICAL
    if pd.api.types.is_numeric_dtype(values):
        return NUMERIC
    return CATEGORICAL


class Column(object):
    """A named sequence of cells with a kind fixed at creation."""

    def __init__(
        self, name: str, values: DataArray, kind: Optional[str] = None
    ) -> None:
        """
        Initialize the column and coerce its cells to the declared kind.

        :param name: name of the column, unique within a dataset
        :type name: str
        :param values: cells of the column, missing cells as None / NaN
        :type values: list, numpy.ndarray or pandas.Series
        :param kind: either "numeric" or "categorical", inferred if None
        :type kind: str
        """
        if not isinstance(values, pd.Series):
            values = pd.Series(list(values), dtype=object if kind else None)
        values = values.reset_index(drop=True)
        if kind is None:
            kind = infer_kind(values)
        if kind not in COLUMN_KINDS:
            raise InputShapeError(
                "Column '{}' has unknown kind '{}', must be one of {}.".format(
                    name, kind, list(COLUMN_KINDS)
                )
            )

        if kind == NUMERIC:
            try:
                values = pd.to_numeric(values).astype("float64")
            except (ValueError, TypeError) as e:
                raise InputShapeError(
                    f"Column '{name}' is declared numeric but holds "
                    f"non-numeric cells: {e}"
                )
        else:
            values = values.astype(object)

        self.name = name
        self.kind = kind
        self.values: pd.Series = values.rename(name)

    def __len__(self) -> int:
        """Return the number of cells."""
        return len(self.values)

    def __repr__(self) -> str:
        """Return a short description of the column."""
        return "Column(name={!r}, kind={!r}, rows={})".format(
            self.name, self.kind, len(self)
        )

    @property
    def is_numeric(self) -> bool:
        """Return True if the column holds numeric cells."""
        return self.kind == NUMERIC

    @property
    def missing_mask(self) -> pd.Series:
        """Return a boolean mask of missing cells."""
        return self.values.isna()


class Dataset(object):
    """
    Ordered collection of named, equal length columns.

    The dataset is a read-only snapshot; profilers never modify it.
    """

    def __init__(self, columns: Optional[Sequence[Column]] = None) -> None:
        """
        Initialize the dataset from a list of columns.

        :param columns: columns of the dataset, all of the same length
        :type columns: list[Column]
        """
        self._columns: OrderedDict[str, Column] = OrderedDict()
        columns = columns or []
        for column in columns:
            if not isinstance(column, Column):
                raise InputShapeError("Dataset columns must be of type Column.")
            if column.name in self._columns:
                raise InputShapeError(
                    f"Duplicate column name '{column.name}' in dataset."
                )
            self._columns[column.name] = column

        lengths = {len(column) for column in self._columns.values()}
        if len(lengths) > 1:
            raise InputShapeError(
                "All columns must have the same number of rows, found "
                "lengths {}.".format(
                    {name: len(col) for name, col in self._columns.items()}
                )
            )

    @classmethod
    def from_dataframe(
        cls, data: pd.DataFrame, kinds: Optional[Mapping[str, str]] = None
    ) -> Dataset:
        """
        Ingest a pandas DataFrame.

        :param data: rectangular table to ingest
        :type data: pandas.DataFrame
        :param kinds: overrides of the inferred kind per column name
        :type kinds: dict[str, str]
        :return: the dataset
        :rtype: Dataset
        """
        if not isinstance(data, pd.DataFrame):
            raise InputShapeError("`data` must be a pandas.DataFrame.")
        kinds = dict(kinds or {})
        unknown = set(kinds) - set(map(str, data.columns))
        if unknown:
            raise InputShapeError(
                f"Kinds were given for unknown columns: {sorted(unknown)}"
            )
        labels_by_name: Dict[str, list] = OrderedDict()
        for label in data.columns:
            labels_by_name.setdefault(str(label), []).append(label)
        for name, labels in labels_by_name.items():
            if len(set(map(repr, labels))) > 1:
                raise InputShapeError(
                    f"Column labels {', '.join(map(repr, labels))} are all "
                    f"named '{name}' once converted to strings."
                )
        columns = [
            Column(str(name), data.iloc[:, i], kinds.get(str(name)))
            for i, name in enumerate(data.columns)
        ]
        return cls(columns)

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Sequence],
        kinds: Optional[Mapping[str, str]] = None,
    ) -> Dataset:
        """
        Ingest a mapping of column name to cells.

        Unlike a DataFrame, unequal lengths are reported instead of padded.
        """
        kinds = dict(kinds or {})
        columns = []
        for name, values in data.items():
            if not isinstance(values, pd.Series):
                values = pd.Series(list(values))
            columns.append(Column(str(name), values, kinds.get(str(name))))
        return cls(columns)

    @classmethod
    def from_input(
        cls,
        data: Union[Dataset, TabularInput],
        kinds: Optional[Mapping[str, str]] = None,
    ) -> Dataset:
        """Return a dataset from any supported tabular input."""
        if isinstance(data, Dataset):
            if kinds:
                raise InputShapeError(
                    "Column kinds are fixed once a Dataset is built."
                )
            return data
        elif isinstance(data, pd.DataFrame):
            return cls.from_dataframe(data, kinds)
        elif isinstance(data, pd.Series):
            return cls.from_dataframe(data.to_frame(), kinds)
        elif isinstance(data, Mapping):
            return cls.from_dict(data, kinds)
        raise InputShapeError(
            "Data must be a Dataset, a pandas.DataFrame or a dict of columns, "
            f"not {type(data).__name__}."
        )

    def __len__(self) -> int:
        """Return the number of columns."""
        return len(self._columns)

    def __iter__(self) -> Iterator[Column]:
        """Iterate over the columns in order."""
        return iter(self._columns.values())

    def __contains__(self, name: object) -> bool:
        """Return True if the named column exists."""
        return name in self._columns

    def __getitem__(self, name: str) -> Column:
        """Return the named column."""
        if name not in self._columns:
            raise InputShapeError(f"Column '{name}' is not in the dataset.")
        return self._columns[name]

    @property
    def column_names(self) -> List[str]:
        """Return the column names in order."""
        return list(self._columns.keys())

    @property
    def schema(self) -> Dict[str, str]:
        """Return a mapping of column name to kind."""
        return OrderedDict((col.name, col.kind) for col in self)

    @property
    def row_count(self) -> int:
        """Return the number of rows shared by every column."""
        if not self._columns:
            return 0
        return len(next(iter(self._columns.values())))

    @property
    def total_cells(self) -> int:
        """Return rows times columns."""
        return self.row_count * len(self)

    @property
    def missing_cells(self) -> int:
        """Return the number of missing cells across the dataset."""
        return int(sum(col.missing_mask.sum() for col in self))

    @property
    def missing_ratio(self) -> float:
        """Return the ratio of missing cells, 0 for an empty dataset."""
        if not self.total_cells:
            return 0.0
        return self.missing_cells / self.total_cells

    def columns_of_kind(self, kind: str) -> List[Column]:
        """Return the columns of the given kind in order."""
        return [col for col in self if col.kind == kind]

    def select(self, names: Optional[Sequence[str]] = None) -> List[Column]:
        """
        Return the named columns, or every column if no names are given.

        :param names: names of the columns to return
        :type names: list[str]
        :return: the columns
        :rtype: list[Column]
        """
        if names is None:
            return list(self)
        if isinstance(names, str):
            names = [names]
        return [self[name] for name in names]

    def to_frame(self) -> pd.DataFrame:
        """Return a copy of the dataset as a pandas DataFrame."""
        if not self._columns:
            return pd.DataFrame()
        return pd.concat([col.values for col in self], axis=1)

    def __repr__(self) -> str:
        """Return a short description of the dataset."""
        return "Dataset(columns={}, rows={})".format(len(self), self.row_count)
