"""Contains typing aliases."""

from typing import Mapping, Sequence, Union

import numpy as np
import pandas as pd

DataArray = Union[pd.Series, np.ndarray, Sequence]
TabularInput = Union[pd.DataFrame, pd.Series, Mapping[str, Sequence]]
