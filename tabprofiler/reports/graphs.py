"""Contains functions for drawing frequency and numeric distribution charts."""
# !/usr/bin/env python3
from __future__ import annotations

import math
import os
import warnings
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

try:
    import matplotlib
    import matplotlib.pyplot as plt
    import seaborn as sns
except ImportError:
    # don't require if using graphs will below recommend to install if not
    # installed
    pass

from .. import tp_logging
from .._typing import TabularInput
from ..data_readers.dataset import Column, Dataset
from ..profilers.profiler_options import PresentationOptions
from . import utils

logger = tp_logging.get_child_logger(__name__)


@utils.require_module(["matplotlib"])
def save_figure(fig: matplotlib.figure.Figure, path_out: str, name: str) -> str:
    """
    Save a figure as <path_out>/<name>.png, creating the directory if needed.

    :param fig: figure to save
    :type fig: matplotlib.figure.Figure
    :param path_out: directory to save the figure to
    :type path_out: str
    :param name: file name without extension
    :type name: str
    :return: path of the saved figure
    :rtype: str
    """
    os.makedirs(path_out, exist_ok=True)
    filepath = os.path.join(path_out, f"{name}.png")
    fig.savefig(filepath, bbox_inches="tight")
    logger.info(f"Saved figure to {filepath}")
    return filepath


@utils.require_module(["matplotlib", "seaborn"])
def plot_frequency(
    table: pd.DataFrame,
    title: Optional[str] = None,
    ax: Optional[matplotlib.axes.Axes] = None,
    path_out: Optional[str] = None,
) -> matplotlib.figure.Figure:
    """
    Plot a frequency table as horizontal bars labelled with their percentage.

    Bars keep the order of the table, most frequent on top.

    :param table: frequency table, first column holding the labels
    :type table: pandas.DataFrame
    :param title: title to set for the graph, the label column name if None
    :type title: str
    :param ax: matplotlib axes where to plot the graph
    :type ax: matplotlib.axes.Axes
    :param path_out: directory to save the figure to as <title>.png
    :type path_out: str
    :return: matplotlib figure of where the graph was plotted
    """
    if not isinstance(table, pd.DataFrame) or "frequency" not in table.columns:
        raise ValueError("`table` must be a frequency table DataFrame.")
    elif table.empty:
        warnings.warn("There were no counted categories to plot.")
        return

    label_column = table.columns[0]
    if title is None:
        title = str(label_column)

    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(111)
    # in case user passed their own axes
    fig = ax.figure

    labels = table[label_column].astype(str).tolist()
    ax = sns.barplot(
        x=table["frequency"].tolist(),
        y=labels,
        order=labels,
        orient="h",
        color=sns.color_palette()[0],
        ax=ax,
    )
    ax.bar_label(
        ax.containers[-1],
        labels=[f"{percentage}%" for percentage in table["percentage"].tolist()],
        padding=2,
    )
    ax.set(xlabel="frequency", ylabel=str(label_column))
    ax.set_title(title)

    if path_out is not None:
        save_figure(fig, path_out, title)
    return fig


@utils.require_module(["matplotlib", "seaborn"])
def plot_col_histogram(
    column: Column,
    bins: int = 10,
    ax: Optional[matplotlib.axes.Axes] = None,
    title: Optional[str] = None,
) -> matplotlib.axes.Axes:
    """
    Take input of a numeric Column and plot the histogram of its finite values.

    :param column: the numeric column to plot
    :type column: Column
    :param bins: number of histogram buckets
    :type bins: int
    :param ax: matplotlib axes of where to plot the graph
    :type ax: matplotlib.axes.Axes
    :param title: title ot set for the graph
    :type title: str
    :return: matplotlib axes of where the graph was plotted
    """
    values = column.values.to_numpy(dtype="float64", na_value=np.nan)
    values = values[np.isfinite(values)]
    if not len(values):
        raise ValueError(
            "The column, "
            + str(column.name)
            + ", had no finite values and therefore could not be plotted."
        )
    ax = sns.histplot(x=values, bins=bins, ax=ax)

    ax.set(xlabel="bins")
    if title is None:
        title = str(column.name)
    ax.set_title(title)
    return ax


@utils.require_module(["matplotlib", "seaborn"])
def plot_num(
    data: Union[Dataset, TabularInput],
    bins: int = 10,
    path_out: Optional[str] = None,
    columns: Optional[Sequence[str]] = None,
) -> matplotlib.figure.Figure:
    """
    Plot the histograms of the numeric columns on a single grid.

    Columns without a finite value are skipped with a warning. A bad `bins`
    or `path_out` raises ConfigurationError before anything is drawn.

    :param data: data holding the numeric columns
    :type data: Dataset, pandas.DataFrame or dict of column -> cells
    :param bins: number of histogram buckets per column
    :type bins: int
    :param path_out: directory to save the figure to as plot_num.png
    :type path_out: str
    :param columns: numeric columns to plot, all of them if None
    :type columns: list[str]
    :return: matplotlib figure of where the graph was plotted
    :rtype: matplotlib.figure.Figure
    """
    PresentationOptions(bins=bins, path_out=path_out).validate()

    dataset = Dataset.from_input(data)
    to_graph: List[Column] = []
    for column in dataset.select(columns):
        if not column.is_numeric:
            continue
        values = column.values.to_numpy(dtype="float64", na_value=np.nan)
        if not np.isfinite(values).any():
            warnings.warn(f"Column '{column.name}' has no finite values to plot.")
            continue
        to_graph.append(column)

    if not to_graph:
        warnings.warn(
            "No plots were constructed"
            " because no numeric columns with finite values were found"
        )
        return

    # get proper tile format for graph
    n = len(to_graph)
    cols = math.ceil(math.sqrt(n))
    rows = math.ceil(n / cols)
    fig, axs = plt.subplots(rows, cols)

    # flatten axes for inputting graphs into the plot
    if not isinstance(axs, np.ndarray):
        axs = np.array([axs])
    axs = axs.flatten()

    for column, ax in zip(to_graph, axs):
        ax = plot_col_histogram(column, bins=bins, ax=ax, title=str(column.name))

        # remove x/ylabel on subplots
        ax.set(xlabel=None)
        ax.set(ylabel=None)

    # turn off all unused axes
    for ax in axs[n:]:
        ax.axis("off")

    # add figure x/ylabel and formatting
    fig.text(0.5, 0.01, "bins", ha="center", va="center")
    fig.text(0.01, 0.5, "Count", ha="center", va="center", rotation=90)
    fig.tight_layout()

    if path_out is not None:
        save_figure(fig, path_out, "plot_num")
    return fig
