"""Dataset visualization functions. Bars and hover labels follow the factors' level order."""

from typing import Literal

import matplotlib.pyplot as plt
import pandas as pd
import plotly.graph_objects as go
import seaborn as sns
from matplotlib.figure import Figure

from song_tlbx.data.base_dataset import BaseDataset
from song_tlbx.utils.plotting_config import DEFAULT_PLOT_CFG, PlottingConfig


def _coordinates(dataset: BaseDataset, lat_col: str | None, long_col: str | None) -> tuple[str, str]:
    default_lat, default_long = dataset.Col.coordinate_columns()
    return lat_col or default_lat, long_col or default_long


def plot_level_counts(
    dataset: BaseDataset,
    column: str,
    top_n: int | None = 20,
    figsize: tuple[int, int] = (10, 8),
    cfg: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Plot the number of records per level of a factor, bars in level order.

    After :meth:`~song_tlbx.data.base_dataset.BaseDataset.reorder_levels` the first bars
    are the highest-ranked levels.

    Args:
        dataset: Dataset holding the factor column
        column: Factor column to count
        top_n: Only show the first ``top_n`` levels (None shows all)
        figsize: Figure size (width, height)
        cfg: Plotting style

    Returns:
        matplotlib Figure object
    """
    table = dataset.level_table(column)
    if top_n is not None:
        table = table.head(top_n)
    table = table.assign(level=table["level"].astype(str))

    with cfg.apply():
        fig, ax = plt.subplots(figsize=figsize)
        sns.barplot(data=table, x="count", y="level", order=table["level"].tolist(), color="tab:blue", ax=ax)
        ax.set_xlabel("Records")
        ax.set_ylabel(dataset.get_pretty_name(column))
        ax.set_title(f"Records per {dataset.get_pretty_name(column)}")
        fig.tight_layout()

    return fig


def plot_locations(
    dataset: BaseDataset,
    lat_col: str | None = None,
    long_col: str | None = None,
    kind: Literal["scatter", "hexbin"] = "scatter",
    color_col: str | None = "popularity",
    figsize: tuple[int, int] = (12, 6),
    cfg: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Plot record locations as a scatter (optionally coloured) or as binned hexagon density.

    Records with a missing coordinate (or colour value) are left out.

    Args:
        dataset: Dataset with coordinate columns
        lat_col: Latitude column (defaults to the dataset's coordinate columns)
        long_col: Longitude column (defaults to the dataset's coordinate columns)
        kind: ``"scatter"`` for points, ``"hexbin"`` for a density of records per hexagon
        color_col: Numeric column colouring the scatter points (ignored for hexbin)
        figsize: Figure size (width, height)
        cfg: Plotting style (``cmap`` and ``hexbin_gridsize`` are used here)

    Returns:
        matplotlib Figure object
    """
    if kind not in ("scatter", "hexbin"):
        raise ValueError(f"Invalid kind='{kind}'. Use 'scatter' or 'hexbin'.")

    lat_col, long_col = _coordinates(dataset, lat_col, long_col)
    use_color = kind == "scatter" and color_col is not None
    columns = [lat_col, long_col, *([color_col] if use_color else [])]
    view = dataset.view(columns=columns, missing_strategy="drop")
    frame = view.df

    with cfg.apply():
        fig, ax = plt.subplots(figsize=figsize)
        if kind == "scatter":
            points = ax.scatter(
                frame[long_col],
                frame[lat_col],
                c=frame[color_col] if use_color else None,
                cmap=cfg.cmap if use_color else None,
                s=12,
                alpha=0.7,
            )
            if use_color:
                fig.colorbar(points, ax=ax, label=view.pretty(color_col))
        else:
            bins = ax.hexbin(frame[long_col], frame[lat_col], gridsize=cfg.hexbin_gridsize, cmap=cfg.cmap, mincnt=1)
            fig.colorbar(bins, ax=ax, label="Records")

        ax.set_xlabel(view.pretty(long_col))
        ax.set_ylabel(view.pretty(lat_col))
        ax.set_title(f"Record Locations (n={len(frame)})")
        fig.tight_layout()

    return fig


def plot_group_locations(
    locations: pd.DataFrame,
    group_col: str = "artist",
    lat_col: str = "lat",
    long_col: str = "long",
    size_col: str = "n_records",
    figsize: tuple[int, int] = (12, 6),
    cfg: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Plot one point per group, sized by ``size_col``.

    Args:
        locations: Output of :func:`song_tlbx.analysis.first_locations`
        group_col: Grouping column (used in the title)
        lat_col: Latitude column
        long_col: Longitude column
        size_col: Column scaling the marker area
        figsize: Figure size (width, height)
        cfg: Plotting style
    """
    with cfg.apply():
        fig, ax = plt.subplots(figsize=figsize)
        sns.scatterplot(
            data=locations,
            x=long_col,
            y=lat_col,
            size=size_col if size_col in locations.columns else None,
            alpha=0.7,
            ax=ax,
        )
        ax.set_title(f"One Location per {group_col.title()} (n={len(locations)})")
        fig.tight_layout()

    return fig


def plot_locations_plotly(
    dataset: BaseDataset,
    lat_col: str | None = None,
    long_col: str | None = None,
    color_col: str | None = "popularity",
    hover_col: str | None = "artist",
    color_palette: str = "viridis",
    height: int = 600,
    width: int = 1000,
) -> go.Figure:
    """Interactive location scatter with optional colour and hover labels.

    Implemented with Plotly's [:class:`plotly.graph_objects.Scattergl`](https://plotly.com/python/line-and-scatter/).
    """
    lat_col, long_col = _coordinates(dataset, lat_col, long_col)
    columns = [lat_col, long_col, *(c for c in (color_col, hover_col) if c is not None)]
    view = dataset.view(columns=columns)
    frame = view.df.dropna(subset=[lat_col, long_col])

    marker_kwargs = dict(
        color=frame[color_col] if color_col is not None else None,
        colorscale=color_palette if color_col is not None else None,
        showscale=color_col is not None,
        size=6,
        opacity=0.7,
    )
    fig = go.Figure(
        go.Scattergl(
            x=frame[long_col],
            y=frame[lat_col],
            mode="markers",
            marker=marker_kwargs,
            text=frame[hover_col].astype(str) if hover_col is not None else None,
            name="Records",
        ),
    )
    fig.update_xaxes(title=view.pretty(long_col))
    fig.update_yaxes(title=view.pretty(lat_col))
    fig.update_layout(
        title=f"Record Locations (n={len(frame)})",
        width=width,
        height=height,
    )
    return fig
