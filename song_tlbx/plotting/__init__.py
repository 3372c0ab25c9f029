"""Plotting utilities for data visualization."""

from .dataset_plots import plot_group_locations, plot_level_counts, plot_locations, plot_locations_plotly


__all__ = [
    "plot_group_locations",
    "plot_level_counts",
    "plot_locations",
    "plot_locations_plotly",
]
