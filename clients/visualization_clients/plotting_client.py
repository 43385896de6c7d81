#!/usr/bin/env python3
"""
Plotting Client for SWMP Summary Visualization

This client renders chart descriptors for the seasonal and annual summary
views with matplotlib and seaborn, either one chart per figure or all six
composed into a single figure. Figures can be saved to a 'plots' directory.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence
import logging

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.colors import LinearSegmentedColormap, Normalize, TwoSlopeNorm
from matplotlib.figure import Figure

from .chart_descriptors import ChartDescriptor, ColorScale
from processors.year_range_selector import MONTH_LABELS

logger = logging.getLogger(__name__)


def _diverging(scale: ColorScale, values: pd.Series):
    """Colormap and norm for a low/mid/high scale centred on its midpoint"""
    cmap = LinearSegmentedColormap.from_list('diverging', [scale.low, scale.mid, scale.high])
    if scale.limits is not None:
        vmin, vmax = scale.limits
    else:
        vmin, vmax = values.min(), values.max()
    if pd.isna(vmin) or pd.isna(vmax):
        vmin, vmax = scale.midpoint - 1, scale.midpoint + 1
    if vmin < scale.midpoint < vmax:
        return cmap, TwoSlopeNorm(vcenter=scale.midpoint, vmin=vmin, vmax=vmax)
    if vmin == vmax:
        vmin, vmax = vmin - 1, vmax + 1
    return cmap, Normalize(vmin=vmin, vmax=vmax)


class PlottingClient:
    """
    A client for rendering and saving the summary views.
    """

    def __init__(self, base_size: float = 11, plot_dir: Optional[Path] = None):
        self.base_size = base_size
        self.plot_dir = Path(plot_dir) if plot_dir else None

        # Set a consistent plot style
        sns.set_theme(style="ticks", rc={'font.size': base_size, 'axes.labelsize': base_size,
                                         'xtick.labelsize': base_size * 0.8,
                                         'ytick.labelsize': base_size * 0.8})
        self._renderers = {
            'jitter_means': self._draw_jitter_means,
            'box': self._draw_box,
            'histograms': self._draw_histograms,
            'heatmap': self._draw_heatmap,
            'bar_trend': self._draw_bar_trend,
        }

    def render_chart(self, descriptor: ChartDescriptor, fig: Optional[Figure] = None,
                     subplot_spec=None) -> Figure:
        """
        Draw one descriptor, on its own figure unless a figure and subplot
        spec are given.
        """
        if fig is None:
            fig = plt.figure(figsize=(4, 8) if descriptor.kind == 'histograms' else (7, 5))
        if subplot_spec is None:
            subplot_spec = fig.add_gridspec(1, 1)[0]

        self._renderers[descriptor.kind](descriptor, fig, subplot_spec)
        return fig

    def compose(self, descriptors: Sequence[ChartDescriptor]) -> Figure:
        """
        Lay out the six summary views: means and boxes on the left, monthly
        histograms in the middle, heatmaps and annual anomalies on the right.
        """
        if len(descriptors) != 6:
            raise ValueError(f"compose expects 6 chart descriptors, got {len(descriptors)}")

        fig = plt.figure(figsize=(15, 10))
        outer = fig.add_gridspec(1, 3, width_ratios=[1, 0.5, 1], wspace=0.3)
        left = outer[0].subgridspec(2, 1, hspace=0.3)
        right = outer[2].subgridspec(3, 1, height_ratios=[1, 1, 0.8], hspace=0.5)
        slots = [left[0], left[1], outer[1], right[0], right[1], right[2]]

        for descriptor, slot in zip(descriptors, slots):
            self.render_chart(descriptor, fig, slot)

        logger.info("Composed summary figure with 6 views")
        return fig

    def save_figure(self, fig: Figure, name: str) -> Path:
        """Save ``fig`` as ``<plot_dir>/<name>.png`` and close it"""
        if self.plot_dir is None:
            raise ValueError("PlottingClient was created without a plot_dir")
        self.plot_dir.mkdir(parents=True, exist_ok=True)

        save_path = self.plot_dir / f"{name}.png"
        fig.savefig(save_path, dpi=300, bbox_inches='tight')
        plt.close(fig)
        logger.info(f"Saved plot to: {save_path}")
        return save_path

    def save_all(self, figures: Dict[str, Figure]) -> List[Path]:
        return [self.save_figure(fig, name) for name, fig in figures.items()]

    def _draw_jitter_means(self, descriptor: ChartDescriptor, fig: Figure, spec):
        ax = fig.add_subplot(spec)
        means = descriptor.extras['means']
        if descriptor.data[descriptor.y].notna().any():
            sns.stripplot(data=descriptor.data, x=descriptor.x, y=descriptor.y, order=MONTH_LABELS,
                          jitter=0.1, alpha=0.5, size=4, color='black', ax=ax)
        else:
            ax.set_xticks(range(len(MONTH_LABELS)), MONTH_LABELS)
        ax.scatter(np.arange(len(MONTH_LABELS)), means['value'], s=120, c=list(means['color']),
                   edgecolors='darkgreen', linewidths=1, zorder=3)
        self._label(ax, descriptor)
        sns.despine(ax=ax)

    def _draw_box(self, descriptor: ChartDescriptor, fig: Figure, spec):
        ax = fig.add_subplot(spec)
        medians = descriptor.extras['medians']
        palette = dict(zip(medians['month'].astype(str), medians['color']))
        if descriptor.data[descriptor.y].notna().any():
            sns.boxplot(data=descriptor.data, x=descriptor.x, y=descriptor.y, hue=descriptor.x,
                        order=MONTH_LABELS, hue_order=MONTH_LABELS, palette=palette,
                        legend=False, ax=ax)
        else:
            ax.set_xticks(range(len(MONTH_LABELS)), MONTH_LABELS)
        self._label(ax, descriptor)
        sns.despine(ax=ax)

    def _draw_histograms(self, descriptor: ChartDescriptor, fig: Figure, spec):
        facets = descriptor.extras['facet_order']
        color = descriptor.extras['color']
        values = descriptor.data[descriptor.x]
        binwidth = descriptor.extras['binwidth']
        if binwidth:
            bins = np.arange(values.min(), values.max() + binwidth, binwidth)
        else:
            bins = 1

        grid = spec.subgridspec(len(facets), 1, hspace=0)
        axes = []
        for i, month in enumerate(facets):
            ax = fig.add_subplot(grid[i], sharex=axes[0] if axes else None)
            month_values = values[descriptor.data['month'] == month].dropna()
            if not month_values.empty:
                ax.hist(month_values, bins=bins, density=True, color='dimgray', edgecolor=color)
            ax.set_yticks([])
            ax.set_ylabel('')
            ax.text(1.02, 0.5, month, transform=ax.transAxes, rotation=90, va='center',
                    fontsize=self.base_size * 0.7,
                    bbox={'facecolor': color, 'edgecolor': 'none', 'pad': 2})
            if i < len(facets) - 1:
                ax.tick_params(labelbottom=False)
            axes.append(ax)
        axes[-1].set_xlabel(descriptor.xlabel)

    def _draw_heatmap(self, descriptor: ChartDescriptor, fig: Figure, spec):
        ax = fig.add_subplot(spec)
        cells = descriptor.data.assign(**{descriptor.y: descriptor.data[descriptor.y].astype(str)})
        grid = cells.pivot(index=descriptor.y, columns=descriptor.x, values=descriptor.fill)
        grid = grid.reindex(list(reversed(MONTH_LABELS)))

        if grid.notna().to_numpy().any():
            cmap, norm = _diverging(descriptor.color_scale, descriptor.data[descriptor.fill])
            sns.heatmap(grid, cmap=cmap, norm=norm, ax=ax, linewidths=0,
                        cbar_kws={'location': 'top', 'shrink': 0.6})
        ax.set_xlabel('')
        ax.set_ylabel(descriptor.ylabel)

    def _draw_bar_trend(self, descriptor: ChartDescriptor, fig: Figure, spec):
        ax = fig.add_subplot(spec)
        data = descriptor.data
        valid = data[descriptor.y].notna()
        cmap, norm = _diverging(descriptor.color_scale, data[descriptor.fill])

        ax.bar(data.loc[valid, descriptor.x], data.loc[valid, descriptor.y],
               color=[cmap(norm(v)) for v in data.loc[valid, descriptor.fill]])
        fitted = descriptor.extras['fitted']
        if fitted.notna().any():
            ax.plot(data[descriptor.x], fitted, linestyle='--', linewidth=1.5, color='steelblue')
        ax.axhline(0, color='gray', linewidth=0.5)
        ax.set_xlabel('')
        ax.set_ylabel(descriptor.ylabel)
        sns.despine(ax=ax)

    @staticmethod
    def _label(ax, descriptor: ChartDescriptor):
        ax.set_xlabel(descriptor.xlabel)
        ax.set_ylabel(descriptor.ylabel)
