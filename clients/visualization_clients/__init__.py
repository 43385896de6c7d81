"""
Visualization clients for SWMP summary views
"""

from .chart_descriptors import ChartDescriptor, ColorScale, build_chart_descriptors
from .plotting_client import PlottingClient

__all__ = ["ChartDescriptor", "ColorScale", "build_chart_descriptors", "PlottingClient"]
