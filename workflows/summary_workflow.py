#!/usr/bin/env python3
"""
Seasonal and annual summary workflow for SWMP monitoring data.

Validates the request, optionally fills gaps, aggregates by station type,
selects the year range, computes the summary tables and hands them to the
requested output: a combined figure, six separate chart descriptors, or the
summary tables themselves.

Usage:
    python -m workflows.summary_workflow apacpwq.csv --param sal --station apacpwq
    python -m workflows.summary_workflow apaebmet.csv --param atemp --station-type weather --years 2010 2013
    python -m workflows.summary_workflow apacpnut.csv --param chla_n --station apacpnut --output-mode data
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Union
import logging

import pandas as pd
from matplotlib.figure import Figure

from clients.visualization_clients.chart_descriptors import ChartDescriptor, build_chart_descriptors
from clients.visualization_clients.plotting_client import PlottingClient
from infrastructure.configuration_manager import (
    ColorSpec, ConfigurationError, ConfigurationManager, SummaryConfiguration
)
from infrastructure.fail_fast_validator import (
    FailFastValidator, OutputMode, SummaryRequestError
)
from processors.aggregator import StationAggregator
from processors.gap_filler import GapFiller
from processors.summary_calculator import SummaryCalculator, SummaryResult
from processors.timeseries_table import StationType, TimeSeriesTable, TimeSeriesTableError
from processors.year_range_selector import select_years

logger = logging.getLogger(__name__)

SummaryOutput = Union[Figure, List[ChartDescriptor], SummaryResult]


def summarize(table: TimeSeriesTable, parameter: str, colors: Optional[ColorSpec] = None,
              years=None, fill_mode='none', output_mode='combined',
              max_gap: Optional[int] = None, base_size: float = 11) -> SummaryOutput:
    """
    Summarize one parameter of a monitoring series by month and year.

    Parameters:
    -----------
    table : TimeSeriesTable
        Quality-controlled series
    parameter : str
        Parameter to summarize, must be declared by ``table``
    colors : ColorSpec, optional
        Colours for the chart views
    years : int or sequence of int, optional
        One or two years; defaults to the full range of the data
    fill_mode : str or FillMode
        'none', 'climatology' or 'interpolate'
    output_mode : str or OutputMode
        'combined' (figure), 'separate' (chart descriptors) or 'data' (tables)
    max_gap : int, optional
        Longest run of missing rows to interpolate; None fills any gap
    base_size : float
        Base font size of rendered figures

    Returns:
    --------
    Figure, list of ChartDescriptor, or SummaryResult depending on ``output_mode``

    Raises:
    -------
    SummaryRequestError
        Before any computation, if an argument is invalid
    """
    colors = colors if colors is not None else ColorSpec()
    request = FailFastValidator().validate_request(
        table, parameter, years=years, fill_mode=fill_mode, output_mode=output_mode,
        colors=colors, max_gap=max_gap
    )

    filled = GapFiller(max_gap=max_gap).fill(table, request.parameter, request.fill_mode)
    aggregated = StationAggregator().aggregate(filled, [request.parameter])
    observations = select_years(aggregated.data, request.year_range)
    summary = SummaryCalculator(request.parameter).calculate(observations, request.year_range)

    if request.output_mode is OutputMode.DATA:
        return summary

    descriptors = build_chart_descriptors(observations, summary, colors)
    if request.output_mode is OutputMode.SEPARATE:
        return descriptors

    return PlottingClient(base_size=base_size).compose(descriptors)


class SummaryWorkflow:
    """Run ``summarize`` from a SummaryConfiguration"""

    def __init__(self, config: SummaryConfiguration):
        self.config = config

    def run(self, table: TimeSeriesTable) -> SummaryOutput:
        config = self.config
        logger.info(f"Running {config.output_mode} summary of '{config.parameter}' "
                    f"(fill={config.fill_mode}, years={config.years})")
        return summarize(
            table, config.parameter, colors=config.colors, years=config.years,
            fill_mode=config.fill_mode, output_mode=config.output_mode,
            max_gap=config.max_gap, base_size=config.base_size
        )

    def write_outputs(self, output: SummaryOutput, output_dir: Path) -> List[Path]:
        """Save figures as PNG or summary tables as CSV under ``output_dir``"""
        output_dir = Path(output_dir)
        name = f"summary_{self.config.parameter}"

        if isinstance(output, SummaryResult):
            output_dir.mkdir(parents=True, exist_ok=True)
            written = []
            for table_name, frame in output.as_dict().items():
                csv_path = output_dir / f"{name}_{table_name}.csv"
                frame.to_csv(csv_path, index=False)
                written.append(csv_path)
            logger.info(f"Wrote {len(written)} summary tables to {output_dir}")
            return written

        plotter = PlottingClient(base_size=self.config.base_size, plot_dir=output_dir)
        if isinstance(output, Figure):
            return [plotter.save_figure(output, name)]

        return plotter.save_all({
            f"{name}_{i}_{descriptor.kind}": plotter.render_chart(descriptor)
            for i, descriptor in enumerate(output, start=1)
        })


def main(argv=None):
    """Command line interface for the summary workflow"""
    parser = argparse.ArgumentParser(description="Seasonal and annual summaries of SWMP data")
    parser.add_argument("csv_file", help="CSV with a datetimestamp column and one column per parameter")
    parser.add_argument("--param", help="Parameter to summarize")
    parser.add_argument("--station", default='', help="SWMP station code, e.g. apacpwq")
    parser.add_argument("--station-type", choices=[t.value for t in StationType],
                        help="Station type, if not inferred from --station")
    parser.add_argument("--years", type=int, nargs='+', help="One or two years")
    parser.add_argument("--fill", choices=['none', 'climatology', 'interpolate'], help="Gap-fill policy")
    parser.add_argument("--output-mode", choices=[m.value for m in OutputMode], help="Output mode")
    parser.add_argument("--max-gap", type=int, help="Longest run of missing rows to interpolate")
    parser.add_argument("--config", help="YAML or JSON summary configuration")
    parser.add_argument("--output-dir", default="plots", help="Directory for figures or tables")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        if args.config:
            manager = ConfigurationManager.for_file(args.config)
            config = manager.load_config(args.config)
        elif args.param:
            manager = ConfigurationManager()
            config = manager.create_default_config(args.param)
        else:
            parser.error("--param or --config is required")

        overrides = {
            'parameter': args.param, 'years': args.years, 'fill_mode': args.fill,
            'output_mode': args.output_mode, 'max_gap': args.max_gap,
        }
        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, value)

        problems = manager.validate_config(config)
        if problems:
            raise ConfigurationError(args.config or 'command line', "validate configuration",
                                     "; ".join(problems))

        df = pd.read_csv(args.csv_file)
        table = TimeSeriesTable.from_dataframe(df, station_type=args.station_type, station=args.station)

        workflow = SummaryWorkflow(config)
        written = workflow.write_outputs(workflow.run(table), Path(args.output_dir))

    except (SummaryRequestError, TimeSeriesTableError, ConfigurationError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    for path in written:
        print(f"✅ {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
