"""Run the exposure pipeline over a JSON dataset and print a report.

Usage:
    python -m scripts.run_exposure \\
        --reference data/synthetic/reference_v1.json \\
        --dataset data/synthetic/dataset_v1.json \\
        --year 2015 --dimension DECILE --excel results.xlsx
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import structlog

from popexposure.config.logging_setup import configure_logging
from popexposure.config.settings import get_settings
from popexposure.data.dataset_loader import load_dataset_from_json, load_reference_from_json
from popexposure.engine.errors import (
    DimensionMismatchError,
    PopulationDivisionError,
    ProviderError,
)
from popexposure.engine.exposure import LoggingExposureObserver
from popexposure.engine.pipeline import ExposurePipeline, PipelineRequest, PipelineResult
from popexposure.export.excel_export import ExposureExcelExporter
from popexposure.models.common import Location, Pollutant
from popexposure.models.demographics import DemographicDimension, demographic_groups
from popexposure.providers.static import StaticDataProvider

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def _enum_arg(enum_cls):  # noqa: ANN001, ANN202
    """argparse type accepting enum values in any case."""

    def parse(value: str):  # noqa: ANN202
        return enum_cls(value.upper())

    parse.__name__ = enum_cls.__name__
    return parse


def _print_header(result: PipelineResult) -> None:
    w = 60
    print("=" * w)
    print("  Population-weighted exposure")
    print(f"  Run {result.run_id}")
    print("=" * w)
    print(f"  Year:      {result.year}")
    print(f"  Location:  {result.location.value}")
    print(f"  Pollutant: {result.pollutant.value}")
    print(f"  SCCs:      {len(result.demand_emissions.scc_codes)}")


def _print_group_totals(result: PipelineResult) -> None:
    print()
    print(f"  {'Group':<14} {'Emissions (pop-adjusted)':>26}")
    print(f"  {'-' * 14} {'-' * 26}")
    for label, total in result.group_emission_totals.items():
        print(f"  {label:<14} {total:>26,.2f}")


def _print_exposure(result: PipelineResult) -> None:
    exposure = result.exposure
    per_capita = exposure.per_capita()
    print()
    print(f"  {'Population':<14} {'Exposure':>16} {'People':>14} {'Per capita':>11}")
    print(f"  {'-' * 14} {'-' * 16} {'-' * 14} {'-' * 11}")
    for name, value in exposure.exposure.items():
        pc = per_capita.get(name)
        pc_text = f"{pc:>11.4f}" if pc is not None else f"{'n/a':>11}"
        print(
            f"  {name:<14} {value:>16,.2f}"
            f" {exposure.population_totals[name]:>14,.0f} {pc_text}"
        )


def main() -> None:
    """Parse arguments, run the pipeline and report."""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Compute emissions by demographic group and population exposure",
    )
    parser.add_argument("--reference", type=Path, required=True, help="Reference tables JSON")
    parser.add_argument("--dataset", type=Path, required=True, help="Provider dataset JSON")
    parser.add_argument("--year", type=int, default=settings.DEFAULT_YEAR)
    parser.add_argument(
        "--location", type=_enum_arg(Location), choices=list(Location),
        default=settings.DEFAULT_LOCATION,
    )
    parser.add_argument(
        "--pollutant", type=_enum_arg(Pollutant), choices=list(Pollutant),
        default=settings.DEFAULT_POLLUTANT,
    )
    parser.add_argument(
        "--dimension", type=_enum_arg(DemographicDimension), choices=list(DemographicDimension),
        default=DemographicDimension.DECILE,
    )
    parser.add_argument("--excel", type=Path, default=None, help="Write an Excel report here")
    parser.add_argument(
        "--trace", action="store_true",
        help="Log every grid cell contribution at DEBUG level",
    )
    args = parser.parse_args()

    configure_logging(settings)

    reference = load_reference_from_json(args.reference)
    provider = StaticDataProvider(load_dataset_from_json(args.dataset))
    pipeline = ExposurePipeline(
        reference=reference,
        providers=provider.bundle(),
        supported_years=settings.SUPPORTED_YEARS,
    )
    request = PipelineRequest(
        year=args.year,
        location=args.location,
        pollutant=args.pollutant,
        groups=demographic_groups(args.dimension),
    )
    observer = None
    if args.trace:
        trace_log = logging.getLogger("popexposure.trace")
        trace_log.setLevel(logging.DEBUG)
        observer = LoggingExposureObserver(trace_log)

    try:
        result = pipeline.run(request, observer=observer)
    except (DimensionMismatchError, PopulationDivisionError, ProviderError, ValueError) as exc:
        logger.error("pipeline_failed", error=str(exc))
        print(f"  ERROR: {exc}")
        sys.exit(1)

    _print_header(result)
    _print_group_totals(result)
    _print_exposure(result)

    if args.excel:
        args.excel.write_bytes(ExposureExcelExporter().export(result))
        print()
        print(f"  Excel report: {args.excel}")

    print("=" * 60)


if __name__ == "__main__":
    main()
