#!/usr/bin/env python3
"""Beth Yw? command line interface."""

import argparse
import logging
import sys
from pathlib import Path

from .areas import AreaStore
from .cache import clear_url_cache, get_cached_files
from .datasets import DatasetConfig, DatasetRegistry
from .errors import BethYwError, MalformedInputError
from .filters import (
    ALL_YEARS,
    UNFILTERED,
    StringFilter,
    YearRange,
    areas_filter,
    measures_filter,
    validate_year,
)
from .input import URL_CACHE_DIR_NAME, join_location, open_source

log = logging.getLogger("bethyw")

ALL = "all"


def _split(values: list[str] | None) -> list[str]:
    """Flatten ``["a,b", "c"]`` into ``["a", "b", "c"]``."""
    items: list[str] = []
    for value in values or []:
        items.extend(item.strip() for item in value.split(",") if item.strip())
    return items


def parse_datasets_arg(
    values: list[str] | None, registry: DatasetRegistry
) -> list[DatasetConfig]:
    """Datasets to import; none given or ``all`` (any case) selects every dataset.

    Raises:
        ValueError: If a code matches no dataset in the registry.
    """
    codes = _split(values)
    if not codes or any(code.lower() == ALL for code in codes):
        return list(registry.datasets)
    return [registry.get_dataset(code) for code in codes]


def parse_areas_arg(values: list[str] | None) -> StringFilter:
    """Area filter; none given or ``all`` (any case) imports every area."""
    codes = _split(values)
    if not codes or any(code.lower() == ALL for code in codes):
        return UNFILTERED
    return areas_filter(codes)


def parse_measures_arg(values: list[str] | None) -> StringFilter:
    """Measure filter; none given or ``all`` (any case) imports every measure."""
    codes = _split(values)
    if not codes or any(code.lower() == ALL for code in codes):
        return UNFILTERED
    return measures_filter(codes)


def parse_years_arg(value: str | None) -> YearRange:
    """Parse ``YYYY`` or ``YYYY-ZZZZ``; empty or ``0`` imports every year.

    Raises:
        MalformedInputError: If the value is not a valid year or range.
    """
    if value is None or not value.strip():
        return ALL_YEARS
    value = value.strip()
    try:
        if "-" not in value:
            year = validate_year(value)
            return YearRange(year, year)
        first, second = value.split("-", 1)
        start, end = validate_year(first), validate_year(second)
    except MalformedInputError:
        raise MalformedInputError("Invalid input for years argument") from None
    if start > end:
        raise MalformedInputError("Invalid input for years argument")
    return YearRange(start, end)


def load_areas(
    store: AreaStore,
    data_dir: str,
    registry: DatasetRegistry,
    areas: StringFilter = UNFILTERED,
    cache_dir: Path | None = None,
) -> None:
    """Import the authority code file listed in the registry."""
    load_dataset(store, data_dir, registry.areas, areas, cache_dir=cache_dir)


def load_dataset(
    store: AreaStore,
    data_dir: str,
    dataset: DatasetConfig,
    areas: StringFilter = UNFILTERED,
    measures: StringFilter = UNFILTERED,
    years: YearRange = ALL_YEARS,
    cache_dir: Path | None = None,
) -> None:
    source = open_source(join_location(data_dir, dataset.file), cache_dir)
    log.info("Importing %s from %s", dataset.code, source.source)
    with source.open() as stream:
        store.populate(stream, dataset.parser, dataset.cols, areas, measures, years)


def load_datasets(
    store: AreaStore,
    data_dir: str,
    datasets: list[DatasetConfig],
    areas: StringFilter = UNFILTERED,
    measures: StringFilter = UNFILTERED,
    years: YearRange = ALL_YEARS,
    cache_dir: Path | None = None,
) -> None:
    """Import each dataset in turn, stopping at the first failure."""
    for dataset in datasets:
        load_dataset(store, data_dir, dataset, areas, measures, years, cache_dir)


def main() -> int:
    """Import the requested datasets and print them."""
    parser = argparse.ArgumentParser(
        prog="bethyw",
        description="Parse official Welsh Government statistics data files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                  # All datasets as tables
  %(prog)s -d popden -a W06000011 -y 2010-2015
  %(prog)s -d popden biz -m pop dens --json
  %(prog)s --dir https://example.com/data   # Download datasets over HTTP
  %(prog)s -d popden --serve --port 8080    # Serve the data as JSON
  %(prog)s --clear-cache                    # Move downloaded files to trash
        """,
    )

    parser.add_argument(
        "--dir", default="datasets", help="Directory or base URL of the input data files"
    )
    parser.add_argument(
        "-d",
        "--datasets",
        nargs="+",
        metavar="CODE",
        help="Datasets to import (omit or 'all' for every dataset)",
    )
    parser.add_argument(
        "-a",
        "--areas",
        nargs="+",
        metavar="CODE",
        help="Authority codes to import (omit or 'all' for every area)",
    )
    parser.add_argument(
        "-m",
        "--measures",
        nargs="+",
        metavar="CODE",
        help="Measures to import (omit or 'all' for every measure)",
    )
    parser.add_argument(
        "-y",
        "--years",
        default="0",
        metavar="YYYY[-ZZZZ]",
        help="A year or inclusive range of years to import",
    )
    parser.add_argument(
        "-j", "--json", action="store_true", help="Print the output as JSON instead of tables"
    )
    parser.add_argument(
        "--registry", type=Path, help="Dataset registry YAML (default: bundled StatsWales list)"
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        default=Path(URL_CACHE_DIR_NAME),
        help=f"Download cache for URL inputs (default: {URL_CACHE_DIR_NAME})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log import progress")

    # Serve mode
    parser.add_argument("--serve", action="store_true", help="Serve the imported data over HTTP")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to serve on (default: 8000)")

    # Cache mode
    parser.add_argument(
        "--clear-cache", action="store_true", help="Remove downloaded files (move to trash)"
    )
    parser.add_argument(
        "--permanent",
        action="store_true",
        help="Permanently delete instead of moving to trash (use with --clear-cache)",
    )
    parser.add_argument(
        "--force", action="store_true", help="Skip confirmation prompt (use with --clear-cache)"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s | %(name)s | %(message)s",
    )

    if args.clear_cache:
        return _handle_clear_cache(args.cache_dir, permanent=args.permanent, skip_confirm=args.force)

    if args.registry is not None and not args.registry.exists():
        print(f"Error: Registry file not found: {args.registry}", file=sys.stderr)
        return 1

    try:
        registry = (
            DatasetRegistry.from_yaml(args.registry) if args.registry else DatasetRegistry.default()
        )
        datasets = parse_datasets_arg(args.datasets, registry)
        areas = parse_areas_arg(args.areas)
        measures = parse_measures_arg(args.measures)
        years = parse_years_arg(args.years)
    except (KeyError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    store = AreaStore()
    try:
        load_areas(store, args.dir, registry, areas, args.cache_dir)
        load_datasets(store, args.dir, datasets, areas, measures, years, args.cache_dir)
    except BethYwError as e:
        print(f"Error importing dataset:\n{e}", file=sys.stderr)
        return 1

    if args.serve:
        return _serve(store, args.host, args.port)

    if args.json:
        print(store.to_json_string())
    else:
        print(store.to_table())

    return 0


def _serve(store: AreaStore, host: str, port: int) -> int:
    """Serve ``store`` with uvicorn until interrupted."""
    import uvicorn

    from .server import app, configure

    configure(store)
    print(f"Serving {store.count()} area(s) at http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="warning")
    return 0


def _handle_clear_cache(cache_dir: Path, permanent: bool, skip_confirm: bool) -> int:
    """Handle the --clear-cache command.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    cached = get_cached_files(cache_dir)
    if not cached:
        print("No cached downloads to clean.")
        return 0

    action = "permanently deleted" if permanent else "moved to trash"
    print(f"\nThe following files will be {action}:\n")
    for path in cached:
        print(f"  {path}")
    print()

    if not skip_confirm:
        prompt = "These files will be moved to trash. Continue? [y/N] "
        if permanent:
            prompt = "These files will be PERMANENTLY DELETED. Continue? [y/N] "
        response = input(prompt).strip().lower()
        if response not in ("y", "yes"):
            print("Cancelled.")
            return 0

    results = clear_url_cache(cache_dir, permanent=permanent)

    cleaned = sum(1 for r in results if r.success)
    failed = [r for r in results if not r.success]

    if cleaned > 0:
        action_past = "Permanently deleted" if permanent else "Moved to trash"
        print(f"\n{action_past}: {cleaned} file(s)")
    if failed:
        print(f"Failed: {len(failed)} file(s)")
        for r in failed:
            print(f"  {r.path}: {r.error}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
