"""Add coordinates to an NRFA catalogue extract.

Reads a CSV with a ``gridReference`` column and writes it back out with
easting/northing (BNG) or lat/lon (WGS84) columns appended.

Usage:
    python scripts/convert_gridrefs.py stations.csv out.csv
    python scripts/convert_gridrefs.py stations.csv out.parquet --coord-system WGS84
    python scripts/convert_gridrefs.py stations.csv out.csv --column grid_ref --workers 4
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pandas as pd

from nrfa import config
from nrfa.geodesy import ConvertOptions, CoordSystem, add_coordinates

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s  %(levelname)-7s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("convert_gridrefs")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("input", type=Path, help="CSV file with a grid reference column")
    parser.add_argument("output", type=Path, help="Output .csv or .parquet file")
    parser.add_argument(
        "--coord-system",
        default=config.DEFAULT_COORD_SYSTEM,
        choices=[c.value for c in CoordSystem],
        type=str.upper,
        help="Target coordinate system (default: %(default)s)",
    )
    parser.add_argument("--column", default="gridReference", help="Grid reference column name")
    parser.add_argument(
        "--workers",
        type=int,
        default=config.CONVERT_MAX_WORKERS,
        help="Worker processes for large files (default: %(default)s)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    if not args.input.is_file():
        log.error("Input file not found: %s", args.input)
        return 2

    frame = pd.read_csv(args.input)
    log.info("Read %d rows from %s", len(frame), args.input)

    if args.column not in frame.columns:
        log.error("Column '%s' not in %s (columns: %s)", args.column, args.input, ", ".join(frame.columns))
        return 2

    options = ConvertOptions(
        coord_system=CoordSystem.parse(args.coord_system),
        max_workers=args.workers,
    )
    out = add_coordinates(frame, options.coord_system, column=args.column, options=options)

    if args.output.suffix.lower() == ".parquet":
        out.to_parquet(args.output, engine="pyarrow", index=False)
    else:
        out.to_csv(args.output, index=False)

    failed = int(out["error"].notna().sum())
    log.info("Wrote %d rows to %s (%d failed)", len(out), args.output, failed)
    for _, row in out[out["error"].notna()].iterrows():
        log.warning("  %s", row["error"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
