"""nrfa: grid reference and coordinate conversion for the NRFA station catalogue."""

from .geodesy import (
    ConversionResult,
    CoordSystem,
    GeodesyError,
    ParseError,
    ProjectionError,
    TransformError,
    add_coordinates,
    convert,
    grid_reference_to_bng,
    grid_reference_to_wgs84,
    osg_parse,
    parse_grid_reference,
)

__all__ = [
    "ConversionResult",
    "CoordSystem",
    "GeodesyError",
    "ParseError",
    "ProjectionError",
    "TransformError",
    "add_coordinates",
    "convert",
    "grid_reference_to_bng",
    "grid_reference_to_wgs84",
    "osg_parse",
    "parse_grid_reference",
]
