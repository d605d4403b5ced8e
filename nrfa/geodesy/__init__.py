"""Geodetic coordinate engine: grid references, BNG and WGS84."""

from .converter import (
    ConversionResult,
    ConvertOptions,
    CoordSystem,
    add_coordinates,
    bng_to_wgs84,
    convert,
    grid_reference_to_bng,
    grid_reference_to_wgs84,
    osg_parse,
    wgs84_to_bng,
    wgs84_to_gridref,
)
from .errors import GeodesyError, ParseError, ProjectionError, TransformError
from .gridref import format_grid_reference, normalise, parse_grid_reference
from .models import Ellipsoid, GeographicCoordinate, PlaneCoordinate, TransverseMercatorOrigin

__all__ = [
    "ConversionResult",
    "ConvertOptions",
    "CoordSystem",
    "Ellipsoid",
    "GeodesyError",
    "GeographicCoordinate",
    "ParseError",
    "PlaneCoordinate",
    "ProjectionError",
    "TransformError",
    "TransverseMercatorOrigin",
    "add_coordinates",
    "bng_to_wgs84",
    "convert",
    "format_grid_reference",
    "grid_reference_to_bng",
    "grid_reference_to_wgs84",
    "normalise",
    "osg_parse",
    "parse_grid_reference",
    "wgs84_to_bng",
    "wgs84_to_gridref",
]
