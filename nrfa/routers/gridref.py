"""Grid reference endpoints: parsing, WGS84 conversion, batches and reverse lookups."""

import logging

from fastapi import APIRouter, HTTPException, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..config import CONVERT_MAX_BATCH, RATE_LIMIT_DEFAULT
from ..geodesy import (
    CoordSystem,
    GeodesyError,
    bng_to_wgs84,
    convert,
    parse_grid_reference,
    wgs84_to_bng,
)
from ..geodesy.gridref import RESOLUTIONS, format_grid_reference
from ..schemas import BngPoint, ConvertRequest, ConvertResponse, ConvertRow, GridRefLookup, Wgs84Point

logger = logging.getLogger(__name__)
router = APIRouter(tags=["gridref"])

limiter = Limiter(key_func=get_remote_address, default_limits=[RATE_LIMIT_DEFAULT])


@router.get("/gridref/{reference}", response_model=BngPoint)
def get_bng(reference: str):
    """Parse a single grid reference to British National Grid easting/northing."""
    try:
        coord = parse_grid_reference(reference)
    except GeodesyError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return BngPoint(
        reference=reference,
        easting=coord.easting,
        northing=coord.northing,
        resolution=coord.resolution,
    )


@router.get("/gridref/{reference}/wgs84", response_model=Wgs84Point)
def get_wgs84(reference: str):
    """Convert a single grid reference to WGS84 latitude/longitude.

    The point is the SW corner of the referenced cell; `resolution` gives
    the cell size in metres.
    """
    try:
        coord = parse_grid_reference(reference)
        geo = bng_to_wgs84(coord.easting, coord.northing)
    except GeodesyError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return Wgs84Point(
        reference=reference,
        lat=geo.lat,
        lon=geo.lon,
        height=geo.height,
        resolution=coord.resolution,
    )


@router.post("/gridref/convert", response_model=ConvertResponse)
@limiter.limit(RATE_LIMIT_DEFAULT)
def convert_batch(request: Request, body: ConvertRequest):
    """Convert a batch of grid references.

    Malformed references do not fail the request: each gets a row with
    `error` set and the remaining rows are converted as normal.
    """
    if len(body.references) > CONVERT_MAX_BATCH:
        raise HTTPException(
            status_code=413,
            detail=f"Batch of {len(body.references)} exceeds the limit of {CONVERT_MAX_BATCH}",
        )
    try:
        system = CoordSystem.parse(body.coord_system)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    results = convert(body.references, system)
    rows = [ConvertRow(**r.to_dict()) for r in results]
    failed = sum(1 for r in results if not r.ok)
    if failed:
        logger.info("Batch conversion: %d/%d references failed", failed, len(results))

    return ConvertResponse(
        coord_system=system.value,
        total=len(rows),
        failed=failed,
        results=rows,
    )


@router.get("/wgs84/gridref", response_model=GridRefLookup)
def get_gridref(
    lat: float = Query(..., ge=-90, le=90, description="WGS84 latitude"),
    lon: float = Query(..., ge=-180, le=180, description="WGS84 longitude"),
    resolution: int = Query(default=1, description="Cell size in metres (1, 10, ..., 100000)"),
):
    """Find the grid reference of the cell containing a WGS84 point."""
    if resolution not in RESOLUTIONS:
        raise HTTPException(status_code=422, detail=f"resolution must be one of {list(RESOLUTIONS)}")
    try:
        coord = wgs84_to_bng(lat, lon)
        grid_ref = format_grid_reference(coord, resolution)
    except GeodesyError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return GridRefLookup(
        grid_reference=grid_ref,
        easting=round(coord.easting, 3),
        northing=round(coord.northing, 3),
        resolution=resolution,
    )
