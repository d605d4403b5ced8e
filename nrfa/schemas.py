from typing import Optional

from pydantic import BaseModel, Field

# --- Single-point schemas ---

class BngPoint(BaseModel):
    reference: str
    easting: float
    northing: float
    resolution: int
    projection: str = "BNG"


class Wgs84Point(BaseModel):
    reference: str
    lat: float
    lon: float
    height: float = 0.0
    datum: str = "WGS84"
    resolution: int


class GridRefLookup(BaseModel):
    grid_reference: str
    easting: float
    northing: float
    resolution: int


# --- Batch conversion schemas ---

class ConvertRequest(BaseModel):
    references: list[str] = Field(..., description="Grid references, e.g. ['SN853872', 'TQ3080']")
    coord_system: str = Field(default="BNG", description="'BNG' or 'WGS84'")


class ConvertRow(BaseModel):
    reference: str
    easting: Optional[float] = None
    northing: Optional[float] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    resolution: Optional[int] = None
    error: Optional[str] = None


class ConvertResponse(BaseModel):
    coord_system: str
    total: int
    failed: int
    results: list[ConvertRow]
