"""Immutable value types passed between conversion steps."""

import math
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Ellipsoid:
    """Reference ellipsoid, tagged with the datum it belongs to."""

    name: str
    datum: str
    a: float  # semi-major axis (m)
    f: float  # flattening

    @property
    def b(self) -> float:
        return self.a * (1 - self.f)

    @property
    def e2(self) -> float:
        """First eccentricity squared."""
        return self.f * (2 - self.f)


@dataclass(frozen=True)
class TransverseMercatorOrigin:
    """True origin, false origin and central scale factor of a TM grid."""

    lat0: float  # degrees
    lon0: float  # degrees
    false_easting: float
    false_northing: float
    scale_factor: float

    @property
    def phi0(self) -> float:
        return math.radians(self.lat0)

    @property
    def lambda0(self) -> float:
        return math.radians(self.lon0)


@dataclass(frozen=True)
class PlaneCoordinate:
    """Easting/northing on a named grid, with the resolution it is known to."""

    easting: float
    northing: float
    # metres; excluded from equality
    resolution: int = field(default=1, compare=False)
    projection: str = "BNG"

    def to_dict(self) -> dict:
        return {
            "easting": self.easting,
            "northing": self.northing,
            "resolution": self.resolution,
            "projection": self.projection,
        }


@dataclass(frozen=True)
class GeographicCoordinate:
    """Latitude/longitude in decimal degrees on a named datum."""

    lat: float
    lon: float
    height: float = 0.0  # ellipsoidal, metres
    datum: str = "WGS84"

    def to_dict(self) -> dict:
        return {
            "lat": round(self.lat, 8),
            "lon": round(self.lon, 8),
            "height": round(self.height, 3),
            "datum": self.datum,
        }


@dataclass(frozen=True)
class HelmertParameters:
    tx: float  # metres
    ty: float
    tz: float
    rx: float  # arc-seconds
    ry: float
    rz: float
    s: float  # ppm

    def inverse(self) -> "HelmertParameters":
        return HelmertParameters(
            tx=-self.tx, ty=-self.ty, tz=-self.tz,
            rx=-self.rx, ry=-self.ry, rz=-self.rz,
            s=-self.s,
        )
