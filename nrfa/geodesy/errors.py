"""Exceptions raised by the coordinate engine."""


class GeodesyError(Exception):
    """Base exception for all coordinate conversion errors."""


class ParseError(GeodesyError):
    """A grid reference could not be parsed or formatted."""

    def __init__(self, reference: str, reason: str):
        self.reference = reference
        self.reason = reason
        super().__init__(f"Invalid grid reference '{reference}': {reason}")

    def __reduce__(self):
        return (self.__class__, (self.reference, self.reason))


class ProjectionError(GeodesyError):
    """Inverse Transverse Mercator did not produce a usable latitude."""

    def __init__(self, easting: float, northing: float, reason: str):
        self.easting = easting
        self.northing = northing
        self.reason = reason
        super().__init__(
            f"Cannot project easting={easting}, northing={northing}: {reason}"
        )

    def __reduce__(self):
        return (self.__class__, (self.easting, self.northing, self.reason))


class TransformError(GeodesyError):
    """Helmert datum transform received or produced an implausible point."""

    def __init__(self, point: tuple, reason: str):
        self.point = point
        self.reason = reason
        super().__init__(f"Cannot transform {point}: {reason}")

    def __reduce__(self):
        return (self.__class__, (self.point, self.reason))
