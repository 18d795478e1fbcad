"""Coordinate and distance helpers shared by ingestion and search."""

import logging
import math

logger = logging.getLogger(__name__)


class InvalidCoordinateError(ValueError):
    """Raised in strict mode when a coordinate cannot be used."""


def parse_coordinate(
    raw: str | None,
    *,
    name: str,
    limit: float,
    strict: bool = False,
) -> float:
    """Parse a decimal-degree string.

    In lax mode a missing, unparsable or non-finite value becomes ``0.0``.
    In strict mode those cases, and values outside ``[-limit, limit]``, raise
    :class:`InvalidCoordinateError`.
    """
    try:
        value = float(raw) if raw is not None else math.nan
    except ValueError:
        value = math.nan

    if not math.isfinite(value):
        if strict:
            raise InvalidCoordinateError(f"{name} must be a number")
        logger.debug("Unusable %s %r, defaulting to 0", name, raw)
        return 0.0

    if strict and abs(value) > limit:
        raise InvalidCoordinateError(f"{name} must be between -{limit:g} and {limit:g}")
    return value


def parse_lat_lon(
    lat: str | None, lon: str | None, *, strict: bool = False
) -> tuple[float, float]:
    return (
        parse_coordinate(lat, name="lat", limit=90.0, strict=strict),
        parse_coordinate(lon, name="lon", limit=180.0, strict=strict),
    )


def format_distance(radius_km: float) -> str:
    """Render a radius as an Elasticsearch distance string (``"200.0km"``).

    ``repr`` keeps every significant digit so the index sees exactly the
    radius the caller asked for.
    """
    return f"{float(radius_km)!r}km"
