"""Track geometry — distance and elevation gain from GPX track text.

Points are scanned out of the raw XML text instead of going through a
document parser, so one broken point (or a truncated file) never costs the
whole track. ``trkpt`` elements are used when present, otherwise ``rtept``.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from nabajk.config import GPX_MAX_BYTES

logger = logging.getLogger(__name__)

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0

NO_POINTS_ERROR = "No track points found in GPX file"
PARSE_FAILED_ERROR = "Failed to parse GPX file"
READ_FAILED_ERROR = "Failed to read file"
WRONG_EXTENSION_ERROR = "Please upload a .gpx file"

_POINT_KINDS = ("trkpt", "rtept")
_ATTR_RE = re.compile(r"""\b(lat|lon)\s*=\s*["']([^"']*)["']""", re.IGNORECASE)
_ELE_RE = re.compile(r"<ele>\s*([^<]*?)\s*</ele>", re.IGNORECASE)


def _point_re(kind: str) -> re.Pattern:
    # <kind attrs/> or <kind attrs>inner</kind>
    return re.compile(
        rf"<{kind}\b([^>]*?)(?:/>|>(.*?)</{kind}\s*>)",
        re.IGNORECASE | re.DOTALL,
    )


_POINT_RES = {kind: _point_re(kind) for kind in _POINT_KINDS}


@dataclass(frozen=True)
class TrackPoint:
    """One position on the track, in decimal degrees and meters."""
    latitude: float
    longitude: float
    elevation: Optional[float] = None


@dataclass(frozen=True)
class GeometrySummary:
    """Result of parsing a track: distance, climbing and point count."""
    distance_km: float = 0.0
    elevation_gain_m: int = 0
    point_count: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, message: str) -> "GeometrySummary":
        return cls(error=message)


def _to_float(text: str | None) -> Optional[float]:
    """Parse a finite float, or None."""
    if text is None:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _scan(raw_text: str, kind: str) -> list[TrackPoint]:
    points: list[TrackPoint] = []
    dropped = 0
    for match in _POINT_RES[kind].finditer(raw_text):
        attrs = {k.lower(): v for k, v in _ATTR_RE.findall(match.group(1))}
        lat = _to_float(attrs.get("lat"))
        lon = _to_float(attrs.get("lon"))
        if lat is None or lon is None or not -90 <= lat <= 90 or not -180 <= lon <= 180:
            dropped += 1
            continue

        ele = None
        inner = match.group(2)
        if inner:
            ele_match = _ELE_RE.search(inner)
            if ele_match:
                ele = _to_float(ele_match.group(1))

        points.append(TrackPoint(lat, lon, ele))

    if dropped:
        logger.debug("Dropped %d malformed <%s> elements", dropped, kind)
    return points


def extract_points(raw_text: str) -> list[TrackPoint]:
    """Extract points in document order; route points only if there is no track."""
    for kind in _POINT_KINDS:
        points = _scan(raw_text, kind)
        if points:
            return points
    return []


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points, in kilometers."""
    lat1_rad = lat1 * math.pi / 180
    lat2_rad = lat2 * math.pi / 180
    delta_lat = (lat2 - lat1) * math.pi / 180
    delta_lon = (lon2 - lon1) * math.pi / 180

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_km(points: Sequence[TrackPoint]) -> float:
    """Total path length over consecutive points, in kilometers."""
    total = 0.0
    for prev, cur in zip(points, points[1:]):
        total += haversine(prev.latitude, prev.longitude, cur.latitude, cur.longitude)
    return total


def elevation_gain_m(points: Sequence[TrackPoint]) -> float:
    """Sum of climbs between points that carry an elevation.

    Points without elevation are skipped, not read as zero. Descents are
    ignored.
    """
    if len(points) < 2:
        return 0.0

    gain = 0.0
    last_ele: Optional[float] = None
    for point in points:
        if point.elevation is None:
            continue
        if last_ele is not None and point.elevation > last_ele:
            gain += point.elevation - last_ele
        last_ele = point.elevation
    return gain


def parse(raw_text: str) -> GeometrySummary:
    """Parse GPX text into a summary. Never raises; failures land in ``error``."""
    try:
        points = extract_points(raw_text)
        if not points:
            return GeometrySummary.failed(NO_POINTS_ERROR)

        return GeometrySummary(
            distance_km=_round_half_up(distance_km(points), 2),
            elevation_gain_m=int(_round_half_up(elevation_gain_m(points))),
            point_count=len(points),
        )
    except Exception as e:
        logger.warning("GPX parse failed: %s", e, exc_info=True)
        return GeometrySummary.failed(str(e) or PARSE_FAILED_ERROR)


def parse_upload(filename: str, content: bytes,
                 max_bytes: int = GPX_MAX_BYTES) -> GeometrySummary:
    """Check an uploaded file and parse it.

    Rejects anything that is not a ``.gpx`` file or is larger than
    ``max_bytes`` before the text is scanned.
    """
    if not (filename or "").lower().endswith(".gpx"):
        return GeometrySummary.failed(WRONG_EXTENSION_ERROR)
    if len(content) > max_bytes:
        return GeometrySummary.failed(f"File too large (max {max_bytes // (1024 * 1024)}MB)")

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("GPX upload %s is not valid UTF-8", filename)
        return GeometrySummary.failed(READ_FAILED_ERROR)
    if not text.strip():
        return GeometrySummary.failed(READ_FAILED_ERROR)

    return parse(text)
