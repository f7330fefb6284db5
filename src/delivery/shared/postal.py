"""US ZIP code handling: normalization, coverage prefixes, and centroid lookup."""

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping

from delivery.shared.geo import GeoCoordinates

_ZIP_RE = re.compile(r"^(\d{5})(?:-\d{4})?$")


def normalize_postal_code(value) -> str | None:
    """Return the 5-digit ZIP for ``value`` or None when it is not a US ZIP.

    Accepts ZIP+4 (``94102-1234``) and surrounding whitespace.
    """
    if not isinstance(value, str):
        return None
    match = _ZIP_RE.match(value.strip())
    if match is None:
        return None
    return match.group(1)


def matches_prefix(postal_code: str, prefixes: Iterable[str]) -> bool:
    """True when the normalized ZIP starts with any of ``prefixes``."""
    zip5 = normalize_postal_code(postal_code)
    if zip5 is None:
        return False
    return any(zip5.startswith(prefix) for prefix in prefixes)


class PostalCodeLocator(ABC):
    """Resolves a ZIP code to approximate coordinates."""

    @abstractmethod
    def locate(self, postal_code: str) -> GeoCoordinates | None:
        """Return coordinates for the ZIP, or None if it cannot be placed."""
        ...


# Centroids of individual ZIPs served by partner farms
_ZIP_CENTROIDS = {
    "94102": (37.7813, -122.4167),
    "94103": (37.7725, -122.4091),
    "94107": (37.7621, -122.3971),
    "94110": (37.7486, -122.4156),
    "94115": (37.7856, -122.4358),
    "94117": (37.7700, -122.4469),
    "94122": (37.7593, -122.4836),
    "94301": (37.4443, -122.1500),
    "94601": (37.7766, -122.2197),
    "94704": (37.8662, -122.2577),
    "95014": (37.3230, -122.0322),
    "95060": (36.9741, -122.0308),
    "95814": (38.5804, -121.4922),
    "90012": (34.0614, -118.2385),
    "92101": (32.7190, -117.1628),
}

# Sectional center (3-digit) centroids, used when the exact ZIP is unknown
_SCF_CENTROIDS = {
    "900": (34.0522, -118.2437),
    "902": (33.9164, -118.3526),
    "913": (34.1870, -118.4490),
    "921": (32.7157, -117.1611),
    "926": (33.6846, -117.8265),
    "940": (37.5630, -122.3255),
    "941": (37.7749, -122.4194),
    "943": (37.4419, -122.1430),
    "945": (37.9780, -122.0311),
    "946": (37.8044, -122.2712),
    "947": (37.8716, -122.2727),
    "949": (38.0834, -122.7633),
    "950": (37.3382, -121.8863),
    "951": (37.3541, -121.9552),
    "954": (38.4404, -122.7141),
    "956": (38.6785, -121.2258),
    "958": (38.5816, -121.4944),
}


class StaticPostalCodeLocator(PostalCodeLocator):
    """Table-driven locator: exact ZIP first, then its 3-digit sectional center."""

    def __init__(
        self,
        zip_centroids: Mapping[str, tuple[float, float]] | None = None,
        scf_centroids: Mapping[str, tuple[float, float]] | None = None,
    ) -> None:
        self.zip_centroids = dict(_ZIP_CENTROIDS if zip_centroids is None else zip_centroids)
        self.scf_centroids = dict(_SCF_CENTROIDS if scf_centroids is None else scf_centroids)

    def locate(self, postal_code: str) -> GeoCoordinates | None:
        zip5 = normalize_postal_code(postal_code)
        if zip5 is None:
            return None

        point = self.zip_centroids.get(zip5) or self.scf_centroids.get(zip5[:3])
        if point is None:
            return None
        return GeoCoordinates(latitude=point[0], longitude=point[1])
