"""GeoCoordinates value object and great-circle distance."""

import math

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float

from delivery.domain import delivery

EARTH_RADIUS_MILES = 3959.0


@delivery.value_object
class GeoCoordinates:
    """Latitude/longitude pair for a farm or a delivery destination.

    Latitude ranges from -90 to 90, longitude from -180 to 180. Partial
    coordinates are rejected.
    """

    latitude: Float(min_value=-90.0, max_value=90.0)
    longitude: Float(min_value=-180.0, max_value=180.0)

    @invariant.post
    def both_coordinates_required(self):
        if self.latitude is None or self.longitude is None:
            raise ValidationError({"coordinates": ["Both latitude and longitude are required"]})

    def distance_to(self, other: "GeoCoordinates") -> float:
        """Distance to ``other`` in miles, rounded to one decimal place."""
        return round(haversine_miles(self, other), 1)


def haversine_miles(origin: GeoCoordinates, destination: GeoCoordinates) -> float:
    """Great-circle distance between two coordinates in miles."""
    d_lat = math.radians(destination.latitude - origin.latitude)
    d_lng = math.radians(destination.longitude - origin.longitude)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(origin.latitude)) * math.cos(math.radians(destination.latitude)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def coordinates_from(value) -> GeoCoordinates:
    """Coerce ``{"lat": .., "lng": ..}``, ``{"latitude": .., "longitude": ..}``
    or a GeoCoordinates into GeoCoordinates.

    Raises ValidationError for anything else.
    """
    if isinstance(value, GeoCoordinates):
        return value
    if not isinstance(value, dict):
        raise ValidationError({"coordinates": ["Expected a latitude/longitude pair"]})

    latitude = value.get("lat", value.get("latitude"))
    longitude = value.get("lng", value.get("longitude"))
    for coordinate in (latitude, longitude):
        if isinstance(coordinate, bool) or not isinstance(coordinate, (int, float)):
            raise ValidationError({"coordinates": ["Coordinates must be numbers"]})
    return GeoCoordinates(latitude=float(latitude), longitude=float(longitude))
