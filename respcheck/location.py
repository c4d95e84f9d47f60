"""Geographic coordinates, geohash scores and sets of named locations."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional

LATITUDE_MAX = 85.05112878
LONGITUDE_MAX = 180.0
LATITUDE_MIN = -LATITUDE_MAX
LONGITUDE_MIN = -LONGITUDE_MAX
EARTH_RADIUS_IN_METERS = 6372797.560856

_GRID_STEPS = 1 << 26
_LATITUDE_SCALE = LATITUDE_MAX - LATITUDE_MIN
_LONGITUDE_SCALE = LONGITUDE_MAX - LONGITUDE_MIN

_WORDS = (
    "apple", "banana", "blueberry", "cherry", "grape", "mango", "orange",
    "pear", "pineapple", "raspberry", "strawberry", "watermelon", "lemon",
    "lime", "kiwi", "peach", "plum", "apricot", "coconut", "fig", "papaya",
    "melon", "guava", "olive", "date", "quince", "lychee", "berry",
)


def _is_valid_pair(latitude: float, longitude: float) -> bool:
    return (
        LATITUDE_MIN <= latitude <= LATITUDE_MAX
        and LONGITUDE_MIN <= longitude <= LONGITUDE_MAX
    )


def _spread(value: int) -> int:
    value = (value | (value << 16)) & 0x0000FFFF0000FFFF
    value = (value | (value << 8)) & 0x00FF00FF00FF00FF
    value = (value | (value << 4)) & 0x0F0F0F0F0F0F0F0F
    value = (value | (value << 2)) & 0x3333333333333333
    return (value | (value << 1)) & 0x5555555555555555


def _compact(value: int) -> int:
    value &= 0x5555555555555555
    value = (value | (value >> 1)) & 0x3333333333333333
    value = (value | (value >> 2)) & 0x0F0F0F0F0F0F0F0F
    value = (value | (value >> 4)) & 0x00FF00FF00FF00FF
    value = (value | (value >> 8)) & 0x0000FFFF0000FFFF
    return (value | (value >> 16)) & 0x00000000FFFFFFFF


def _format_full_precision(number: float) -> str:
    text = format(Decimal(repr(number)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair, validated against the range Redis accepts."""

    latitude: float
    longitude: float
    expect_valid: bool = field(default=True, compare=False, repr=False, kw_only=True)

    def __post_init__(self) -> None:
        valid = _is_valid_pair(self.latitude, self.longitude)
        if self.expect_valid and not valid:
            raise ValueError(
                f"Invalid coordinates (lat={self.latitude:.8f},lon={self.longitude:.8f})"
            )
        if not self.expect_valid and valid:
            raise ValueError(
                f"Valid coordinates (lat={self.latitude:.8f}, lon={self.longitude:.8f}) "
                "where invalid ones were expected"
            )

    def geo_grid_center(self) -> Coordinates:
        """Center of the smallest geo grid cell holding these coordinates."""
        return decode_geo_code(self.geo_code())

    def geo_code(self) -> int:
        """The 52-bit interleaved geocode Redis uses as a sorted set score."""
        latitude_offset = (self.latitude - LATITUDE_MIN) / _LATITUDE_SCALE * _GRID_STEPS
        longitude_offset = (self.longitude - LONGITUDE_MIN) / _LONGITUDE_SCALE * _GRID_STEPS
        return _spread(int(latitude_offset)) | (_spread(int(longitude_offset)) << 1)

    def distance_from(self, other: Coordinates) -> float:
        """Haversine distance in meters between the grid centers of both points."""
        c1 = self.geo_grid_center()
        c2 = other.geo_grid_center()
        lat1 = math.radians(c1.latitude)
        lat2 = math.radians(c2.latitude)
        lon1 = math.radians(c1.longitude)
        lon2 = math.radians(c2.longitude)
        v = math.sin((lon2 - lon1) / 2)
        u = math.sin((lat2 - lat1) / 2)
        a = u * u + math.cos(lat1) * math.cos(lat2) * v * v
        return 2.0 * EARTH_RADIUS_IN_METERS * math.asin(math.sqrt(a))

    def longitude_as_redis_command_arg(self) -> str:
        return _format_full_precision(self.longitude)

    def latitude_as_redis_command_arg(self) -> str:
        return _format_full_precision(self.latitude)


def invalid_coordinates(latitude: float, longitude: float) -> Coordinates:
    """Build coordinates that must lie outside the valid range."""
    return Coordinates(latitude, longitude, expect_valid=False)


def decode_geo_code(geo_code: int) -> Coordinates:
    """Return the center of the grid cell a geocode describes."""
    latitude_number = _compact(geo_code)
    longitude_number = _compact(geo_code >> 1)

    latitude_min = LATITUDE_MIN + _LATITUDE_SCALE * (latitude_number / _GRID_STEPS)
    latitude_max = LATITUDE_MIN + _LATITUDE_SCALE * ((latitude_number + 1) / _GRID_STEPS)
    longitude_min = LONGITUDE_MIN + _LONGITUDE_SCALE * (longitude_number / _GRID_STEPS)
    longitude_max = LONGITUDE_MIN + _LONGITUDE_SCALE * ((longitude_number + 1) / _GRID_STEPS)

    latitude = (latitude_min + latitude_max) / 2
    longitude = (longitude_min + longitude_max) / 2
    if not _is_valid_pair(latitude, longitude):
        raise ValueError(
            f"Decoded coordinates (lat={latitude:.8f}, lon={longitude:.8f}) "
            "is out of valid range"
        )
    return Coordinates(latitude, longitude)


@dataclass(frozen=True)
class Location:
    """A named point."""

    coordinates: Coordinates
    name: str

    @property
    def latitude(self) -> float:
        return self.coordinates.latitude

    @property
    def longitude(self) -> float:
        return self.coordinates.longitude

    def geo_grid_center(self) -> Coordinates:
        return self.coordinates.geo_grid_center()

    def geo_code(self) -> int:
        return self.coordinates.geo_code()

    def distance_from(self, other: Location) -> float:
        return self.coordinates.distance_from(other.coordinates)

    def longitude_as_redis_command_arg(self) -> str:
        return self.coordinates.longitude_as_redis_command_arg()

    def latitude_as_redis_command_arg(self) -> str:
        return self.coordinates.latitude_as_redis_command_arg()


class LocationSet:
    """An ordered collection of locations."""

    def __init__(self, locations: Optional[Iterable[Location]] = None) -> None:
        self._locations: list[Location] = list(locations or ())

    def __len__(self) -> int:
        return len(self._locations)

    def __iter__(self):
        return iter(list(self._locations))

    def add_location(self, location: Location) -> LocationSet:
        self._locations.append(location)
        return self

    def center_coordinates(self) -> Coordinates:
        """Coordinates whose latitude and longitude are the means over the set."""
        if not self._locations:
            raise ValueError("Cannot find the center of an empty LocationSet")
        count = len(self._locations)
        latitude = sum(loc.latitude for loc in self._locations) / count
        longitude = sum(loc.longitude for loc in self._locations) / count
        return Coordinates(latitude, longitude)

    def closest_to(self, reference: Coordinates) -> Location:
        """The location nearest to reference; the earliest wins ties."""
        if not self._locations:
            raise ValueError("Cannot find closest location from empty LocationSet")
        return min(self._locations, key=lambda loc: reference.distance_from(loc.coordinates))

    def farthest_from(self, reference: Coordinates) -> Location:
        """The location farthest from reference; the earliest wins ties."""
        if not self._locations:
            raise ValueError("Cannot find farthest location from empty LocationSet")
        return max(self._locations, key=lambda loc: reference.distance_from(loc.coordinates))

    def within_radius(self, reference: Coordinates, radius: float) -> LocationSet:
        """A new set of the locations at most radius meters from reference."""
        return LocationSet(
            loc for loc in self._locations
            if reference.distance_from(loc.coordinates) <= radius
        )

    def locations(self) -> list[Location]:
        return list(self._locations)

    def location_names(self) -> list[str]:
        return [loc.name for loc in self._locations]


def _random_words(count: int) -> list[str]:
    if count <= len(_WORDS):
        return random.sample(_WORDS, count)
    return [f"{random.choice(_WORDS)}_{i}" for i in range(count)]


def generate_random_location_set(count: int) -> LocationSet:
    """A set of count locations with distinct names and valid random coordinates."""
    result = LocationSet()
    for name in _random_words(count):
        latitude = random.uniform(LATITUDE_MIN, LATITUDE_MAX)
        longitude = random.uniform(LONGITUDE_MIN, LONGITUDE_MAX)
        result.add_location(Location(Coordinates(latitude, longitude), name))
    return result