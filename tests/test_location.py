import pytest

from respcheck.location import (
    LATITUDE_MAX,
    LATITUDE_MIN,
    LONGITUDE_MAX,
    LONGITUDE_MIN,
    Coordinates,
    Location,
    LocationSet,
    decode_geo_code,
    generate_random_location_set,
    invalid_coordinates,
)


def _loc(name, lat, lon):
    return Location(Coordinates(lat, lon), name)


def test_invalid_latitude_raises():
    with pytest.raises(ValueError):
        Coordinates(LATITUDE_MAX + 1, 0.0)


def test_invalid_longitude_raises():
    with pytest.raises(ValueError):
        Coordinates(0.0, LONGITUDE_MIN - 1)


def test_invalid_coordinates_accepts_out_of_range():
    c = invalid_coordinates(100.0, 10.0)
    assert c.latitude == 100.0
    assert c.longitude == 10.0


def test_invalid_coordinates_rejects_valid_pair():
    with pytest.raises(ValueError):
        invalid_coordinates(10.0, 10.0)


def test_geo_code_of_minimum_corner_is_zero():
    assert Coordinates(LATITUDE_MIN, LONGITUDE_MIN).geo_code() == 0


def test_geo_code_fits_in_52_bits():
    c = Coordinates(LATITUDE_MAX - 0.001, LONGITUDE_MAX - 0.001)
    assert 0 < c.geo_code() < (1 << 52)


@pytest.mark.parametrize(
    "lat,lon", [(0.0, 0.0), (48.8584625, 2.2944692), (-33.9, 151.2), (-80.0, -170.0)]
)
def test_grid_center_is_close_and_has_same_code(lat, lon):
    c = Coordinates(lat, lon)
    center = c.geo_grid_center()
    assert center.latitude == pytest.approx(lat, abs=1e-5)
    assert center.longitude == pytest.approx(lon, abs=1e-5)
    assert center.geo_code() == c.geo_code()


def test_decode_geo_code_round_trip_through_center():
    c = Coordinates(12.34, -56.78)
    decoded = decode_geo_code(c.geo_code())
    assert decoded == c.geo_grid_center()
    assert decode_geo_code(decoded.geo_code()) == decoded


def test_decode_zero_is_near_minimum_corner():
    decoded = decode_geo_code(0)
    assert decoded.latitude == pytest.approx(LATITUDE_MIN, abs=1e-5)
    assert decoded.longitude == pytest.approx(LONGITUDE_MIN, abs=1e-5)


def test_distance_to_self_is_zero_and_symmetric():
    a = Coordinates(40.0, -74.0)
    b = Coordinates(51.5, -0.12)
    assert a.distance_from(a) == 0.0
    assert a.distance_from(b) == pytest.approx(b.distance_from(a))


def test_distance_one_degree_on_equator():
    d = Coordinates(0.0, 0.0).distance_from(Coordinates(0.0, 1.0))
    assert 111_000 < d < 111_400


def test_command_arg_formatting():
    c = Coordinates(-12.5, 180.0)
    assert c.latitude_as_redis_command_arg() == "-12.5"
    assert c.longitude_as_redis_command_arg() == "180"
    assert Coordinates(0.00001, 0.0).latitude_as_redis_command_arg() == "0.00001"


def test_location_delegates_to_coordinates():
    loc = _loc("pear", 10.5, 20.25)
    assert loc.latitude == 10.5
    assert loc.longitude == 20.25
    assert loc.geo_code() == loc.coordinates.geo_code()
    assert loc.geo_grid_center() == loc.coordinates.geo_grid_center()
    assert loc.latitude_as_redis_command_arg() == "10.5"
    assert loc.longitude_as_redis_command_arg() == "20.25"
    other = _loc("plum", 11.0, 21.0)
    assert loc.distance_from(other) == loc.coordinates.distance_from(other.coordinates)


def test_location_set_names_and_copy():
    ls = LocationSet()
    ls.add_location(_loc("a", 1.0, 1.0)).add_location(_loc("b", 2.0, 2.0))
    assert len(ls) == 2
    assert ls.location_names() == ["a", "b"]
    copy = ls.locations()
    copy.clear()
    assert len(ls) == 2


def test_center_coordinates_is_mean():
    ls = LocationSet([_loc("a", 10.0, 20.0), _loc("b", 30.0, 40.0)])
    center = ls.center_coordinates()
    assert center.latitude == pytest.approx(20.0)
    assert center.longitude == pytest.approx(30.0)


def test_empty_set_raises():
    ls = LocationSet()
    with pytest.raises(ValueError):
        ls.closest_to(Coordinates(0.0, 0.0))
    with pytest.raises(ValueError):
        ls.farthest_from(Coordinates(0.0, 0.0))
    with pytest.raises(ValueError):
        ls.center_coordinates()


def test_closest_and_farthest():
    ls = LocationSet([_loc("near", 0.1, 0.1), _loc("mid", 5.0, 5.0), _loc("far", 40.0, 40.0)])
    ref = Coordinates(0.0, 0.0)
    assert ls.closest_to(ref).name == "near"
    assert ls.farthest_from(ref).name == "far"


def test_ties_keep_first():
    ls = LocationSet([_loc("first", 1.0, 1.0), _loc("second", 1.0, 1.0)])
    ref = Coordinates(0.0, 0.0)
    assert ls.closest_to(ref).name == "first"
    assert ls.farthest_from(ref).name == "first"


def test_within_radius():
    ls = LocationSet([_loc("near", 0.1, 0.1), _loc("far", 40.0, 40.0)])
    ref = Coordinates(0.0, 0.0)
    result = ls.within_radius(ref, 100_000)
    assert result.location_names() == ["near"]
    assert len(ls) == 2
    everything = ls.within_radius(ref, 1e8)
    assert everything.location_names() == ["near", "far"]


@pytest.mark.parametrize("count", [1, 3, 10])
def test_generate_random_location_set(count):
    ls = generate_random_location_set(count)
    assert len(ls) == count
    names = ls.location_names()
    assert len(set(names)) == count
    for loc in ls.locations():
        assert LATITUDE_MIN <= loc.latitude <= LATITUDE_MAX
        assert LONGITUDE_MIN <= loc.longitude <= LONGITUDE_MAX


def test_generate_many_locations_has_unique_names():
    ls = generate_random_location_set(50)
    assert len(set(ls.location_names())) == 50