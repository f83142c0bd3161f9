from urllib.parse import unquote

import polyline
import pytest

from osrmtable.config import ServerConfig
from osrmtable.errors import InputError
from osrmtable.points import to_point_table
from osrmtable.request_builder import (
    build_table_query,
    format_coordinates,
    normalize_measures,
)


@pytest.fixture
def three_points():
    return to_point_table([
        ("a", 13.40, 52.50),
        ("b", 13.41, 52.51),
        ("c", 13.42, 52.52),
    ])


@pytest.fixture
def two_points():
    return to_point_table([
        ("x", 2.35, 48.85),
        ("y", 2.36, 48.86),
    ])


def test_coordinates_are_lon_lat_with_five_decimals():
    points = to_point_table([("a", 13.388860, 52.517037), ("b", 0.1, -3)])

    assert format_coordinates(points) == "13.38886,52.51704;0.10000,-3.00000"


def test_all_pairs_request(three_points, local_server):
    query = build_table_query(three_points, three_points, bipartite=False, server=local_server)

    assert query.url == (
        "http://localhost:5000/table/v1/driving/"
        "13.40000,52.50000;13.41000,52.51000;13.42000,52.52000"
        "?annotations=duration"
    )
    assert "sources=" not in query.url
    assert "destinations=" not in query.url
    assert (query.n_sources, query.n_destinations, query.n_cells) == (3, 3, 9)


def test_bipartite_request_indexes_into_concatenated_list(two_points, three_points, local_server):
    query = build_table_query(
        two_points,
        three_points,
        bipartite=True,
        server=local_server,
        measures=("duration", "distance"),
    )

    assert query.url == (
        "http://localhost:5000/table/v1/driving/"
        "2.35000,48.85000;2.36000,48.86000;"
        "13.40000,52.50000;13.41000,52.51000;13.42000,52.52000"
        "?sources=0;1&destinations=2;3;4&annotations=duration,distance"
    )
    assert query.params[0] == ("sources", "0;1")
    assert query.params[1] == ("destinations", "2;3;4")
    assert query.n_cells == 6


def test_exclude_comes_before_annotations(three_points, local_server):
    query = build_table_query(three_points, three_points, bipartite=False, server=local_server, exclude="toll")

    assert query.url.endswith("?exclude=toll&annotations=duration")


def test_exclude_in_bipartite_mode(two_points, local_server):
    query = build_table_query(two_points, two_points, bipartite=True, server=local_server, exclude="motorway,ferry")

    assert query.url.endswith("?sources=0;1&destinations=2;3&exclude=motorway,ferry&annotations=duration")


def test_values_are_percent_encoded(three_points, local_server):
    query = build_table_query(three_points, three_points, bipartite=False, server=local_server, exclude="toll road")

    assert "exclude=toll%20road" in query.url
    assert " " not in query.url


def test_profile_comes_from_server_config(three_points):
    server = ServerConfig(base_url="http://localhost:5000", profile="foot")

    query = build_table_query(three_points, three_points, bipartite=False, server=server)

    assert query.url.startswith("http://localhost:5000/table/v1/foot/")


def test_polyline_coordinates(three_points, local_server):
    query = build_table_query(three_points, three_points, bipartite=False, server=local_server, use_polyline=True)

    path = query.url.split("/table/v1/driving/")[1].split("?")[0]
    assert path.startswith("polyline(") and path.endswith(")")
    decoded = polyline.decode(unquote(path[len("polyline("):-1]), 5)
    assert decoded == [(52.5, 13.4), (52.51, 13.41), (52.52, 13.42)]
    assert query.uses_polyline is True


def test_demo_server_gets_no_annotations(three_points, demo_server):
    query = build_table_query(
        three_points,
        three_points,
        bipartite=False,
        server=demo_server,
        measures=("duration", "distance"),
    )

    assert "annotations=" not in query.url
    assert "?" not in query.url


def test_demo_server_keeps_other_parameters(two_points, demo_server):
    query = build_table_query(two_points, two_points, bipartite=True, server=demo_server, exclude="toll")

    assert query.url.endswith("?sources=0;1&destinations=2;3&exclude=toll")


def test_demo_server_never_gets_polyline(three_points, demo_server):
    query = build_table_query(three_points, three_points, bipartite=False, server=demo_server, use_polyline=True)

    assert "polyline(" not in query.url
    assert query.uses_polyline is False
    assert "13.40000,52.50000;" in query.url


@pytest.mark.parametrize("base_url", [
    "https://router.project-osrm.org",
    "http://router.project-osrm.org/",
    "HTTP://ROUTER.PROJECT-OSRM.ORG",
])
def test_demo_detection_ignores_scheme_and_slash(base_url):
    assert ServerConfig(base_url=base_url).is_demo


def test_measures_are_validated():
    assert normalize_measures("distance") == ("distance",)
    assert normalize_measures(["duration", "distance", "duration"]) == ("duration", "distance")
    with pytest.raises(InputError):
        normalize_measures(["speed"])
    with pytest.raises(InputError):
        normalize_measures([])
