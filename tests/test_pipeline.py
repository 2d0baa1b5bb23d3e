import json
import os
from unittest.mock import Mock, patch

import pytest

from datasource.rest_client import DaySnapshot, RestClient, ServiceError
from orders.matching import RestaurantNotFound
from orders.models import CreditCardInformation, Order, OrderStatus, OrderValidationCode, Pizza, Restaurant
from pipeline import cli
from pipeline.config import Settings
from pipeline.runner import run_day
from pipeline.writers import artifact_paths, format_geojson, write_day_artifacts
from routing.models import HOVER_ANGLE, DroneMove, LngLat, NamedRegion

DAY = "2025-01-27"
BASE_URL = "https://ilp-rest.example.net"

MARGHERITA = Pizza("R1: Margarita", 1000)
CALZONE = Pizza("R1: Calzone", 1400)
CIVERINOS = LngLat(-3.1912869215011597, 55.945535152517735)


class MockClient:
    """
    Stands in for RestClient; counts calls so tests can check call order.
    """

    def __init__(self, snapshot, alive=True):
        self.snapshot = snapshot
        self.alive = alive
        self.calls = []

    def is_alive(self):
        self.calls.append("is_alive")
        return self.alive

    def fetch_snapshot(self, date):
        self.calls.append(("fetch_snapshot", date))
        return self.snapshot


class StraightLinePlanner:
    def find_total_path(self, start, restaurant, order_no):
        return [
            DroneMove(order_no, start, 0.0, restaurant, 0),
            DroneMove(order_no, restaurant, HOVER_ANGLE, restaurant, 1),
            DroneMove(order_no, restaurant, 180.0, start, 2),
            DroneMove(order_no, start, HOVER_ANGLE, start, 3),
        ]


def make_order(order_no, *pizzas, total=None):
    pizzas = list(pizzas) or [MARGHERITA]
    return Order(
        order_no=order_no,
        pizzas=pizzas,
        price_total_in_pence=total if total is not None else sum(p.price_in_pence for p in pizzas) + 100,
        credit_card=CreditCardInformation("4485959141852684", "10/30", "816"),
    )


@pytest.fixture
def snapshot():
    return DaySnapshot(
        restaurants=[Restaurant("Civerinos Slice", CIVERINOS, (MARGHERITA, CALZONE))],
        orders=[
            make_order("AAAA0001", MARGHERITA),
            make_order("AAAA0002", CALZONE, total=1),
            make_order("AAAA0003", MARGHERITA, CALZONE),
        ],
        central_area=NamedRegion("central", (
            LngLat(-3.192473, 55.946233), LngLat(-3.192473, 55.942617),
            LngLat(-3.184319, 55.942617), LngLat(-3.184319, 55.946233),
        )),
        no_fly_zones=[],
    )


@pytest.fixture
def settings(tmp_path):
    return Settings(output_dir=tmp_path / "resultfiles")


def read_json(path):
    with open(path) as file:
        return json.load(file)


def test_run_day_writes_three_artifacts(snapshot, settings):
    client = MockClient(snapshot)

    result = run_day(DAY, client, settings, planner=StraightLinePlanner())

    # 1. Liveness first, one snapshot fetch
    assert client.calls == ["is_alive", ("fetch_snapshot", DAY)]

    # 2. Deliveries cover every fetched order
    deliveries = read_json(result.artifacts.deliveries)
    assert [d["orderNo"] for d in deliveries] == ["AAAA0001", "AAAA0002", "AAAA0003"]
    assert [d["orderStatus"] for d in deliveries] == ["DELIVERED", "INVALID", "DELIVERED"]
    assert deliveries[1]["orderValidationCode"] == "TOTAL_INCORRECT"
    assert deliveries[2]["costInPence"] == 2500

    # 3. Flight path: valid orders only, input order
    flightpath = read_json(result.artifacts.flightpath)
    assert [m["orderNo"] for m in flightpath] == ["AAAA0001"] * 4 + ["AAAA0003"] * 4
    assert set(flightpath[0]) == {"orderNo", "fromLongitude", "fromLatitude", "angle", "toLongitude", "toLatitude"}

    # 4. GeoJSON: one LineString, first origin + every target
    geojson = read_json(result.artifacts.geojson)
    line = geojson["features"][0]["geometry"]
    assert geojson["type"] == "FeatureCollection"
    assert line["type"] == "LineString"
    assert len(line["coordinates"]) == len(flightpath) + 1
    assert line["coordinates"][0] == [-3.186874, 55.944494]


def test_run_day_updates_snapshot_orders_in_place(snapshot, settings):
    result = run_day(DAY, MockClient(snapshot), settings, planner=StraightLinePlanner())
    assert [o.order_no for o in result.valid_orders] == ["AAAA0001", "AAAA0003"]
    assert snapshot.orders[0].status == OrderStatus.DELIVERED
    assert snapshot.orders[1].status == OrderStatus.INVALID


def test_run_day_with_default_planner(snapshot, settings):
    result = run_day(DAY, MockClient(snapshot), settings)

    hovers = [move for move in result.moves if move.is_hover]
    assert len(hovers) == 4
    assert result.moves[0].from_position == LngLat(-3.186874, 55.944494)


def test_dead_service_stops_before_fetch(snapshot, settings):
    client = MockClient(snapshot, alive=False)

    with pytest.raises(ServiceError):
        run_day(DAY, client, settings, planner=StraightLinePlanner())

    assert client.calls == ["is_alive"]
    assert not settings.output_dir.exists()


class AlwaysValid:
    """Lets every order through, so an unmatched one reaches the core."""

    def validate(self, order, restaurants):
        order.status = OrderStatus.VALID
        order.validation_code = OrderValidationCode.NO_ERROR
        return order


def test_core_failure_writes_nothing(snapshot, settings):
    snapshot.orders.append(make_order("AAAA0004", Pizza("Unknown", 5)))

    with pytest.raises(RestaurantNotFound):
        run_day(DAY, MockClient(snapshot), settings, planner=StraightLinePlanner(), validator=AlwaysValid())

    assert not settings.output_dir.exists()
    assert snapshot.orders[0].status == OrderStatus.VALID


def test_geojson_of_empty_day_is_an_empty_line():
    assert format_geojson([])["features"][0]["geometry"]["coordinates"] == []


def test_failed_write_leaves_no_partial_files(tmp_path, monkeypatch):
    real_dump = json.dump
    written = []

    def flaky_dump(document, file, **kwargs):
        if written:
            raise OSError("disk full")
        written.append(document)
        real_dump(document, file, **kwargs)

    monkeypatch.setattr("pipeline.writers.json.dump", flaky_dump)

    with pytest.raises(OSError):
        write_day_artifacts(tmp_path, DAY, [make_order("AAAA0001")], [])

    assert list(tmp_path.iterdir()) == []


def test_artifact_names_follow_the_date(tmp_path):
    paths = artifact_paths(tmp_path, DAY)
    assert paths.deliveries.name == "deliveries-2025-01-27.json"
    assert paths.flightpath.name == "flightpath-2025-01-27.json"
    assert paths.geojson.name == "drone-2025-01-27.geojson"


@pytest.mark.parametrize(
    "argv",
    [
        ["2025-1-27", BASE_URL],
        ["27-01-2025", BASE_URL],
        ["2025-02-30", BASE_URL],
        [DAY, "http://ilp-rest.example.net"],
        [DAY, "ilp-rest.example.net"],
    ],
)
def test_cli_rejects_bad_arguments_before_network(argv):
    with patch("pipeline.cli.RestClient") as rest_client:
        assert cli.main(argv) == 2
    rest_client.assert_not_called()


def test_cli_requires_two_arguments():
    with pytest.raises(SystemExit) as excinfo:
        cli.main([DAY])
    assert excinfo.value.code == 2


def test_cli_success(snapshot, tmp_path, monkeypatch):
    monkeypatch.setenv("DRONE_OUTPUT_DIR", str(tmp_path))
    monkeypatch.delenv("DRONE_HTTP_TIMEOUT", raising=False)

    with patch("pipeline.cli.RestClient", return_value=MockClient(snapshot)) as rest_client:
        assert cli.main([DAY, BASE_URL]) == 0

    rest_client.assert_called_once_with(BASE_URL, timeout=10.0)
    assert (tmp_path / "deliveries-2025-01-27.json").exists()
    assert (tmp_path / "flightpath-2025-01-27.json").exists()
    assert (tmp_path / "drone-2025-01-27.geojson").exists()


def test_cli_service_down_exits_with_failure(snapshot, tmp_path, monkeypatch):
    monkeypatch.setenv("DRONE_OUTPUT_DIR", str(tmp_path))

    with patch("pipeline.cli.RestClient", return_value=MockClient(snapshot, alive=False)):
        assert cli.main([DAY, BASE_URL]) == 1

    assert list(tmp_path.iterdir()) == []


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DRONE_OUTPUT_DIR", str(tmp_path))
    monkeypatch.setenv("DRONE_HTTP_TIMEOUT", "2.5")
    monkeypatch.setenv("DRONE_PLANNER_MAX_EXPANSIONS", "1000")
    monkeypatch.setenv("DRONE_LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.output_dir == tmp_path
    assert settings.http_timeout_seconds == 2.5
    assert settings.planner_max_expansions == 1000


def test_settings_validation():
    with pytest.raises(ValueError):
        Settings(http_timeout_seconds=0).validate()
    with pytest.raises(ValueError):
        Settings(log_level="LOUD").validate()


def test_cli_malformed_service_payload_exits_with_failure(tmp_path, monkeypatch):
    monkeypatch.setenv("DRONE_OUTPUT_DIR", str(tmp_path))
    session = Mock()
    session.get.side_effect = lambda url, timeout: Mock(
        status_code=200, text="true", url=url, **{"json.return_value": [{"pizzasInOrder": []}]}
    )

    with patch("pipeline.cli.RestClient", return_value=RestClient(BASE_URL, session=session)):
        assert cli.main([DAY, BASE_URL]) == 1

    assert list(tmp_path.iterdir()) == []


def test_service_down_is_logged_once(snapshot, tmp_path, monkeypatch, caplog):
    monkeypatch.setenv("DRONE_OUTPUT_DIR", str(tmp_path))

    with patch("pipeline.cli.RestClient", return_value=MockClient(snapshot, alive=False)):
        cli.main([DAY, BASE_URL])

    assert "Service error: Service is not responding" in caplog.text
    assert "Service error: Service error" not in caplog.text


def test_failed_rename_leaves_no_partial_files(tmp_path, monkeypatch):
    real_replace = os.replace
    renamed = []

    def flaky_replace(source, target):
        if renamed:
            raise OSError("rename failed")
        real_replace(source, target)
        renamed.append(target)

    monkeypatch.setattr("pipeline.writers.os.replace", flaky_replace)

    with pytest.raises(OSError):
        write_day_artifacts(tmp_path, DAY, [make_order("AAAA0001")], [])

    assert len(renamed) == 1
    assert list(tmp_path.iterdir()) == []
