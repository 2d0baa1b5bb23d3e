import json

import pytest

from orders.models import Order, Restaurant
from orders.validation import validate_orders
from scripts.generate_mock_data import generate_mock_day
from scripts.summarize_flightpath import load_flightpath, main, summarize


def test_mock_day_parses_into_models(tmp_path):
    output_file = tmp_path / "mock_day.json"

    day = generate_mock_day(num_orders=20, num_restaurants=3, invalid_share=0.0, seed=7, output_file=output_file)

    with open(output_file) as file:
        assert json.load(file) == day

    restaurants = [Restaurant.from_dict(item) for item in day["restaurants"]]
    orders = [Order.from_dict(item) for item in day["orders"]]

    # 1. Unique order numbers
    assert len({order.order_no for order in orders}) == 20

    # 2. Without deliberately broken totals every order validates
    assert len(validate_orders(orders, restaurants)) == 20


def test_mock_day_is_reproducible_with_a_seed():
    assert generate_mock_day(num_orders=5, seed=1) == generate_mock_day(num_orders=5, seed=1)


def test_invalid_share_breaks_totals():
    day = generate_mock_day(num_orders=10, num_restaurants=2, invalid_share=1.0, seed=3)
    restaurants = [Restaurant.from_dict(item) for item in day["restaurants"]]
    orders = [Order.from_dict(item) for item in day["orders"]]
    assert validate_orders(orders, restaurants) == []


def write_flightpath(path):
    records = [
        {"orderNo": "B", "fromLongitude": 0.0, "fromLatitude": 0.0, "angle": 0.0, "toLongitude": 0.00015, "toLatitude": 0.0},
        {"orderNo": "B", "fromLongitude": 0.00015, "fromLatitude": 0.0, "angle": 999.0, "toLongitude": 0.00015, "toLatitude": 0.0},
        {"orderNo": "A", "fromLongitude": 0.0, "fromLatitude": 0.0, "angle": 90.0, "toLongitude": 0.0, "toLatitude": 0.00015},
    ]
    with open(path, "w") as file:
        json.dump(records, file)


def test_summarize_counts_moves_and_hovers_per_order(tmp_path):
    path = tmp_path / "flightpath-2025-01-27.json"
    write_flightpath(path)

    summary = summarize(load_flightpath(path))

    # flight order, not alphabetical
    assert list(summary["orderNo"]) == ["B", "A"]
    assert list(summary["moves"]) == [2, 1]
    assert list(summary["hovers"]) == [1, 0]
    assert summary["distance"].iloc[0] == pytest.approx(0.00015)


def test_summarize_main(tmp_path, capsys):
    path = tmp_path / "flightpath-2025-01-27.json"
    write_flightpath(path)

    assert main([str(path)]) == 0
    assert "Orders flown: 2" in capsys.readouterr().out
    assert main([]) == 2
