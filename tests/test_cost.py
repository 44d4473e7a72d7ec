from __future__ import annotations

import pytest

from jobflow.core.contracts import ResourceRecord
from jobflow.core.cost import estimate_cost
from jobflow.core.selection import SelectionSet


@pytest.fixture
def catalog() -> list[ResourceRecord]:
    return [
        ResourceRecord(id="r1", name="GPU box", price_per_hour=2.5),
        ResourceRecord(id="r2", name="CPU box", price_per_hour=0.75),
        ResourceRecord(id="r3", name="No price"),
    ]


def test_single_resource_cost(catalog) -> None:
    cost = estimate_cost(catalog, SelectionSet.of(["r1"]), 4)

    assert cost == pytest.approx(10.00)


def test_costs_sum_across_selected_resources(catalog) -> None:
    cost = estimate_cost(catalog, SelectionSet.of(["r1", "r2"]), 2)

    assert cost == pytest.approx(6.5)


def test_missing_price_defaults_to_one(catalog) -> None:
    assert estimate_cost(catalog, SelectionSet.of(["r3"]), 3) == pytest.approx(3.0)


def test_zero_price_is_treated_as_missing() -> None:
    catalog = [ResourceRecord(id="free", price_per_hour=0.0)]

    assert estimate_cost(catalog, SelectionSet.of(["free"]), 2) == pytest.approx(2.0)


def test_unknown_ids_contribute_nothing(catalog) -> None:
    assert estimate_cost(catalog, SelectionSet.of(["r1", "ghost"]), 1) == pytest.approx(2.5)


@pytest.mark.parametrize("runtime", [0, -1, None, float("nan"), "3"])
def test_non_positive_or_non_numeric_runtime_costs_nothing(catalog, runtime) -> None:
    assert estimate_cost(catalog, SelectionSet.of(["r1"]), runtime) == 0.0


def test_empty_selection_costs_nothing(catalog) -> None:
    assert estimate_cost(catalog, SelectionSet(), 10) == 0.0


def test_cost_is_linear_in_runtime(catalog) -> None:
    selected = SelectionSet.of(["r1", "r2", "r3"])
    unit = estimate_cost(catalog, selected, 1)

    for hours in [2, 3, 7.5, 12]:
        assert estimate_cost(catalog, selected, hours) == pytest.approx(unit * hours, abs=0.01)


def test_result_is_rounded_to_cents() -> None:
    catalog = [ResourceRecord(id="r", price_per_hour=0.333)]

    assert estimate_cost(catalog, SelectionSet.of(["r"]), 1) == 0.33


@pytest.mark.parametrize("price, hours, expected", [(1.125, 1, 1.13), (2.675, 1, 2.68), (0.005, 1, 0.01)])
def test_cent_ties_round_up(price, hours, expected) -> None:
    catalog = [ResourceRecord(id="r", price_per_hour=price)]

    assert estimate_cost(catalog, SelectionSet.of(["r"]), hours) == expected
