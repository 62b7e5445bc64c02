from wasteland.domain.bankruptcy import is_bankrupt
from wasteland.domain.inventory import Inventory
from wasteland.domain.market import MarketMode, all_prices


def _prices(**mode_kwargs):
    return all_prices(MarketMode(**mode_kwargs))


def test_empty_inventory_is_bankrupt() -> None:
    assert is_bankrupt(Inventory(), _prices(kind="ALL_NEUTRAL"))


def test_single_cheap_unit_with_dear_supplies_is_bankrupt() -> None:
    prices = _prices(kind="ONE_CHEAP", cheap=("scrap",))

    assert prices["water"] >= 2 and prices["food"] >= 2
    assert is_bankrupt(Inventory.from_mapping({"scrap": 1}), prices)


def test_single_cheap_unit_is_fine_when_water_is_cheap_too() -> None:
    prices = _prices(kind="TWO_CHEAP", cheap=("scrap", "water"))

    assert not is_bankrupt(Inventory.from_mapping({"scrap": 1}), prices)


def test_single_neutral_unit_is_not_bankrupt() -> None:
    assert not is_bankrupt(Inventory.from_mapping({"scrap": 1}), _prices(kind="ALL_NEUTRAL"))


def test_two_cheap_units_are_not_bankrupt() -> None:
    prices = _prices(kind="ONE_CHEAP", cheap=("scrap",))

    assert not is_bankrupt(Inventory.from_mapping({"scrap": 2}), prices)
    assert not is_bankrupt(Inventory.from_mapping({"scrap": 1, "ammo": 1}), prices)
