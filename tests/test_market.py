import pytest

from wasteland.core.rng import RNG
from wasteland.domain.defs import BalanceDef
from wasteland.domain.goods import GOODS
from wasteland.domain.inventory import Inventory
from wasteland.domain.market import (
    CHEAP_PRICE,
    MarketMode,
    NEUTRAL_PRICE,
    all_prices,
    bundle_value,
    inventory_value,
    price_of,
)
from wasteland.services.market_service import MarketService


def test_price_tiers() -> None:
    mode = MarketMode(kind="CHEAP_AND_EXPENSIVE", cheap=("water",), expensive=("ammo",))

    assert price_of("water", mode) == CHEAP_PRICE
    assert price_of("ammo", mode) == 3
    assert price_of("ammo", mode, expensive_price=4) == 4
    assert price_of("scrap", mode) == NEUTRAL_PRICE


def test_all_prices_covers_every_good() -> None:
    prices = all_prices(MarketMode(kind="TWO_CHEAP", cheap=("food", "fuel")))

    assert set(prices) == set(GOODS)
    assert prices["food"] == prices["fuel"] == CHEAP_PRICE
    assert all(prices[good_id] == NEUTRAL_PRICE for good_id in GOODS if good_id not in ("food", "fuel"))


def test_good_cannot_be_cheap_and_expensive() -> None:
    with pytest.raises(ValueError):
        MarketMode(kind="CHEAP_AND_EXPENSIVE", cheap=("water",), expensive=("water",))


@pytest.mark.parametrize(
    "kind, cheap, expensive",
    [
        ("ALL_NEUTRAL", ("water",), ()),
        ("ONE_CHEAP", (), ()),
        ("TWO_CHEAP", ("water", "water"), ()),
        ("ONE_EXPENSIVE", (), ("gold",)),
        ("BOOM", (), ()),
    ],
)
def test_malformed_modes_are_rejected(kind, cheap, expensive) -> None:
    with pytest.raises(ValueError):
        MarketMode(kind=kind, cheap=cheap, expensive=expensive)


def test_bundle_and_inventory_value() -> None:
    prices = all_prices(MarketMode(kind="ONE_EXPENSIVE", expensive=("medicine",)))

    assert bundle_value({"medicine": 2, "water": 1}, prices) == 8
    assert inventory_value(Inventory.from_mapping({"medicine": 1, "scrap": 3}), prices) == 9
    assert bundle_value({}, prices) == 0


def test_drawn_modes_are_always_valid() -> None:
    service = MarketService(BalanceDef())
    rng = RNG(2024)
    for _ in range(300):
        mode = service.draw_market_mode(rng)
        prices = all_prices(mode)
        assert set(prices) == set(GOODS)
        assert not set(mode.cheap) & set(mode.expensive)


def test_zero_weight_mode_is_never_drawn() -> None:
    service = MarketService(BalanceDef(market_weights={"ALL_NEUTRAL": 0, "ONE_CHEAP": 1}))
    rng = RNG(3)
    kinds = {service.draw_market_mode(rng).kind for _ in range(100)}

    assert kinds == {"ONE_CHEAP"}
