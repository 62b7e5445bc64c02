from wasteland.services.game_service import GameService
from wasteland.services.upkeep_service import UpkeepService

from tests.helpers.state_builders import make_market_service, make_state


def _service() -> UpkeepService:
    return UpkeepService(make_market_service())


def test_first_tick_of_seed_42() -> None:
    engine = GameService()
    state = engine.initialize_game(42)
    inventory = state.player.inventory
    assert inventory.get("water") >= 1 and inventory.get("food") >= 1
    supplies_before = inventory.get("water") + inventory.get("food")

    result = engine.do_tick(state)

    assert result.success
    assert state.world.tick == 1
    assert sum(1 for market in state.world.markets.values() if market.updated_at_tick == 1) == 2
    after = state.player.inventory
    assert after.get("water") + after.get("food") == supplies_before - 1


def test_spend_uses_the_only_supply_and_drops_empty_key() -> None:
    state = make_state({"food": 1, "scrap": 2})

    result = _service().spend_resource(state)

    assert result.success
    assert state.player.inventory.as_dict() == {"scrap": 2}


def test_spend_with_both_supplies_is_repeatable() -> None:
    first = make_state({"water": 2, "food": 2}, seed=5, tick=3)
    second = make_state({"water": 2, "food": 2}, seed=5, tick=3)

    _service().spend_resource(first)
    _service().spend_resource(second)

    assert first.player.inventory == second.player.inventory
    assert first.player.inventory.total_units() == 3


def test_tick_without_supplies_changes_nothing() -> None:
    state = make_state({"scrap": 3})
    markets_before = dict(state.world.markets)

    result = _service().do_tick(state)

    assert not result.success
    assert result.failure.reason == "no_supplies"
    assert state.world.tick == 0
    assert state.world.markets == markets_before
    assert state.player.inventory.as_dict() == {"scrap": 3}


def test_tick_opens_a_new_trading_window() -> None:
    state = make_state({"water": 2})
    state.player.trade_limits.bought = {"ammo": 3}
    state.player.trade_limits.sold = {"scrap": 1}

    _service().do_tick(state)

    limits = state.player.trade_limits
    assert limits.bought == {} and limits.sold == {}
    assert limits.last_city_id == "rust_town"


def test_can_spend() -> None:
    assert UpkeepService.can_spend(make_state({"water": 1}).player.inventory)
    assert not UpkeepService.can_spend(make_state({"fuel": 4}).player.inventory)
