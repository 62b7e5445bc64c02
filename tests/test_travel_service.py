import pytest

from wasteland.core.rng import RNG, SCOPE_ROBBERY_ROLL
from wasteland.domain.market import MarketMode, all_prices, bundle_value
from wasteland.services.errors import TravelStateError
from wasteland.services.events import AmbushEvent, GuardsPaidEvent, TravelPerformedEvent
from wasteland.services.travel_service import TravelService
from wasteland.services.upkeep_service import UpkeepService

from tests.helpers.state_builders import make_market_service, make_state

DEAR_AMMO = {"rust_town": MarketMode(kind="ONE_EXPENSIVE", expensive=("ammo",))}


def _service(**overrides) -> TravelService:
    market_service = make_market_service(**overrides)
    return TravelService(market_service, UpkeepService(market_service))


def test_plain_travel_moves_and_costs_a_day() -> None:
    state = make_state({"water": 2, "scrap": 1})
    state.player.trade_limits.bought = {"water": 2}

    result = _service().travel(state, "metal_hill")

    assert result.success
    assert state.player.city_id == "metal_hill"
    assert state.world.tick == 1
    assert state.player.inventory.as_dict() == {"water": 1, "scrap": 1}
    assert state.player.trade_limits.bought == {}
    assert state.player.trade_limits.last_city_id == "metal_hill"
    assert any(isinstance(event, TravelPerformedEvent) for event in result.events)


def test_travel_refreshes_markets_for_new_tick() -> None:
    state = make_state({"food": 1})

    _service().travel(state, "dusty_oasis")

    assert sum(1 for market in state.world.markets.values() if market.updated_at_tick == 1) == 2


def test_travel_needs_a_direct_road() -> None:
    state = make_state({"water": 2})

    result = _service().travel(state, "bottle_cap_canyon")

    assert result.failure.reason == "no_road"
    assert state.player.city_id == "rust_town"
    assert state.world.tick == 0
    assert state.player.inventory.as_dict() == {"water": 2}


def test_travel_to_unknown_city_fails() -> None:
    state = make_state({"water": 2})

    assert _service().travel(state, "atlantis").failure.reason == "unknown_city"


def test_travel_without_supplies_changes_nothing() -> None:
    state = make_state({"scrap": 4})

    result = _service().travel(state, "metal_hill")

    assert result.failure.reason == "no_supplies"
    assert state.player.city_id == "rust_town"
    assert state.world.tick == 0


def test_guarded_travel_pays_then_arrives_safely() -> None:
    state = make_state({"water": 2, "ammo": 3})

    result = _service(robbery_chance=1.0).travel_with_guards(state, "metal_hill", {"ammo": 2})

    assert result.success
    assert isinstance(result.events[0], GuardsPaidEvent)
    assert state.player.city_id == "metal_hill"
    assert state.player.inventory.as_dict() == {"water": 1, "ammo": 1}
    assert state.pending_travel is None
    assert result.stolen == {}


def test_guard_payment_beyond_holdings_is_rejected() -> None:
    state = make_state({"water": 2, "ammo": 1})

    result = _service().travel_with_guards(state, "metal_hill", {"ammo": 2})

    assert result.failure.reason == "invalid_payment"
    assert state.player.inventory.as_dict() == {"water": 2, "ammo": 1}
    assert state.world.tick == 0


def test_guard_payment_cannot_eat_the_days_upkeep() -> None:
    state = make_state({"water": 1, "ammo": 1})

    result = _service().travel_with_guards(state, "metal_hill", {"water": 1})

    assert result.failure.reason == "no_supplies"
    assert state.player.inventory.as_dict() == {"water": 1, "ammo": 1}


def test_safe_road_completes_immediately() -> None:
    state = make_state({"water": 2, "scrap": 3})

    result = _service(robbery_chance=0.0).begin_travel(state, "metal_hill")

    assert result.success
    assert state.pending_travel is None
    assert state.player.city_id == "metal_hill"


def test_robbery_takes_two_thirds_of_remaining_value() -> None:
    state = make_state({"water": 1, "ammo": 4, "scrap": 9}, modes=DEAR_AMMO)
    prices = all_prices(DEAR_AMMO["rust_town"])
    service = _service(robbery_chance=1.0)

    begin = service.begin_travel(state, "metal_hill")

    assert isinstance(begin.events[0], AmbushEvent)
    assert state.pending_travel is not None
    assert state.player.city_id == "rust_town"
    assert state.world.tick == 0
    stolen = state.pending_travel.stolen
    assert stolen == {"ammo": 4, "scrap": 4}
    assert bundle_value(stolen, prices) == 20

    result = service.complete_travel(state)

    assert result.stolen == {"ammo": 4, "scrap": 4}
    assert state.pending_travel is None
    assert state.player.city_id == "metal_hill"
    assert state.world.tick == 1
    assert state.player.inventory.as_dict() == {"scrap": 5}


def test_robbery_leaving_nothing_is_bankruptcy() -> None:
    cheap_scrap = {"rust_town": MarketMode(kind="ONE_CHEAP", cheap=("scrap",))}
    state = make_state({"water": 1, "scrap": 1}, modes=cheap_scrap)
    service = _service(robbery_chance=1.0)

    service.begin_travel(state, "dusty_oasis")
    result = service.complete_travel(state)

    assert result.stolen == {"scrap": 1}
    assert state.player.inventory.is_empty()
    assert result.bankrupt


def test_complete_without_pending_raises() -> None:
    with pytest.raises(TravelStateError):
        _service().complete_travel(make_state({"water": 1}))


def test_no_new_trip_while_ambush_pending() -> None:
    state = make_state({"water": 2, "scrap": 3})
    service = _service(robbery_chance=1.0)
    service.begin_travel(state, "metal_hill")

    with pytest.raises(TravelStateError):
        service.begin_travel(state, "dusty_oasis")
    with pytest.raises(TravelStateError):
        service.travel(state, "dusty_oasis")


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5, 6, 7, 8])
def test_ambush_roll_is_keyed_to_departure_tick(seed: int) -> None:
    state = make_state({"water": 2, "scrap": 3}, seed=seed, tick=4)
    expected = RNG.scoped(seed, 4, SCOPE_ROBBERY_ROLL).chance(0.5)

    _service().begin_travel(state, "metal_hill")

    assert (state.pending_travel is not None) == expected


def test_same_seed_same_outcome() -> None:
    first = make_state({"water": 2, "food": 1, "scrap": 3}, seed=31, tick=2)
    second = make_state({"water": 2, "food": 1, "scrap": 3}, seed=31, tick=2)
    service = _service()

    for state in (first, second):
        service.begin_travel(state, "dusty_oasis")
        if state.pending_travel is not None:
            service.complete_travel(state)

    assert first == second


@pytest.mark.parametrize("quantity", [True, False])
def test_boolean_guard_payment_is_rejected(quantity: bool) -> None:
    state = make_state({"water": 2, "ammo": 1})

    result = _service().travel_with_guards(state, "metal_hill", {"ammo": quantity})

    assert result.failure.reason == "invalid_payment"
    assert state.player.inventory.as_dict() == {"water": 2, "ammo": 1}
    assert state.player.city_id == "rust_town"


def test_arrival_event_carries_city_name() -> None:
    state = make_state({"water": 2})

    result = _service().travel(state, "metal_hill")

    arrival = next(event for event in result.events if isinstance(event, TravelPerformedEvent))
    assert arrival.to_city_id == "metal_hill"
    assert arrival.to_city_name == "Metal Hill"
