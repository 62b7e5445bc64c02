from __future__ import annotations

import copy
import json

import pytest

from wasteland.data.repositories import CitiesRepository
from wasteland.domain.state import PendingTravel
from wasteland.services.errors import SaveLoadError, TravelStateError
from wasteland.services.game_service import GameService
from wasteland.services.save_service import SaveService


def _played_game(seed: int = 8):
    engine = GameService()
    state = engine.initialize_game(seed)
    engine.do_tick(state)
    return engine, state


def test_save_round_trip_restores_world_and_player() -> None:
    engine, state = _played_game()

    payload = json.loads(json.dumps(engine.save(state)))
    loaded = engine.load(payload)

    assert loaded == state
    assert loaded.seed == state.seed
    assert loaded.tick == state.tick


def test_metadata_describes_the_save() -> None:
    engine, state = _played_game()

    metadata = engine.save(state)["metadata"]

    assert metadata["city_id"] == "rust_town"
    assert metadata["city_name"] == "Rust Town"
    assert metadata["tick"] == 1
    assert metadata["seed"] == 8
    assert "saved_at" in metadata


def test_reloaded_game_continues_identically() -> None:
    engine, state = _played_game(seed=77)
    loaded = engine.load(json.loads(json.dumps(engine.save(state))))

    for current in (state, loaded):
        engine.do_tick(current)
        engine.travel(current, "metal_hill")

    assert loaded == state


def test_cannot_save_during_ambush() -> None:
    engine, state = _played_game()
    state.pending_travel = PendingTravel(destination_id="metal_hill", stolen={}, upkeep_good="water")

    with pytest.raises(TravelStateError):
        engine.save(state)


def test_zero_count_entries_are_dropped_on_load() -> None:
    engine, state = _played_game()
    payload = engine.save(state)
    payload["state"]["player"]["inventory"]["medicine"] = 0

    loaded = engine.load(payload)

    assert "medicine" not in loaded.player.inventory.counts


def _mutations():
    def wrong_version(payload):
        payload["save_version"] = 99

    def unknown_good(payload):
        payload["state"]["player"]["inventory"]["gold"] = 1

    def negative_count(payload):
        payload["state"]["player"]["inventory"]["water"] = -2

    def string_tick(payload):
        payload["state"]["world"]["tick"] = "1"

    def unknown_player_city(payload):
        payload["state"]["player"]["city_id"] = "atlantis"

    def contradictory_market(payload):
        payload["state"]["world"]["markets"]["rust_town"]["mode"] = {
            "kind": "CHEAP_AND_EXPENSIVE",
            "cheap": ["water"],
            "expensive": ["water"],
        }

    def missing_market(payload):
        del payload["state"]["world"]["markets"]["metal_hill"]

    def market_from_future(payload):
        payload["state"]["world"]["markets"]["rust_town"]["updated_at_tick"] = 50

    def missing_state(payload):
        del payload["state"]

    return [
        wrong_version,
        unknown_good,
        negative_count,
        string_tick,
        unknown_player_city,
        contradictory_market,
        missing_market,
        market_from_future,
        missing_state,
    ]


@pytest.mark.parametrize("mutate", _mutations(), ids=lambda fn: fn.__name__)
def test_invalid_payloads_are_rejected(mutate) -> None:
    engine, state = _played_game()
    payload = copy.deepcopy(engine.save(state))
    mutate(payload)

    with pytest.raises(SaveLoadError):
        engine.load(payload)


def test_cities_missing_from_definitions_are_rejected() -> None:
    engine, state = _played_game()
    payload = engine.save(state)
    payload["state"]["world"]["cities"].append(
        {"id": "atlantis", "name": "Atlantis", "neighbors": [], "x": 5, "y": 5}
    )
    payload["state"]["world"]["markets"]["atlantis"] = {
        "mode": {"kind": "ALL_NEUTRAL", "cheap": [], "expensive": []},
        "updated_at_tick": 0,
    }

    assert SaveService().deserialize(payload).world.get_city("atlantis") is not None
    with pytest.raises(SaveLoadError):
        SaveService(cities_repo=CitiesRepository()).deserialize(payload)
