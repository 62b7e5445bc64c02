from __future__ import annotations

from pathlib import Path
from typing import Iterator, List

import pytest

from wasteland.presentation.cli import app, render
from wasteland.presentation.cli.config import load_config, save_config
from wasteland.presentation.cli.save_slots import SaveSlotStore
from wasteland.services.events import TravelPerformedEvent


def _feed_inputs(monkeypatch: pytest.MonkeyPatch, answers: List[str]) -> None:
    iterator: Iterator[str] = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(iterator))


def test_parse_goods_mapping() -> None:
    assert app.parse_goods_mapping("scrap=3, Water=1") == {"scrap": 3, "water": 1}
    assert app.parse_goods_mapping("ammo=1 ammo=2") == {"ammo": 3}
    assert app.parse_goods_mapping("   ") == {}


@pytest.mark.parametrize("raw", ["gold=1", "water", "water=x", "food=-2"])
def test_parse_goods_mapping_rejects_bad_input(raw: str) -> None:
    with pytest.raises(ValueError):
        app.parse_goods_mapping(raw)


def test_save_slots_round_trip(tmp_path: Path) -> None:
    store = SaveSlotStore(base_dir=tmp_path)
    store.write_slot(2, {"metadata": {"city_name": "Metal Hill", "tick": 4}, "state": {}})

    slots = store.list_slots()

    assert [slot.exists for slot in slots] == [False, True, False]
    assert slots[1].describe() == "Slot 2: Metal Hill, day 4"
    assert store.read_slot(2)["metadata"]["tick"] == 4
    store.delete_slot(2)
    assert not store.slot_exists(2)


def test_corrupt_slot_is_flagged(tmp_path: Path) -> None:
    (tmp_path / "slot_1.json").write_text("{broken", encoding="utf-8")

    slot = SaveSlotStore(base_dir=tmp_path).list_slots()[0]

    assert slot.is_corrupt
    assert slot.describe() == "Slot 1: unreadable"


def test_slot_index_is_validated(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        SaveSlotStore(base_dir=tmp_path).read_slot(4)


def test_config_round_trip_and_fallback(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    assert load_config(path) == {"balance_profile": "standard"}

    save_config({"balance_profile": "scarce"}, path)
    assert load_config(path) == {"balance_profile": "scarce"}

    path.write_text("[]", encoding="utf-8")
    assert load_config(path) == {"balance_profile": "standard"}


def test_debug_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WASTELAND_DEBUG", raising=False)
    assert not render.debug_enabled()
    monkeypatch.setenv("WASTELAND_DEBUG", "1")
    assert render.debug_enabled()


def test_format_goods() -> None:
    assert render.format_goods({"scrap": 2, "water": 1}) == "Water x1, Scrap x2"
    assert render.format_goods({}) == "nothing"


def test_quit_from_main_menu(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    _feed_inputs(monkeypatch, ["3"])

    app.main(balance_id="standard", slot_store=SaveSlotStore(base_dir=tmp_path))

    assert "Goodbye!" in capsys.readouterr().out


def test_new_game_wait_save_and_load(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    store = SaveSlotStore(base_dir=tmp_path)
    _feed_inputs(
        monkeypatch,
        [
            "1", "42",  # new game
            "1",  # wait a day
            "5", "1",  # save to slot 1
            "6",  # back to main menu
            "2", "1",  # load slot 1
            "6",  # back to main menu
            "3",  # quit
        ],
    )

    app.main(balance_id="standard", slot_store=store)

    out = capsys.readouterr().out
    assert "Game started with seed: 42" in out
    assert "Day 1 dawns." in out
    assert "Saved to slot 1." in out
    assert "Loaded slot 1." in out
    assert store.read_slot(1)["metadata"]["tick"] == 1


def test_unknown_profile_falls_back(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    _feed_inputs(monkeypatch, ["3"])

    app.main(balance_id="nonexistent", slot_store=SaveSlotStore(base_dir=tmp_path))

    assert "using the standard rules" in capsys.readouterr().out


def test_arrival_is_rendered_with_city_name(capsys) -> None:
    event = TravelPerformedEvent(
        from_city_id="rust_town", to_city_id="metal_hill", to_city_name="Metal Hill", guarded=True
    )

    app._render_events([event])

    out = capsys.readouterr().out
    assert "You reach Metal Hill under guard." in out
    assert "metal_hill" not in out
