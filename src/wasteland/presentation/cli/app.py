"""Console-driven UI loops for Wasteland Traders."""
from __future__ import annotations

import json
import logging
from typing import Dict, List, Literal, Sequence

from wasteland.core.types import GoodId
from wasteland.domain.goods import GOOD_NAMES, is_good
from wasteland.domain.state import GameState
from wasteland.presentation.cli import render
from wasteland.presentation.cli.config import load_config
from wasteland.presentation.cli.save_slots import SaveSlotStore
from wasteland.services import ActionResult, CityView, GameService, SaveLoadError
from wasteland.services.events import (
    ActionFailedEvent,
    AmbushEvent,
    BankruptcyEvent,
    DayAdvancedEvent,
    GameEvent,
    GuardsPaidEvent,
    MarketRefreshedEvent,
    ResourceSpentEvent,
    RobberyResolvedEvent,
    TradeExecutedEvent,
    TravelPerformedEvent,
)

logger = logging.getLogger(__name__)

MenuAction = Literal["new_game", "load_game", "quit"]
LoopOutcome = Literal["menu", "quit"]

_CITY_OPTIONS = (
    "Wait a day",
    "Barter",
    "Travel",
    "Hire guards and travel",
    "Save game",
    "Return to main menu",
)


def main(*, seed: int | None = None, balance_id: str | None = None, slot_store: SaveSlotStore | None = None) -> None:
    """Start the interactive CLI session."""
    engine = _build_engine(balance_id)
    store = slot_store or SaveSlotStore()
    print("=== Wasteland Traders ===")
    running = True
    while running:
        action = _main_menu_loop()
        if action == "quit":
            running = False
            continue
        if action == "load_game":
            state = _load_game(engine, store)
            if state is None:
                continue
        else:
            state = _start_new_game(engine, seed)
            seed = None
        if _run_city_loop(engine, store, state) == "quit":
            running = False
    print("Goodbye!")


def _build_engine(balance_id: str | None) -> GameService:
    profile = balance_id or load_config()["balance_profile"]
    try:
        return GameService(balance_id=profile)
    except KeyError:
        print(f"Unknown balance profile '{profile}', using the standard rules.")
        return GameService()


def _main_menu_loop() -> MenuAction:
    while True:
        render.render_menu("Main Menu", ["New Game", "Load Game", "Quit"])
        choice = input("Select an option: ").strip()
        if choice == "1":
            return "new_game"
        if choice == "2":
            return "load_game"
        if choice == "3":
            return "quit"
        print("Invalid selection. Please enter 1, 2 or 3.")


def _start_new_game(engine: GameService, seed: int | None) -> GameState:
    if seed is None:
        seed = _prompt_seed()
    state = engine.initialize_game(seed)
    print(f"Game started with seed: {state.seed}")
    return state


def _prompt_seed() -> int | None:
    while True:
        raw_value = input("Enter seed (blank for random): ").strip()
        if not raw_value:
            return None
        try:
            return int(raw_value)
        except ValueError:
            print("Invalid seed. Please enter a valid integer.")


def _load_game(engine: GameService, store: SaveSlotStore) -> GameState | None:
    slots = store.list_slots()
    render.render_menu("Load Game", [slot.describe() for slot in slots] + ["Back"])
    index = _prompt_choice(len(slots) + 1)
    if index == len(slots):
        return None
    slot = slots[index]
    if not slot.exists:
        print("That slot is empty.")
        return None
    try:
        state = engine.load(store.read_slot(slot.slot))
    except (OSError, json.JSONDecodeError, SaveLoadError) as exc:
        print(f"Could not load slot {slot.slot}: {exc}")
        return None
    print(f"Loaded slot {slot.slot}.")
    return state


def _run_city_loop(engine: GameService, store: SaveSlotStore, state: GameState) -> LoopOutcome:
    while True:
        view = engine.build_city_view(state)
        _render_city_view(view)
        if view.bankrupt:
            _render_bankruptcy(view)
            return "menu"
        render.render_menu("Actions", list(_CITY_OPTIONS))
        choice = _prompt_choice(len(_CITY_OPTIONS))
        if choice == 0:
            _render_result(engine.do_tick(state))
        elif choice == 1:
            _barter(engine, state)
        elif choice == 2:
            _travel(engine, state, view)
        elif choice == 3:
            _travel_with_guards(engine, state, view)
        elif choice == 4:
            _save_game(engine, store, state)
        else:
            return "menu"


def _render_city_view(view: CityView) -> None:
    render.render_heading(f"{view.name} - Day {view.tick}")
    if render.debug_enabled():
        print(f"[seed={view.seed} tick={view.tick} market={view.market_kind}]")
    for line in render.format_price_table(view.prices, view.inventory):
        print(line)
    print(f"Inventory value here: {view.inventory_value}")
    if view.cheap:
        print("Cheap here: " + ", ".join(GOOD_NAMES[good_id] for good_id in view.cheap))
    if view.expensive:
        print("Dear here: " + ", ".join(GOOD_NAMES[good_id] for good_id in view.expensive))
    if not view.can_spend:
        print("You are out of water and food. Barter for supplies before moving on.")


def _render_bankruptcy(view: CityView) -> None:
    render.render_heading("Bankrupt")
    print(f"Your trading days end in {view.name} on day {view.tick}.")
    print(f"Left in your pack: {render.format_goods(view.inventory)}")
    input("Press Enter to return to the main menu...")


def _barter(engine: GameService, state: GameState) -> None:
    print("Enter goods as name=count pairs, e.g. 'scrap=3 water=1'.")
    give = _prompt_goods("You offer: ")
    take = _prompt_goods("You ask for: ")
    verdict = engine.propose_trade(state, give, take)
    if not verdict.accepted:
        print(f"The trader refuses. {verdict.message}")
        return
    print(f"Offer worth {verdict.give_value}, asking {verdict.take_value}.")
    if not _confirm("Shake on it? [y/N] "):
        return
    _render_result(engine.execute_trade(state, give, take))


def _travel(engine: GameService, state: GameState, view: CityView) -> None:
    destination = _prompt_destination(view)
    if destination is None:
        return
    result = engine.begin_travel(state, destination)
    _render_result(result)
    if state.pending_travel is None:
        return
    input("Press Enter to hand over the goods...")
    _render_result(engine.complete_travel(state))


def _travel_with_guards(engine: GameService, state: GameState, view: CityView) -> None:
    quote = engine.quote_guards(state)
    if not quote.affordable:
        print("You carry too little for any guard to bother with.")
        return
    print(f"Guards ask for {render.format_goods(quote.payment)} (fee {quote.fee}).")
    destination = _prompt_destination(view)
    if destination is None:
        return
    _render_result(engine.travel_with_guards(state, destination, quote.payment))


def _save_game(engine: GameService, store: SaveSlotStore, state: GameState) -> None:
    slots = store.list_slots()
    render.render_menu("Save Game", [slot.describe() for slot in slots] + ["Back"])
    index = _prompt_choice(len(slots) + 1)
    if index == len(slots):
        return
    slot = slots[index]
    if slot.exists and not _confirm(f"Overwrite slot {slot.slot}? [y/N] "):
        return
    try:
        store.write_slot(slot.slot, engine.save(state))
    except OSError as exc:
        logger.warning("Could not write save slot %d: %s", slot.slot, exc)
        print(f"Could not save: {exc}")
        return
    print(f"Saved to slot {slot.slot}.")


def _prompt_destination(view: CityView) -> str | None:
    if not view.neighbors:
        print("No roads lead out of here.")
        return None
    labels = [f"{neighbor.name} (risk {neighbor.risk:.0%})" for neighbor in view.neighbors]
    render.render_menu("Destinations", labels + ["Stay"])
    index = _prompt_choice(len(labels) + 1)
    if index == len(labels):
        return None
    return view.neighbors[index].city_id


def _prompt_goods(prompt: str) -> Dict[GoodId, int]:
    while True:
        raw = input(prompt)
        try:
            return parse_goods_mapping(raw)
        except ValueError as exc:
            print(exc)


def parse_goods_mapping(raw: str) -> Dict[GoodId, int]:
    """Parse 'scrap=3, water=1' into a good->count mapping.

    Repeated goods add up. Raises ValueError on unknown goods or bad counts.
    """
    result: Dict[GoodId, int] = {}
    for token in raw.replace(",", " ").split():
        name, sep, count_text = token.partition("=")
        good_id = name.strip().lower()
        if not is_good(good_id):
            raise ValueError(f"Unknown good '{name}'.")
        if not sep:
            raise ValueError(f"Missing count for '{name}'; use {good_id}=N.")
        try:
            count = int(count_text)
        except ValueError as exc:
            raise ValueError(f"Invalid count '{count_text}' for {good_id}.") from exc
        if count < 0:
            raise ValueError(f"Count for {good_id} cannot be negative.")
        result[good_id] = result.get(good_id, 0) + count
    return result


def _prompt_choice(choice_count: int) -> int:
    while True:
        raw = input("Select an option: ").strip()
        try:
            index = int(raw) - 1
        except ValueError:
            print("Please enter a number.")
            continue
        if 0 <= index < choice_count:
            return index
        print(f"Please enter a value between 1 and {choice_count}.")


def _confirm(prompt: str) -> bool:
    return input(prompt).strip().lower() in ("y", "yes")


def _render_result(result: ActionResult) -> None:
    _render_events(result.events)


def _render_events(events: Sequence[GameEvent]) -> None:
    if not events:
        return
    lines: List[str] = []
    for event in events:
        if isinstance(event, ActionFailedEvent):
            lines.append(event.message)
        elif isinstance(event, ResourceSpentEvent):
            lines.append(f"You use up 1 {GOOD_NAMES[event.good_id]} ({event.remaining} left).")
        elif isinstance(event, DayAdvancedEvent):
            lines.append(f"Day {event.tick} dawns.")
        elif isinstance(event, MarketRefreshedEvent):
            if render.debug_enabled():
                lines.append(f"[market {event.city_id} -> {event.mode.kind}]")
        elif isinstance(event, TradeExecutedEvent):
            lines.append(
                f"Traded {render.format_goods(event.give)} for {render.format_goods(event.take)}."
            )
        elif isinstance(event, GuardsPaidEvent):
            lines.append(f"The guards take {render.format_goods(event.payment)}.")
        elif isinstance(event, TravelPerformedEvent):
            escort = " under guard" if event.guarded else ""
            lines.append(f"You reach {event.to_city_name}{escort}.")
        elif isinstance(event, AmbushEvent):
            lines.append(f"Bandits block the road! They demand {render.format_goods(event.stolen)}.")
        elif isinstance(event, RobberyResolvedEvent):
            lines.append(f"Robbed of {render.format_goods(event.stolen)}.")
        elif isinstance(event, BankruptcyEvent):
            lines.append("You have nothing left worth trading.")
    if lines:
        render.render_heading("Events")
        render.render_bullet_lines(lines)
