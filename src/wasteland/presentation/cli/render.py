"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
from typing import Iterable, Mapping, Sequence

from wasteland.core.types import GoodId
from wasteland.domain.goods import GOOD_NAMES, GOODS


def debug_enabled() -> bool:
    """Return True only when WASTELAND_DEBUG is explicitly set to '1'."""
    return os.getenv("WASTELAND_DEBUG") == "1"


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_menu(title: str, options: Sequence[str]) -> None:
    """Display a menu section with numbered options."""
    render_heading(title)
    for idx, label in enumerate(options, start=1):
        print(f"{idx}. {label}")


def render_bullet_lines(lines: Iterable[str]) -> None:
    """Print bullet-prefixed lines."""
    for line in lines:
        print(f"- {line}")


def format_goods(goods: Mapping[GoodId, int]) -> str:
    """Return goods as 'Water x2, Scrap x1' in canonical order, or 'nothing'."""
    parts = [f"{GOOD_NAMES[good_id]} x{goods[good_id]}" for good_id in GOODS if goods.get(good_id, 0) > 0]
    return ", ".join(parts) if parts else "nothing"


def format_price_table(prices: Mapping[GoodId, int], inventory: Mapping[GoodId, int]) -> list[str]:
    """Return one aligned line per good with its price and held count."""
    lines = []
    for good_id in GOODS:
        price = prices.get(good_id)
        price_label = "-" if price is None else str(price)
        lines.append(f"{GOOD_NAMES[good_id]:<9} price {price_label:>2}   held {inventory.get(good_id, 0):>3}")
    return lines
