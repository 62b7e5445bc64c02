"""Repository for economy balance profiles."""
from __future__ import annotations

from typing import Dict

from wasteland.core.types import GoodId
from wasteland.data.errors import DataValidationError
from wasteland.data.repositories.base import RepositoryBase
from wasteland.domain.defs import BalanceDef
from wasteland.domain.goods import GOODS, SUPPLY_GOODS
from wasteland.domain.market import MARKET_MODE_KINDS

DEFAULT_BALANCE_ID = "standard"


class BalanceRepository(RepositoryBase[BalanceDef]):
    """Loads and validates balance profiles."""

    def __init__(self, base_path=None) -> None:
        super().__init__("balance.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, BalanceDef]:
        definitions: Dict[str, BalanceDef] = {}
        for balance_id, payload in raw.items():
            if not isinstance(balance_id, str) or not balance_id.strip():
                raise DataValidationError("balance id must be a non-empty string.")
            mapping = self._require_mapping(payload, f"balance '{balance_id}'")
            definitions[balance_id] = self._build_profile(balance_id, mapping)
        return definitions

    def _build_profile(self, balance_id: str, mapping: dict[str, object]) -> BalanceDef:
        context = f"balance '{balance_id}'"
        weights_raw = self._require_mapping(mapping.get("market_weights"), f"{context} market_weights")
        unknown = set(weights_raw) - set(MARKET_MODE_KINDS)
        if unknown:
            raise DataValidationError(f"{context} market_weights has unknown modes: {sorted(unknown)}.")
        weights = {}
        for kind in MARKET_MODE_KINDS:
            weight = self._require_int(weights_raw.get(kind, 0), f"{context} market_weights.{kind}")
            if weight < 0:
                raise DataValidationError(f"{context} market_weights.{kind} must be >= 0.")
            weights[kind] = weight
        if sum(weights.values()) <= 0:
            raise DataValidationError(f"{context} market_weights must have a positive total.")

        expensive_price = self._require_int(mapping.get("expensive_price"), f"{context} expensive_price")
        if expensive_price not in (3, 4):
            raise DataValidationError(f"{context} expensive_price must be 3 or 4.")
        per_trade_cap = self._require_positive_int(mapping.get("per_trade_cap"), f"{context} per_trade_cap")
        visit_trade_cap = self._require_positive_int(mapping.get("visit_trade_cap"), f"{context} visit_trade_cap")

        robbery_chance = self._require_float(mapping.get("robbery_chance"), f"{context} robbery_chance")
        if not 0.0 <= robbery_chance <= 1.0:
            raise DataValidationError(f"{context} robbery_chance must be between 0 and 1.")
        share_raw = self._require_list(mapping.get("robbery_share"), f"{context} robbery_share")
        if len(share_raw) != 2:
            raise DataValidationError(f"{context} robbery_share must be [numerator, denominator].")
        numerator = self._require_int(share_raw[0], f"{context} robbery_share[0]")
        denominator = self._require_positive_int(share_raw[1], f"{context} robbery_share[1]")
        if not 0 <= numerator <= denominator:
            raise DataValidationError(f"{context} robbery_share must be a fraction between 0 and 1.")

        guard_fee_divisor = self._require_positive_int(
            mapping.get("guard_fee_divisor"), f"{context} guard_fee_divisor"
        )
        markets_refreshed = self._require_positive_int(
            mapping.get("markets_refreshed_per_tick"), f"{context} markets_refreshed_per_tick"
        )

        supplies_raw = self._require_mapping(mapping.get("starting_supplies"), f"{context} starting_supplies")
        supplies: Dict[GoodId, int] = {}
        for good_id, quantity in supplies_raw.items():
            if good_id not in GOODS:
                raise DataValidationError(f"{context} starting_supplies has unknown good '{good_id}'.")
            supplies[good_id] = self._require_int(quantity, f"{context} starting_supplies.{good_id}")
        for good_id in SUPPLY_GOODS:
            if supplies.get(good_id, 0) < 1:
                raise DataValidationError(f"{context} must start the player with at least 1 {good_id}.")
        extra_units = self._require_int(mapping.get("starting_extra_units"), f"{context} starting_extra_units")
        if extra_units < 0:
            raise DataValidationError(f"{context} starting_extra_units must be >= 0.")

        return BalanceDef(
            id=balance_id,
            market_weights=weights,
            expensive_price=expensive_price,
            per_trade_cap=per_trade_cap,
            visit_trade_cap=visit_trade_cap,
            robbery_chance=robbery_chance,
            robbery_share=(numerator, denominator),
            guard_fee_divisor=guard_fee_divisor,
            markets_refreshed_per_tick=markets_refreshed,
            starting_supplies=supplies,
            starting_extra_units=extra_units,
        )

    def _require_positive_int(self, value: object, context: str) -> int:
        number = self._require_int(value, context)
        if number < 1:
            raise DataValidationError(f"{context} must be >= 1.")
        return number
