"""
Reactive state store for an interactive valuation session.

The store owns the current inputs, the active validation errors and the last valuation result.
Every change goes through ``BondStateStore.update``, which swaps in a fully assembled snapshot and
then notifies subscribers in registration order, so no subscriber ever sees a half-applied change.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, List, Mapping, Optional

from .config import DEFAULT_CONFIG, EngineConfig
from .errors import DomainError, ValidationError
from .pricing import BondParameters
from .valuation import ValuationResult, calculate_bond_metrics
from .validation import FIELDS, has_errors, normalize_field, parse_number, validate_field, validate_term

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BondState:
    face_value: float
    coupon_rate: float
    ytm: float
    years: float
    frequency: int
    errors: Dict[str, str] = field(default_factory=dict)
    bond_calculations: Optional[ValuationResult] = None

    @classmethod
    def from_config(cls, config: EngineConfig) -> "BondState":
        return cls(
            face_value=config.face_value,
            coupon_rate=config.coupon_rate,
            ytm=config.ytm,
            years=config.years,
            frequency=config.frequency,
        )

    def to_parameters(self) -> BondParameters:
        if has_errors(self.errors):
            raise ValidationError(self.errors)
        return BondParameters(
            face_value=self.face_value,
            coupon_rate=self.coupon_rate,
            ytm=self.ytm,
            years=self.years,
            frequency=self.frequency,
        )


_STATE_FIELDS = frozenset(f.name for f in fields(BondState))
_RESULT_INPUTS = frozenset(FIELDS) | {"errors"}

PARAMETERS_ERROR = "parameters"

Listener = Callable[[BondState], None]


class Subscription:
    """Handle returned by ``BondStateStore.subscribe``; call ``unsubscribe`` to stop delivery."""

    def __init__(self, store: "BondStateStore", callback: Listener):
        self._store = store
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._store._remove(self)
            self.active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.unsubscribe()


class BondStateStore:
    def __init__(
        self,
        config: EngineConfig = DEFAULT_CONFIG,
        initial: Optional[BondState] = None,
        calculate: Callable[..., ValuationResult] = calculate_bond_metrics,
    ):
        self.config = config
        self._calculate = calculate
        self._subscribers: List[Subscription] = []

        state = initial if initial is not None else BondState.from_config(config)
        self._state = self._settle(state)

    @property
    def state(self) -> BondState:
        return self._state

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Listener) -> Subscription:
        sub = Subscription(self, callback)
        self._subscribers.append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        self._subscribers.remove(sub)

    def update(self, **changes: Any) -> BondState:
        """
        Merge ``changes`` into a new snapshot, install it, then notify every subscriber with it.

        When inputs or errors change and ``bond_calculations`` is not given, the result is
        recomputed for the merged snapshot before anyone is notified.
        Subscriber exceptions propagate to the caller.
        """
        unknown = set(changes) - _STATE_FIELDS
        if unknown:
            raise KeyError(f"Unknown state fields: {sorted(unknown)}")

        if "errors" in changes:
            changes["errors"] = dict(changes["errors"] or {})

        new_state = replace(self._state, **changes)
        if "bond_calculations" not in changes and _RESULT_INPUTS & set(changes):
            new_state = self._settle(new_state)
        self._state = new_state

        for sub in list(self._subscribers):
            sub.callback(new_state)
        return new_state

    def parameters(self) -> BondParameters:
        return self._state.to_parameters()

    def _settle(self, state: BondState) -> BondState:
        """
        ``state`` with its result recomputed: None while any error is active.

        Inputs that pass the field checks but still cannot form a bond are reported
        under the ``parameters`` error key.
        """
        errors = dict(state.errors)
        errors.pop(PARAMETERS_ERROR, None)
        result = None

        if not has_errors(errors):
            try:
                params = replace(state, errors=errors).to_parameters()
            except ValueError as exc:
                logger.warning("Bond inputs rejected: %s", exc)
                errors[PARAMETERS_ERROR] = str(exc)
            else:
                result = self._compute(params)

        return replace(state, errors=errors, bond_calculations=result)

    def _compute(self, params: BondParameters) -> Optional[ValuationResult]:
        """Valuation for ``params``, or None when pricing fails."""
        try:
            result = self._calculate(params, self.config.par_tolerance)
        except DomainError as exc:
            logger.warning("No valuation for %s: %s", params, exc)
            return None
        except Exception:
            logger.exception("Valuation failed for %s", params)
            return None

        logger.debug("Recomputed bond price %.6f for %s", result.bond_price, params)
        return result

    def recalculate(self) -> BondState:
        settled = self._settle(self._state)
        return self.update(errors=settled.errors, bond_calculations=settled.bond_calculations)

    def apply_inputs(self, values: Mapping[str, Any]) -> BondState:
        """
        Validate raw field values and publish them together with the recomputed result.

        Values are stored as parsed numbers (NaN when unparsable); messages go to ``errors``.
        """
        changes: Dict[str, Any] = {}
        errors = dict(self._state.errors)

        for field_name, raw in values.items():
            name = normalize_field(field_name)
            msg = validate_field(name, raw, self.config.allowed_frequencies)
            x = parse_number(raw)
            if name == "frequency" and msg is None:
                x = int(x)

            changes[name] = x
            if msg:
                errors[name] = msg
            else:
                errors.pop(name, None)

        if "years" in changes or "frequency" in changes:
            years = changes.get("years", self._state.years)
            frequency = changes.get("frequency", self._state.frequency)
            years_msg = validate_field("years", years)
            if years_msg is None and "frequency" not in errors:
                years_msg = validate_term(years, frequency)
            if years_msg:
                errors["years"] = years_msg
            else:
                errors.pop("years", None)

        return self.update(errors=errors, **changes)

    def apply_input(self, field_name: str, raw_value: Any) -> BondState:
        return self.apply_inputs({field_name: raw_value})
