"""Engine configuration: default inputs, classification tolerance and input debounce policy."""
from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from .classification import DEFAULT_PAR_TOLERANCE
from .pricing import BondParameters

ENV_PREFIX = "BOND_ENGINE_"


def _to_float(value: Optional[str], default: float) -> float:
    """Parse a float env var, falling back to default when unparsable or not finite."""
    if value is None:
        return default
    try:
        parsed = float(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if math.isfinite(parsed) else default


def _to_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _to_int_tuple(value: Optional[str], default: Tuple[int, ...]) -> Tuple[int, ...]:
    """Parse a comma separated list such as '1,2,4,12'."""
    if value is None:
        return default
    try:
        parsed = tuple(int(part) for part in str(value).split(",") if part.strip())
    except ValueError:
        return default
    return parsed or default


@dataclass(frozen=True)
class EngineConfig:
    face_value: float = 100.0
    coupon_rate: float = 8.6
    ytm: float = 6.5
    years: float = 5.0
    frequency: int = 2

    par_tolerance: float = DEFAULT_PAR_TOLERANCE
    input_debounce_seconds: float = 0.3
    allowed_frequencies: Tuple[int, ...] = (1, 2, 4, 12)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a configuration from BOND_ENGINE_* environment variables."""
        base = cls()

        def env(name: str) -> Optional[str]:
            return os.getenv(ENV_PREFIX + name)

        return cls(
            face_value=_to_float(env("FACE_VALUE"), base.face_value),
            coupon_rate=_to_float(env("COUPON_RATE"), base.coupon_rate),
            ytm=_to_float(env("YTM"), base.ytm),
            years=_to_float(env("YEARS"), base.years),
            frequency=_to_int(env("FREQUENCY"), base.frequency),
            par_tolerance=_to_float(env("PAR_TOLERANCE"), base.par_tolerance),
            input_debounce_seconds=_to_float(env("INPUT_DEBOUNCE_SECONDS"), base.input_debounce_seconds),
            allowed_frequencies=_to_int_tuple(env("ALLOWED_FREQUENCIES"), base.allowed_frequencies),
        )

    def default_parameters(self) -> BondParameters:
        return BondParameters(
            face_value=self.face_value,
            coupon_rate=self.coupon_rate,
            ytm=self.ytm,
            years=self.years,
            frequency=self.frequency,
        )


DEFAULT_CONFIG = EngineConfig()
