"""Per-field input checks run before a bond is priced."""
from __future__ import annotations

import math
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from .config import DEFAULT_CONFIG
from .pricing import period_count

FIELDS = ("face_value", "coupon_rate", "ytm", "years", "frequency")

_ALIASES = {
    "faceValue": "face_value",
    "couponRate": "coupon_rate",
}


def normalize_field(field_name: str) -> str:
    name = _ALIASES.get(field_name, field_name)
    if name not in FIELDS:
        raise KeyError(f"Unknown bond input field: {field_name!r}")
    return name


def parse_number(raw_value: Any) -> float:
    """float() for numbers and numeric strings; NaN for anything unparsable."""
    if raw_value is None or isinstance(raw_value, bool):
        return math.nan
    if isinstance(raw_value, str):
        raw_value = raw_value.strip()
        if not raw_value:
            return math.nan
    try:
        return float(raw_value)
    except (TypeError, ValueError):
        return math.nan


def _check_face_value(x: float) -> Optional[str]:
    if x <= 0:
        return "Face value must be greater than 0"
    return None


def _check_coupon_rate(x: float) -> Optional[str]:
    if x < 0:
        return "Coupon rate cannot be negative"
    return None


def _check_ytm(x: float) -> Optional[str]:
    return None


def _check_years(x: float) -> Optional[str]:
    if x <= 0:
        return "Years to maturity must be greater than 0"
    return None


_CHECKS: Dict[str, Callable[[float], Optional[str]]] = {
    "face_value": _check_face_value,
    "coupon_rate": _check_coupon_rate,
    "ytm": _check_ytm,
    "years": _check_years,
}

_LABELS = {
    "face_value": "Face value",
    "coupon_rate": "Coupon rate",
    "ytm": "Yield to maturity",
    "years": "Years to maturity",
    "frequency": "Payment frequency",
}


def validate_field(
    field_name: str,
    raw_value: Any,
    allowed_frequencies: Iterable[int] = DEFAULT_CONFIG.allowed_frequencies,
) -> Optional[str]:
    """Returns an error message for an invalid value, or None."""
    name = normalize_field(field_name)
    x = parse_number(raw_value)

    if not math.isfinite(x):
        return f"{_LABELS[name]} must be a valid number"

    if name == "frequency":
        allowed = tuple(allowed_frequencies)
        if int(x) != x or int(x) not in allowed:
            return f"Payment frequency must be one of {', '.join(str(f) for f in allowed)}"
        return None

    return _CHECKS[name](x)


def validate_term(years: Any, frequency: Any) -> Optional[str]:
    """Cross-field check: the term must cover at least one whole payment period."""
    y, f = parse_number(years), parse_number(frequency)
    if not (math.isfinite(y) and math.isfinite(f)) or y <= 0 or f <= 0:
        return None
    if period_count(y, int(f)) < 1:
        return "Years to maturity must cover at least one payment period"
    return None


def validate_all_inputs(
    values: Mapping[str, Any],
    allowed_frequencies: Iterable[int] = DEFAULT_CONFIG.allowed_frequencies,
) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    normalized: Dict[str, Any] = {}
    for field_name, raw in values.items():
        name = normalize_field(field_name)
        normalized[name] = raw
        msg = validate_field(name, raw, allowed_frequencies)
        if msg:
            errors[name] = msg

    if "years" in normalized and "frequency" in normalized and not ({"years", "frequency"} & set(errors)):
        msg = validate_term(normalized["years"], normalized["frequency"])
        if msg:
            errors["years"] = msg
    return errors


def has_errors(errors: Optional[Mapping[str, Optional[str]]]) -> bool:
    if not errors:
        return False
    return any(bool(v) for v in errors.values())
