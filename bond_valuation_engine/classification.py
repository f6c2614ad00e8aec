from __future__ import annotations

from dataclasses import dataclass

PAR = "par"
PREMIUM = "premium"
DISCOUNT = "discount"

DEFAULT_PAR_TOLERANCE = 0.01

_DESCRIPTIONS = {
    PAR: "Par bond",
    PREMIUM: "Premium bond",
    DISCOUNT: "Discount bond",
}


@dataclass(frozen=True)
class BondClassification:
    type: str
    description: str
    difference: float  # distance from face value, always >= 0


def classify(bond_price: float, face_value: float, tolerance: float = DEFAULT_PAR_TOLERANCE) -> BondClassification:
    """
    Par if |price - face| < tolerance (difference reported as 0),
    otherwise premium or discount with the absolute distance from face.
    """
    if tolerance < 0:
        raise ValueError("tolerance must be non-negative.")

    diff = bond_price - face_value

    if abs(diff) < tolerance:
        return BondClassification(PAR, _DESCRIPTIONS[PAR], 0.0)
    if diff > 0:
        return BondClassification(PREMIUM, _DESCRIPTIONS[PREMIUM], diff)
    return BondClassification(DISCOUNT, _DESCRIPTIONS[DISCOUNT], abs(diff))
