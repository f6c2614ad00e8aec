from __future__ import annotations

from typing import Dict, Optional


class BondEngineError(Exception):
    """Base class for errors raised by the valuation engine."""


class DomainError(BondEngineError, ValueError):
    """Discount factor is undefined or non-finite for the given periodic yield."""


class ValidationError(BondEngineError, ValueError):
    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        if message is None:
            fields = ", ".join(f"{k}: {v}" for k, v in sorted(self.errors.items()))
            message = f"Invalid bond inputs ({fields})."
        super().__init__(message)
