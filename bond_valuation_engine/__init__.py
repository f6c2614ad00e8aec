"""
Bond Valuation Engine

Modules:
- pricing: bond parameters + present-value pricing
- cashflows: periodic cash-flow schedule + NPV check
- classification: par / premium / discount verdict
- valuation: orchestrator (calculate_bond_metrics) + start-up QC report
- validation: per-field input checks
- state: reactive state store with subscriber handles
- scheduling: poll-driven debouncing of input bursts
- risk: yield solver, DV01, duration, convexity
- scenarios: ytm shock runner
- config: defaults and environment overrides

Rendering layers should only call calculate_bond_metrics and subscribe to BondStateStore.
"""
from .errors import BondEngineError, DomainError, ValidationError
from .pricing import BondParameters, PriceComponents, price_bond
from .cashflows import CashFlow, generate_cash_flows
from .classification import BondClassification, classify
from .valuation import ValuationResult, calculate_bond_metrics
from .state import BondState, BondStateStore, Subscription
