"""
Core ledger services.

Layer-pure services that depend only on:
- stock_ledger/core/entities/*
- stock_ledger/core/interfaces/*
- stock_ledger/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from stock_ledger.core.services import ledger_math
from stock_ledger.core.services.cost_valuator import CostValuator
from stock_ledger.core.services.deficit_detector import DeficitDetector, classify_deficit
from stock_ledger.core.services.entry_validation import validate_stock_entry
from stock_ledger.core.services.price_consistency import PriceConsistencyChecker
from stock_ledger.core.services.stock_aggregator import StockAggregator
from stock_ledger.core.services.stock_policy import StockPolicyService

__all__ = [
    # Reductions
    "ledger_math",
    # Aggregation
    "StockAggregator",
    # Valuation
    "CostValuator",
    # Deficits
    "DeficitDetector",
    "classify_deficit",
    # Price consistency
    "PriceConsistencyChecker",
    # Policy
    "validate_stock_entry",
    "StockPolicyService",
]
