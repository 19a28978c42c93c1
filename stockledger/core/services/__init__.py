"""
Core business logic services.

Layer-pure services that depend only on:
- stockledger/core/entities/*
- stockledger/core/interfaces/*
- stockledger/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from stockledger.core.services.kitting_calculator import compute_kitting_options, possible_kits
from stockledger.core.services.numeric_parser import parse_quantity, require_quantity
from stockledger.core.services.stock_ledger import (
    StockLedgerService,
    build_kardex,
    build_movement,
    compose_notes,
    plan_movement,
    preview_movement,
    replay_stock,
)
from stockledger.core.services.stock_overview import group_materials, inventory_metrics, low_stock

__all__ = [
    # Numeric parsing
    "parse_quantity",
    "require_quantity",
    # Ledger
    "StockLedgerService",
    "build_movement",
    "plan_movement",
    "compose_notes",
    "preview_movement",
    "replay_stock",
    "build_kardex",
    # Kitting
    "compute_kitting_options",
    "possible_kits",
    # Overview
    "group_materials",
    "inventory_metrics",
    "low_stock",
]
