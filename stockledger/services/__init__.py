from .adjustments import StockAdjuster
from .catalog import ProductCatalog
from .ledger import MovementLedger
from .resolver import InventorySummary, classify_status, compute_deltas, resolve, summarize

__all__ = [
    "InventorySummary",
    "MovementLedger",
    "ProductCatalog",
    "StockAdjuster",
    "classify_status",
    "compute_deltas",
    "resolve",
    "summarize",
]
