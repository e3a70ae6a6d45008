"""
Fitness Ledger - Local-only personal health tracking store.

Keeps daily weight, hydration, workout and meal records in a single
JSON document and derives consistency and weight-trend analytics from it.
"""

__version__ = "0.1.0"
