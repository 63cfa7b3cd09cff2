"""
Variant Engine

Turns a product's attribute catalog into sellable variant records, keeps them
aligned as attributes change, assigns SKUs and aggregates stock.
"""

__version__ = "1.0.0"
