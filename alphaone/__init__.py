"""
AlphaOne - Personal Trading Journal

A self-hosted Python system for recording discretionary trades and
cash flows, and turning them into KPIs, an equity curve and a P/L calendar.

The journal is the source of truth. Everything else is derived from it.
"""

__version__ = "0.1.0"
