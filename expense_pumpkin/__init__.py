"""
Expense Pumpkin - Source Package

A personal monthly expense tracker core: record expenses per month,
aggregate them, migrate legacy day-level data and export to CSV.

PRINCIPLES:
1. Storage is a capability, not an assumption (it may be missing)
2. User input is validated before any record exists
3. Nothing in the core terminates the process
4. Totals are never converted between currencies
"""

__version__ = "1.0.0"
__author__ = "Expense Pumpkin Team"
