"""
Net Worth Tracker - Source Package

A personal net-worth tracker built on a series of monthly
asset/liability snapshots.

DESIGN PRINCIPLES:
1. One authoritative store; every category change hits every month
2. Derived metrics are recomputed, never stored
3. Edits show up immediately and roll back visibly on failure
4. AI insights are advisory and never touch the data
"""

__version__ = "1.0.0"
__author__ = "Net Worth Tracker Team"
