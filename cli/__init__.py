"""
CLI entry points.

Provides command-line interfaces for:
- Signal analysis on a candle file
- Parameter reference
"""
