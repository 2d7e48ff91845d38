"""
Channel and band signal engine.

Provides unified interfaces for:
- Candle loading and validation
- Indicator calculations (rolling linear regression, LRC, RVWAP bands)
- Signal generation (LRC_CROSS, EARLY, STRONG, SUPER)
- Excursion analysis of generated signals
"""
