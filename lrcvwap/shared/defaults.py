"""
Centralized default values for indicator and signal parameters.

This is the SINGLE SOURCE OF TRUTH for all parameter defaults.
All modules should import from here to ensure consistency.

Values follow the Pine Script study the channel and bands were ported from
(ta.linreg midline, ta.vwma on hlc3, devNew = avg(ema(tr, 100), stdev)).
"""

# Linear regression channel
LRC_LENGTH = 100  # Regression window (bars)
LRC_BAND_MULT = 2.0  # Tier 1 std-dev multiplier
LRC_BAND_MULT_2 = 2.0  # Tier 2 (EARLY / STRONG threshold)
LRC_BAND_MULT_3 = 3.0  # Tier 3 (SUPER "dotted line")
LRC_LEGACY_OFFSET_BARS = 1.0  # Cosmetic midline shift of slope * 1.0, off unless requested

# Rolling VWAP
VWAP_WINDOW = 100
VWAP_SMA_LENGTH = 21  # SMA of close shown alongside RVWAP
VWAP_EMA_LENGTH = 45  # EMA of close shown alongside RVWAP
VWAP_ATR_PERIOD = 100  # True-range EMA period (capped at series length)
VWAP_BAND_MULTS = (2.0, 2.5, 3.0, 3.5, 4.0)  # ub1/lb1 .. ub5/lb5

# Signal detection
USE_SLOPE_FILTER = True  # LRC crosses must agree with regression slope
SIMPLE_MODE = False  # Simple mode bypasses the slope gate entirely
SIGNAL_SIDES = "all"  # "long", "short", or "all"

# Excursion analysis
EXCURSION_BARS = 10  # Bars after entry inspected for max favorable/adverse move
EXCURSION_TARGETS_PCT = (0.5, 1.0, 2.0)
EXCURSION_WINDOWS = ((1, 3), (4, 6), (7, 10))
EXCURSION_CUTOFFS = (3, 6, 10)
