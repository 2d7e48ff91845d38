"""
Candle frame preparation and validation.

Normalizes candle input (Candle records, exchange kline dicts, or
DataFrames) into one frame layout and validates it before any indicator
is computed. Fail-fast approach: raises on validation errors.

A series that is merely too short for an indicator window is NOT an error;
indicators return NaN for those bars. Only malformed input raises here.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from typing import Any, Iterable, Mapping, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

CANDLE_COLUMNS = ["time", "open", "high", "low", "close", "volume"]
PRICE_COLUMNS = ["open", "high", "low", "close"]

# Exchange kline keys ({t, o, h, l, c, v}) and common aliases
_COLUMN_ALIASES = {
    "t": "time",
    "o": "open",
    "h": "high",
    "l": "low",
    "c": "close",
    "v": "volume",
    "date": "time",
    "datetime": "time",
    "timestamp": "time",
    "open_time": "time",
}

_EPOCH = pd.Timestamp("1970-01-01", tz="UTC")


class CandleValidationError(ValueError):
    """Raised when candle input violates the OHLCV invariants."""
    pass


def _to_epoch_ms(values: pd.Series) -> pd.Series:
    """
    Convert a time column to epoch milliseconds.

    Epoch values sent as strings ("1700000000000") are taken as-is; only
    columns that do not parse as numbers go through datetime parsing.
    Unparseable entries become NaN and are reported by validate_candles.
    """
    if not pd.api.types.is_datetime64_any_dtype(values):
        numeric = pd.to_numeric(values, errors="coerce")
        if numeric.notna().sum() == values.notna().sum():
            return numeric
    stamps = pd.to_datetime(values, utc=True, errors="coerce")
    return (stamps - _EPOCH) // pd.Timedelta(milliseconds=1)


def normalize_candle_frame(data: pd.DataFrame) -> pd.DataFrame:
    """
    Return a copy of data with the canonical candle layout.

    Columns are renamed case-insensitively (t/o/h/l/c/v and Open/High/...
    both work), a DatetimeIndex becomes the time column, time is converted
    to epoch milliseconds, and a missing volume column is added as NaN.

    Args:
        data: Raw candle DataFrame

    Returns:
        DataFrame with columns time, open, high, low, close, volume on a RangeIndex
    """
    df = data.copy()
    renamed = {}
    for col in df.columns:
        key = str(col).strip().lower()
        renamed[col] = _COLUMN_ALIASES.get(key, key)
    df = df.rename(columns=renamed)

    if "time" not in df.columns and isinstance(df.index, pd.DatetimeIndex):
        df["time"] = df.index

    if "time" in df.columns:
        if not pd.api.types.is_numeric_dtype(df["time"]):
            df["time"] = _to_epoch_ms(df["time"])

    if "volume" not in df.columns:
        df["volume"] = np.nan

    for col in PRICE_COLUMNS + ["volume"]:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)

    present = [c for c in CANDLE_COLUMNS if c in df.columns]
    return df[present].reset_index(drop=True)


def validate_candles(df: pd.DataFrame) -> None:
    """
    Validate a normalized candle frame.

    Checks, in order: required columns, finite prices, high >= low,
    open/close inside [low, high], finite non-negative volume, strictly
    increasing timestamps.

    Raises:
        CandleValidationError: naming the first offending bar
    """
    missing = [c for c in ["time"] + PRICE_COLUMNS if c not in df.columns]
    if missing:
        raise CandleValidationError(f"Candle data missing required columns: {missing}")

    if len(df) == 0:
        return

    if df["time"].isna().any():
        bar = int(np.flatnonzero(df["time"].isna().to_numpy())[0])
        raise CandleValidationError(f"Candle {bar} has no timestamp")

    if not pd.api.types.is_numeric_dtype(df["time"]):
        raise CandleValidationError(f"Candle timestamps must be numeric epoch ms, got dtype {df['time'].dtype}")

    prices = df[PRICE_COLUMNS].to_numpy(dtype=float)
    bad_rows = ~np.isfinite(prices).all(axis=1)
    if bad_rows.any():
        bar = int(np.flatnonzero(bad_rows)[0])
        raise CandleValidationError(f"Candle {bar} has a non-finite price: {prices[bar].tolist()}")

    high = df["high"].to_numpy()
    low = df["low"].to_numpy()
    inverted = high < low
    if inverted.any():
        bar = int(np.flatnonzero(inverted)[0])
        raise CandleValidationError(f"Candle {bar} has high ({high[bar]}) < low ({low[bar]})")

    body_top = np.maximum(df["open"].to_numpy(), df["close"].to_numpy())
    body_bottom = np.minimum(df["open"].to_numpy(), df["close"].to_numpy())
    outside = (high < body_top) | (low > body_bottom)
    if outside.any():
        bar = int(np.flatnonzero(outside)[0])
        raise CandleValidationError(
            f"Candle {bar} open/close outside high/low range: {prices[bar].tolist()}"
        )

    volume = df["volume"].to_numpy(dtype=float) if "volume" in df.columns else np.array([])
    present = ~np.isnan(volume)
    bad_volume = present & (~np.isfinite(volume) | (volume < 0))
    if bad_volume.any():
        bar = int(np.flatnonzero(bad_volume)[0])
        raise CandleValidationError(f"Candle {bar} has invalid volume: {volume[bar]}")

    times = df["time"].to_numpy()
    steps = np.diff(times)
    if (steps <= 0).any():
        bar = int(np.flatnonzero(steps <= 0)[0]) + 1
        raise CandleValidationError(
            f"Timestamps must be strictly increasing: candle {bar} ({times[bar]}) "
            f"follows {times[bar - 1]}"
        )


def _record_to_dict(record: Any) -> Mapping[str, Any]:
    if is_dataclass(record):
        return asdict(record)
    if isinstance(record, Mapping):
        return record
    raise TypeError(f"Unsupported candle record type: {type(record).__name__}")


def candles_to_frame(
    candles: Union[pd.DataFrame, Iterable[Any]],
) -> pd.DataFrame:
    """
    Build a validated candle frame from Candle records, kline dicts or a DataFrame.

    The input is never modified; a new frame is returned.

    Raises:
        CandleValidationError: if the candles violate the OHLCV invariants
    """
    if isinstance(candles, pd.DataFrame):
        raw = candles
    else:
        rows = [_record_to_dict(c) for c in candles]
        raw = pd.DataFrame(rows, columns=None if rows else CANDLE_COLUMNS)

    df = normalize_candle_frame(raw)
    validate_candles(df)
    df["time"] = df["time"].astype("int64")
    logger.debug(f"Prepared {len(df)} candles")
    return df
