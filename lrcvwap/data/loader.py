"""
Candle file loader.

Loads OHLCV candles saved from the exchange kline endpoints:
- JSON: a list of {t, o, h, l, c, v} objects (the REST payload as-is), or
  an exchange envelope {"result": {"list": [...]}} whose rows are either
  such objects or positional arrays [start, open, high, low, close, volume, ...]
  (values may be strings; positional rows may arrive newest-first)
- CSV: one row per bar with t/o/h/l/c/v or Date/Open/High/Low/Close/Volume columns

Fetching candles over HTTP belongs to the market-data service; this module
only reads what it saved.
"""
import json
import logging
import pandas as pd
from pathlib import Path
from typing import Optional, Union

from .preparation import CANDLE_COLUMNS, candles_to_frame

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv", ".json")


def _positional_klines(rows: list) -> pd.DataFrame:
    """Name positional kline rows and put them in ascending time order."""
    frame = pd.DataFrame([list(row[:len(CANDLE_COLUMNS)]) for row in rows])
    frame.columns = CANDLE_COLUMNS[:frame.shape[1]]
    if "time" not in frame.columns or len(frame) < 2:
        return frame
    if pd.to_numeric(frame["time"], errors="coerce").is_monotonic_decreasing:
        frame = frame.iloc[::-1].reset_index(drop=True)
    return frame


class CandleLoader:
    """
    Loads candles from a CSV or JSON file.

    Output is always a validated candle frame (see candles_to_frame).
    """

    def __init__(self, data_path: Union[str, Path]):
        """
        Initialize the candle loader.

        Args:
            data_path: Path to the CSV or JSON file containing the candles
        """
        self.data_path = Path(data_path)
        if not self.data_path.exists():
            raise FileNotFoundError(f"Data file not found: {self.data_path}")
        if self.data_path.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise ValueError(
                f"Unsupported candle file type '{self.data_path.suffix}'. "
                f"Supported: {', '.join(SUPPORTED_SUFFIXES)}"
            )

    def _read_raw(self) -> pd.DataFrame:
        if self.data_path.suffix.lower() == ".json":
            with open(self.data_path, "r") as f:
                payload = json.load(f)
            # Some exchange wrappers nest the list under "result" / "list"
            if isinstance(payload, dict):
                payload = payload.get("result", payload)
                if isinstance(payload, dict):
                    payload = payload.get("list", [])
            if payload and isinstance(payload[0], (list, tuple)):
                return _positional_klines(payload)
            return pd.DataFrame(payload)
        return pd.read_csv(self.data_path)

    def load(self, limit: Optional[int] = None) -> pd.DataFrame:
        """
        Load and validate candles.

        Args:
            limit: If given, keep only the most recent `limit` bars.

        Returns:
            Candle frame with columns time, open, high, low, close, volume

        Raises:
            CandleValidationError: if the file contents violate OHLCV invariants
        """
        raw = self._read_raw()
        df = candles_to_frame(raw)
        if limit is not None:
            if limit < 1:
                raise ValueError(f"limit must be >= 1, got {limit}")
            df = df.iloc[-limit:].reset_index(drop=True)
        logger.info(f"Loaded {len(df)} candles from {self.data_path}")
        return df
