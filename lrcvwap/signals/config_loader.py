"""
YAML configuration loader for the engine.

Loads engine configurations from YAML files, allowing easy sharing
and modification of detector setups without code changes.
"""
import logging
import yaml
from pathlib import Path
from typing import Union

from .config import EngineConfig, SignalToggles
from ..shared.defaults import *

logger = logging.getLogger(__name__)


def load_config_from_yaml(yaml_path: Union[str, Path]) -> EngineConfig:
    """
    Load engine configuration from YAML file.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        EngineConfig object

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is empty or holds invalid values
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, 'r') as f:
        config_dict = yaml.safe_load(f)

    if not config_dict:
        raise ValueError(f"Empty config file: {yaml_path}")
    if not isinstance(config_dict, dict):
        raise ValueError(f"Config file must contain a mapping: {yaml_path}")

    lrc = config_dict.get('lrc', {}) or {}
    vwap = config_dict.get('vwap', {}) or {}
    signals = config_dict.get('signals', {}) or {}

    config = EngineConfig(
        name=config_dict.get('name', yaml_path.stem),
        description=config_dict.get('description', ''),

        # Linear regression channel
        length=int(lrc.get('length', LRC_LENGTH)),
        band_mult=float(lrc.get('band_mult', LRC_BAND_MULT)),
        band_mult2=float(lrc.get('band_mult2', LRC_BAND_MULT_2)),
        band_mult3=float(lrc.get('band_mult3', LRC_BAND_MULT_3)),
        legacy_mid_offset=bool(lrc.get('legacy_mid_offset', False)),
        simple_mode=bool(lrc.get('simple_mode', SIMPLE_MODE)),
        use_slope_filter=bool(lrc.get('use_slope_filter', USE_SLOPE_FILTER)),

        # Rolling VWAP
        vwap_window=int(vwap.get('window', VWAP_WINDOW)),
        sma_length=int(vwap.get('sma_length', VWAP_SMA_LENGTH)),
        ema_length=int(vwap.get('ema_length', VWAP_EMA_LENGTH)),
        atr_period=int(vwap.get('atr_period', VWAP_ATR_PERIOD)),
        vwap_band_mults=tuple(vwap.get('band_mults', VWAP_BAND_MULTS)),

        # Detectors
        signals=SignalToggles(
            enable_lrc_cross=bool(signals.get('enable_lrc_cross', True)),
            enable_early=bool(signals.get('enable_early', True)),
            enable_strong=bool(signals.get('enable_strong', True)),
            enable_super=bool(signals.get('enable_super', True)),
        ),
        signal_sides=signals.get('sides', SIGNAL_SIDES),
    )
    logger.info(f"Loaded config '{config.name}' from {yaml_path}")
    return config


def save_config_to_yaml(config: EngineConfig, yaml_path: Union[str, Path]):
    """
    Save engine configuration to YAML file.

    Args:
        config: EngineConfig object to save
        yaml_path: Path where to save YAML file
    """
    yaml_path = Path(yaml_path)

    # Build nested structure
    config_dict = {
        'name': config.name,
        'description': config.description,

        'lrc': {
            'length': config.length,
            'band_mult': config.band_mult,
            'band_mult2': config.band_mult2,
            'band_mult3': config.band_mult3,
            'simple_mode': config.simple_mode,
            'use_slope_filter': config.use_slope_filter,
            'legacy_mid_offset': config.legacy_mid_offset,
        },

        'vwap': {
            'window': config.vwap_window,
            'sma_length': config.sma_length,
            'ema_length': config.ema_length,
            'atr_period': config.atr_period,
            'band_mults': list(config.vwap_band_mults),
        },

        'signals': {
            'enable_lrc_cross': config.signals.enable_lrc_cross,
            'enable_early': config.signals.enable_early,
            'enable_strong': config.signals.enable_strong,
            'enable_super': config.signals.enable_super,
            'sides': config.signal_sides,
        },
    }

    # Ensure parent directory exists
    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    # Write YAML
    with open(yaml_path, 'w') as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
