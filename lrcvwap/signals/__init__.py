"""
Signal generation module.

Multi-tier signal detector composing the Linear Regression Channel and the
rolling VWAP bands into directional signals (LRC_CROSS, EARLY, STRONG,
SUPER), each detector switched independently by configuration.
"""
from .detector import SignalDetector, signals_to_frame
from .config import EngineConfig, SignalToggles, BASELINE_CONFIG, PRESET_CONFIGS, with_overrides
from .config_loader import load_config_from_yaml, save_config_to_yaml
from .rules import (
    SignalRule,
    EarlyRule,
    StrongRule,
    SuperRule,
    LrcCrossRule,
    get_signal_rules,
)

__all__ = [
    'SignalDetector',
    'signals_to_frame',
    'EngineConfig',
    'SignalToggles',
    'BASELINE_CONFIG',
    'PRESET_CONFIGS',
    'with_overrides',
    'load_config_from_yaml',
    'save_config_to_yaml',
    'SignalRule',
    'EarlyRule',
    'StrongRule',
    'SuperRule',
    'LrcCrossRule',
    'get_signal_rules',
]
