#!/usr/bin/env python3
"""
Signal analysis CLI.

Loads a candle file, runs the LRC / RVWAP detectors and prints the signals
together with an excursion summary.
"""
import argparse
import logging
import sys
from typing import Optional

from lrcvwap.data.loader import CandleLoader
from lrcvwap.data.preparation import CandleValidationError
from lrcvwap.evaluation.excursion import (
    ExcursionAnalyzer,
    summarize_by_reason,
    win_rate_exclusive,
    win_rate_cumulative,
)
from lrcvwap.shared.defaults import (
    EXCURSION_BARS,
    EXCURSION_TARGETS_PCT,
    EXCURSION_WINDOWS,
    EXCURSION_CUTOFFS,
)
from lrcvwap.signals.config import (
    BASELINE_CONFIG,
    PRESET_CONFIGS,
    VALID_SIGNAL_SIDES,
    EngineConfig,
    SignalToggles,
    with_overrides,
)
from lrcvwap.signals.config_loader import load_config_from_yaml
from lrcvwap.signals.detector import SignalDetector, signals_to_frame


def setup_logging(verbose: bool = False):
    """
    Setup logging to stdout.

    Args:
        verbose: If True, use DEBUG level, otherwise INFO
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Detect LRC / RVWAP signals on a candle file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Baseline detectors on a CSV export
    python -m cli.analyze data/btcusdt_1h.csv

    # Legacy single-rule midline crosses
    python -m cli.analyze data/btcusdt_1h.csv --preset simple_cross

    # YAML config, long signals only, write signals to CSV
    python -m cli.analyze data/btcusdt_1h.json --config configs/baseline.yaml --sides long --output signals.csv
        """
    )

    parser.add_argument("data", help="Candle file (.csv or .json)")
    parser.add_argument(
        "--config",
        type=str,
        help="Load configuration from YAML file",
    )
    parser.add_argument(
        "--preset", "-p",
        type=str,
        choices=list(PRESET_CONFIGS.keys()),
        help="Use a preset configuration",
    )
    parser.add_argument("--limit", type=int, help="Only use the most recent N candles")

    # Indicator parameters
    parser.add_argument("--length", type=int, help="Regression window length")
    parser.add_argument("--band-mult", type=float, help="LRC tier 1 multiplier")
    parser.add_argument("--band-mult2", type=float, help="LRC tier 2 multiplier")
    parser.add_argument("--band-mult3", type=float, help="LRC tier 3 multiplier")
    parser.add_argument("--vwap-window", type=int, help="Rolling VWAP window")
    parser.add_argument(
        "--legacy-mid-offset",
        action="store_true",
        help="Shift the midline by slope * 1.0 (cosmetic)",
    )

    # LRC cross gating
    parser.add_argument(
        "--simple-mode",
        action="store_true",
        help="Plain midline crosses, no slope gate",
    )
    parser.add_argument(
        "--no-slope-filter",
        action="store_true",
        help="Do not require the slope to agree with LRC crosses",
    )

    # Detector toggles
    parser.add_argument("--disable-lrc-cross", action="store_true", help="Disable LRC_CROSS detector")
    parser.add_argument("--disable-early", action="store_true", help="Disable EARLY detector")
    parser.add_argument("--disable-strong", action="store_true", help="Disable STRONG detector")
    parser.add_argument("--disable-super", action="store_true", help="Disable SUPER detector")
    parser.add_argument(
        "--sides",
        choices=list(VALID_SIGNAL_SIDES),
        help="Keep only long, only short or all signals",
    )

    # Output
    parser.add_argument(
        "--excursion-bars",
        type=int,
        default=EXCURSION_BARS,
        help=f"Bars after entry inspected for excursions (default: {EXCURSION_BARS})",
    )
    parser.add_argument("--output", "-o", type=str, help="Write signals to this CSV file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def resolve_config(args: argparse.Namespace) -> EngineConfig:
    """Base config from --preset / --config, then explicit flag overrides."""
    if args.preset:
        config = PRESET_CONFIGS[args.preset]
    elif args.config:
        config = load_config_from_yaml(args.config)
    else:
        config = BASELINE_CONFIG

    overrides = {}
    if args.length is not None:
        overrides['length'] = args.length
    if args.band_mult is not None:
        overrides['band_mult'] = args.band_mult
    if args.band_mult2 is not None:
        overrides['band_mult2'] = args.band_mult2
    if args.band_mult3 is not None:
        overrides['band_mult3'] = args.band_mult3
    if args.vwap_window is not None:
        overrides['vwap_window'] = args.vwap_window
    if args.legacy_mid_offset:
        overrides['legacy_mid_offset'] = True
    if args.simple_mode:
        overrides['simple_mode'] = True
    if args.no_slope_filter:
        overrides['use_slope_filter'] = False
    if args.sides:
        overrides['signal_sides'] = args.sides

    if args.disable_lrc_cross or args.disable_early or args.disable_strong or args.disable_super:
        toggles = config.signals
        overrides['signals'] = SignalToggles(
            enable_lrc_cross=toggles.enable_lrc_cross and not args.disable_lrc_cross,
            enable_early=toggles.enable_early and not args.disable_early,
            enable_strong=toggles.enable_strong and not args.disable_strong,
            enable_super=toggles.enable_super and not args.disable_super,
        )

    if overrides:
        config = with_overrides(config, **overrides)
    return config


def print_config(config: EngineConfig) -> None:
    enabled = [
        name for name, on in (
            ("LRC_CROSS", config.signals.enable_lrc_cross),
            ("EARLY", config.signals.enable_early),
            ("STRONG", config.signals.enable_strong),
            ("SUPER", config.signals.enable_super),
        ) if on
    ]
    print(f"Configuration: {config.name}")
    if config.description:
        print(f"  Description: {config.description}")
    print(f"  LRC: length={config.length}, bands={config.band_mult}/{config.band_mult2}/{config.band_mult3}")
    print(f"  RVWAP: window={config.vwap_window}, bands={list(config.vwap_band_mults)}")
    print(f"  Slope gate: {'on' if config.slope_gate_active else 'off'}")
    print(f"  Detectors: {', '.join(enabled) if enabled else 'None'}")
    print(f"  Sides: {config.signal_sides}")
    print()


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)
    logger = logging.getLogger(__name__)

    print("=" * 80)
    print("LRC / RVWAP SIGNAL ANALYSIS")
    print("=" * 80)
    print()

    try:
        config = resolve_config(args)
        analyzer = ExcursionAnalyzer(n_bars=args.excursion_bars)
        candles = CandleLoader(args.data).load(limit=args.limit)
        signals, _ = SignalDetector(config).detect_signals_with_indicators(candles)
    except (FileNotFoundError, CandleValidationError, ValueError) as e:
        logger.error(f"{e}")
        print(f"Error: {e}")
        return 1

    print_config(config)
    print(f"Loaded {len(candles)} candles from {args.data}")
    print()

    frame = signals_to_frame(signals)
    print("=" * 80)
    print(f"SIGNALS ({len(signals)})")
    print("=" * 80)
    if frame.empty:
        print("No signals")
    else:
        print(frame.to_string(index=False))

    if signals:
        excursions = analyzer.excursions(candles, signals)
        print("\n" + "=" * 80)
        print(f"EXCURSIONS (next {analyzer.n_bars} bars)")
        print("=" * 80)
        for key, stats in summarize_by_reason(excursions).items():
            print(
                f"{key:<18} count={stats['count']:<5} "
                f"avg MFE={stats['avg_favorable_pct']:.2f}%  "
                f"avg MAE={stats['avg_adverse_pct']:.2f}%"
            )

        touches = analyzer.first_touches(candles, signals, EXCURSION_TARGETS_PCT)
        exclusive = win_rate_exclusive(touches, len(signals), EXCURSION_WINDOWS)
        cumulative = win_rate_cumulative(touches, len(signals), EXCURSION_CUTOFFS)
        print("\nFirst touch of target (percent of signals):")
        for target in sorted(exclusive):
            windows = "  ".join(f"{k}: {v:.1f}%" for k, v in exclusive[target].items())
            cutoffs = "  ".join(f"{k}: {v:.1f}%" for k, v in cumulative[target].items())
            print(f"  +{target}%  [{windows}]  [{cutoffs}]")

    if args.output:
        frame.to_csv(args.output, index=False)
        print(f"\nSignals CSV saved: {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
