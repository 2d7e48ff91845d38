"""Tests for detector_filters: stable sort, add-on marking, filter by side."""
from lrcvwap.shared.types import Signal, SignalReason, SignalSide
from lrcvwap.signals.detector_filters import (
    sort_signals,
    mark_add_ons,
    filter_signals_by_side,
)


def _signal(time, side, reason=SignalReason.LRC_CROSS, price=100.0):
    return Signal(time=time, side=side, reason=reason, price=price)


LONG = SignalSide.LONG
SHORT = SignalSide.SHORT


class TestSortSignals:
    def test_sorts_by_time(self):
        signals = [_signal(3, LONG), _signal(1, SHORT), _signal(2, LONG)]
        assert [s.time for s in sort_signals(signals)] == [1, 2, 3]

    def test_equal_times_keep_insertion_order(self):
        a = _signal(5, LONG, SignalReason.EARLY)
        b = _signal(5, SHORT, SignalReason.SUPER)
        c = _signal(5, LONG, SignalReason.LRC_CROSS)
        assert sort_signals([a, b, c]) == [a, b, c]

    def test_returns_new_list(self):
        signals = [_signal(2, LONG), _signal(1, LONG)]
        sort_signals(signals)
        assert [s.time for s in signals] == [2, 1]


class TestMarkAddOns:
    def test_repeated_side_is_add_on(self):
        marked = mark_add_ons([_signal(1, LONG), _signal(2, LONG), _signal(3, SHORT), _signal(4, SHORT)])
        assert [s.add_on for s in marked] == [False, True, False, True]

    def test_first_signal_never_add_on(self):
        assert mark_add_ons([_signal(1, SHORT)])[0].add_on is False

    def test_same_bar_compares_with_previous_bar(self):
        signals = [
            _signal(1, LONG),
            _signal(2, SHORT),
            _signal(2, LONG),
            _signal(3, LONG),
        ]
        marked = mark_add_ons(signals)
        # bar 2 compares with bar 1 (long); bar 3 with the last signal of bar 2 (long)
        assert [s.add_on for s in marked] == [False, False, True, True]

    def test_input_not_modified(self):
        signals = [_signal(1, LONG), _signal(2, LONG)]
        mark_add_ons(signals)
        assert not any(s.add_on for s in signals)

    def test_empty(self):
        assert mark_add_ons([]) == []


class TestFilterSignalsBySide:
    def test_all_returns_unchanged(self):
        signals = [_signal(1, LONG), _signal(2, SHORT)]
        assert filter_signals_by_side(signals, "all") == signals

    def test_long_keeps_only_long(self):
        signals = [_signal(1, LONG), _signal(2, SHORT)]
        assert [s.side for s in filter_signals_by_side(signals, "long")] == [LONG]

    def test_short_keeps_only_short(self):
        signals = [_signal(1, LONG), _signal(2, SHORT)]
        assert [s.side for s in filter_signals_by_side(signals, "short")] == [SHORT]
