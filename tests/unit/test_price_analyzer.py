"""
Unit tests for the price analyzer.
"""

import logging
from unittest.mock import Mock, call

import pytest

from crypto_tracker.analyzer import PriceAnalyzer, calculate_deviation
from crypto_tracker.config.models import TrackerConfig
from crypto_tracker.models import AlertCategory, AlertRecord, AnalyzerState
from crypto_tracker.moving_average import MovingAverageEngine
from crypto_tracker.notifications import AlertDispatcher
from crypto_tracker.storage import ColdArchive, TimeSeriesStore


class FixedAverage:
    """Stands in for the moving average engine with a settable value."""

    def __init__(self, value=None):
        self.value = value

    def get_current(self):
        return self.value


class TestCalculateDeviation:

    def test_positive_deviation(self):
        assert calculate_deviation(51000.0, 50000.0) == pytest.approx(0.02)

    def test_negative_deviation(self):
        assert calculate_deviation(49000.0, 50000.0) == pytest.approx(-0.02)


class TestPriceAnalyzer:
    """Test PriceAnalyzer deviation, extremes and digest cycles."""

    @pytest.fixture
    def store(self, tmp_path, clock):
        return TimeSeriesStore(archive=ColdArchive(str(tmp_path)), clock=clock)

    @pytest.fixture
    def sma(self):
        return FixedAverage(50000.0)

    @pytest.fixture
    def dispatcher(self):
        return Mock(spec=AlertDispatcher)

    @pytest.fixture
    def analyzer(self, store, sma, dispatcher, clock):
        return PriceAnalyzer(store, sma, dispatcher, config=TrackerConfig(), clock=clock)

    def insert_price(self, store, clock, make_point, price, high=60000.0, low=40000.0):
        ts = int(clock.now)
        store.insert(ts, make_point(ts, price=price, high=high, low=low))

    def alerts(self, dispatcher):
        return [c.args[1] for c in dispatcher.dispatch.call_args_list if c.args[0] == AlertCategory.ALERT]

    def test_deviation_at_threshold_fires(self, analyzer, store, dispatcher, clock, make_point):
        """Test a 2.0% deviation fires because the threshold is inclusive."""
        self.insert_price(store, clock, make_point, 51000.0)

        state = analyzer.analyze()

        expected = "Bitcoin price ($51000.00) is above SMA ($50000.00) by 2.00%"
        dispatcher.dispatch.assert_called_once_with(AlertCategory.ALERT, expected)
        assert state.last_alert == AlertRecord(message=expected, timestamp=int(clock.now))

    def test_deviation_below_threshold_is_silent(self, analyzer, store, dispatcher, clock, make_point):
        self.insert_price(store, clock, make_point, 50999.0)

        state = analyzer.analyze()

        dispatcher.dispatch.assert_not_called()
        assert state.last_alert is None

    def test_deviation_below_sma(self, analyzer, store, dispatcher, clock, make_point):
        self.insert_price(store, clock, make_point, 48500.0)

        analyzer.analyze()

        assert self.alerts(dispatcher) == ["Bitcoin price ($48500.00) is below SMA ($50000.00) by 3.00%"]

    def test_cooldown_suppresses_identical_alert(self, analyzer, store, dispatcher, clock, make_point):
        """Test the same alert text within the cooldown is sent only once."""
        self.insert_price(store, clock, make_point, 51000.0)
        analyzer.analyze()

        clock.advance(299)
        self.insert_price(store, clock, make_point, 51000.0)
        analyzer.analyze()
        assert dispatcher.dispatch.call_count == 1

        clock.advance(1)
        self.insert_price(store, clock, make_point, 51000.0)
        state = analyzer.analyze()
        assert dispatcher.dispatch.call_count == 2
        assert state.last_alert.timestamp == int(clock.now)

    def test_different_alert_text_is_not_suppressed(self, analyzer, store, dispatcher, clock, make_point):
        self.insert_price(store, clock, make_point, 51000.0)
        analyzer.analyze()

        clock.advance(1)
        self.insert_price(store, clock, make_point, 51500.0)
        analyzer.analyze()

        assert len(self.alerts(dispatcher)) == 2

    def test_suppressed_alert_keeps_original_timestamp(self, analyzer, store, clock, make_point):
        self.insert_price(store, clock, make_point, 51000.0)
        first = analyzer.analyze()

        clock.advance(100)
        self.insert_price(store, clock, make_point, 51000.0)
        second = analyzer.analyze()

        assert second.last_alert == first.last_alert

    def test_new_high_fires_every_cycle(self, analyzer, store, dispatcher, clock, make_point):
        """Test extremes alerts are never cooled down and leave dedup state alone."""
        self.insert_price(store, clock, make_point, 50100.0, high=50100.0)
        state = analyzer.analyze()

        clock.advance(1)
        self.insert_price(store, clock, make_point, 50100.0, high=50100.0)
        state = analyzer.analyze()

        expected = "New 24H HIGH: Bitcoin reached $50100.00"
        assert self.alerts(dispatcher) == [expected, expected]
        assert state == AnalyzerState()

    def test_new_low(self, analyzer, store, dispatcher, clock, make_point):
        self.insert_price(store, clock, make_point, 49900.0, low=49950.0)

        analyzer.analyze()

        assert self.alerts(dispatcher) == ["New 24H LOW: Bitcoin reached $49900.00"]

    def test_extremes_do_not_touch_dedup_state(self, analyzer, store, dispatcher, clock, make_point):
        """Test a deviation alert stays suppressed while a new high fires alongside it."""
        self.insert_price(store, clock, make_point, 51000.0, high=51000.0)
        first = analyzer.analyze()

        clock.advance(1)
        self.insert_price(store, clock, make_point, 51000.0, high=51000.0)
        second = analyzer.analyze()

        assert self.alerts(dispatcher) == [
            "Bitcoin price ($51000.00) is above SMA ($50000.00) by 2.00%",
            "New 24H HIGH: Bitcoin reached $51000.00",
            "New 24H HIGH: Bitcoin reached $51000.00",
        ]
        assert second.last_alert == first.last_alert

    def test_high_wins_when_price_equals_high_and_low(self, analyzer, store, dispatcher, clock, make_point):
        """Test a flat 24h range reports only the new high."""
        self.insert_price(store, clock, make_point, 50000.0, high=50000.0, low=50000.0)

        analyzer.analyze()

        assert self.alerts(dispatcher) == ["New 24H HIGH: Bitcoin reached $50000.00"]

    def test_zero_average_skips_deviation_only(self, analyzer, store, sma, dispatcher, clock, make_point, caplog):
        sma.value = 0.0
        self.insert_price(store, clock, make_point, 0.0, high=0.0, low=0.0)

        with caplog.at_level(logging.WARNING):
            state = analyzer.analyze()

        assert state == AnalyzerState()
        assert self.alerts(dispatcher) == ["New 24H HIGH: Bitcoin reached $0.00"]
        assert "moving average is zero" in caplog.text

    def test_skip_without_recent_price(self, analyzer, dispatcher, caplog):
        with caplog.at_level(logging.WARNING):
            state = analyzer.analyze()

        assert state == AnalyzerState()
        dispatcher.dispatch.assert_not_called()
        assert "No recent price data available" in caplog.text

    def test_skip_without_average(self, analyzer, store, sma, dispatcher, clock, make_point, caplog):
        sma.value = None
        self.insert_price(store, clock, make_point, 70000.0, high=70000.0)

        with caplog.at_level(logging.WARNING):
            analyzer.analyze()

        dispatcher.dispatch.assert_not_called()
        assert "Moving average not available yet" in caplog.text

    def test_stale_points_are_not_analyzed(self, analyzer, store, dispatcher, clock, make_point):
        self.insert_price(store, clock, make_point, 60000.0)
        clock.advance(61)

        analyzer.analyze()

        dispatcher.dispatch.assert_not_called()

    def test_uses_newest_point(self, analyzer, store, dispatcher, clock, make_point):
        now = int(clock.now)
        store.insert(now - 30, make_point(now - 30, price=60000.0, high=70000.0))
        store.insert(now - 1, make_point(now - 1, price=50000.0, high=70000.0))

        analyzer.analyze()

        dispatcher.dispatch.assert_not_called()

    def test_digest(self, analyzer, store, dispatcher, clock, make_point):
        ts = int(clock.now)
        store.insert(ts, make_point(ts, price=50123.456, high=51000.0, low=49000.5, volume=1234.5))

        content = analyzer.send_digest()

        assert content == (
            "Current Price: $50123.46\n"
            "24h High: $51000.00\n"
            "24h Low: $49000.50\n"
            "24h Volume: 1234.50 BTC\n"
            "5min SMA: $50000.00"
        )
        dispatcher.dispatch.assert_called_once_with(AlertCategory.DIGEST, content)

    def test_digest_ignores_cooldown(self, analyzer, store, dispatcher, clock, make_point):
        self.insert_price(store, clock, make_point, 50000.0)
        analyzer.send_digest()
        analyzer.send_digest()

        assert dispatcher.dispatch.call_count == 2
        assert analyzer.state == AnalyzerState()

    def test_digest_skipped_without_data(self, analyzer, dispatcher):
        assert analyzer.send_digest() is None
        dispatcher.dispatch.assert_not_called()

    def test_custom_threshold_and_cooldown(self, store, sma, dispatcher, clock, make_point):
        config = TrackerConfig(deviation_threshold=0.05, alert_cooldown_seconds=10)
        analyzer = PriceAnalyzer(store, sma, dispatcher, config=config, clock=clock)

        self.insert_price(store, clock, make_point, 52000.0)
        analyzer.analyze()
        dispatcher.dispatch.assert_not_called()

        self.insert_price(store, clock, make_point, 53000.0)
        analyzer.analyze()
        clock.advance(10)
        self.insert_price(store, clock, make_point, 53000.0)
        analyzer.analyze()
        assert dispatcher.dispatch.call_count == 2

    def test_handle_analysis_is_state_in_state_out(self, analyzer, store, dispatcher, clock, make_point):
        """Test the handler returns the state it was given when it suppresses an alert."""
        self.insert_price(store, clock, make_point, 51000.0)
        message = "Bitcoin price ($51000.00) is above SMA ($50000.00) by 2.00%"
        state = AnalyzerState(last_alert=AlertRecord(message=message, timestamp=int(clock.now) - 5))

        new_state = analyzer.handle_analysis(state, int(clock.now))

        assert new_state is state
        dispatcher.dispatch.assert_not_called()
        # the analyzer's own state is not touched by the pure handler
        assert analyzer.state == AnalyzerState()

    def test_works_with_real_moving_average(self, store, dispatcher, clock, make_point):
        engine = MovingAverageEngine(store, window_seconds=300, clock=clock)
        analyzer = PriceAnalyzer(store, engine, dispatcher, clock=clock)
        now = int(clock.now)
        for offset in (40, 30, 20, 10):
            store.insert(now - offset, make_point(now - offset, price=50000.0))
        store.insert(now, make_point(now, price=56000.0, high=60000.0))

        engine.recalculate()
        analyzer.analyze()

        assert engine.get_current() == 51200.0
        assert dispatcher.dispatch.call_args_list == [
            call(AlertCategory.ALERT, "Bitcoin price ($56000.00) is above SMA ($51200.00) by 9.38%"),
        ]
