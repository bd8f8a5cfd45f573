"""
Unit tests for moving average indicators

Tests with hand-calculated values to verify correctness
"""

import pytest

from domain.indicators.moving_averages import PriceWindow, calculate_sma, determine_ma_cross


@pytest.mark.unit
class TestSMA:
    """Test Simple Moving Average with known values"""

    def test_sma_hand_calculated(self):
        """SMA(3) of [1..5] = (3 + 4 + 5) / 3"""
        assert calculate_sma([1, 2, 3, 4, 5], 3) == 4.0

    def test_sma_uses_tail_only(self):
        prices = [100, 102, 101, 103, 105, 107, 106, 108, 110, 109]

        # (110 + 109 + 108) / 3 = 109.0
        assert calculate_sma(prices, 3) == pytest.approx(109.0)

    def test_sma_insufficient_data(self):
        """Fewer prices than the period → 0.0"""
        assert calculate_sma([1, 2, 3, 4, 5], 10) == 0.0

    def test_sma_empty(self):
        assert calculate_sma([], 3) == 0.0

    def test_sma_full_window(self):
        assert calculate_sma([2, 4, 6], 3) == 4.0


@pytest.mark.unit
class TestPriceWindow:
    """Test bounded price buffer"""

    def test_evicts_oldest_when_full(self):
        window = PriceWindow(capacity=3)
        for price in (1.0, 2.0, 3.0, 4.0):
            window.add(price)

        assert len(window) == 3
        assert list(window.prices) == [2.0, 3.0, 4.0]
        assert window.sma(3) == 3.0

    def test_last(self):
        window = PriceWindow(capacity=5)
        assert window.last is None

        window.add(10.0)
        window.add(11.0)
        assert window.last == 11.0

    def test_sma_before_period_is_zero(self):
        window = PriceWindow(capacity=30)
        for price in range(9):
            window.add(float(price))

        assert window.sma(10) == 0.0
        window.add(9.0)
        assert window.sma(10) == 4.5


@pytest.mark.unit
class TestMACross:
    """Test crossover detection"""

    def test_golden_cross(self):
        assert determine_ma_cross(100.0, 100.0, 101.0, 100.3) == 1

    def test_golden_cross_from_below(self):
        assert determine_ma_cross(99.0, 100.0, 100.5, 100.0) == 1

    def test_death_cross(self):
        assert determine_ma_cross(110.0, 110.0, 109.0, 109.7) == -1

    def test_no_cross_when_fast_stays_above(self):
        assert determine_ma_cross(101.0, 100.0, 102.0, 100.5) == 0

    def test_no_cross_when_lines_equal(self):
        assert determine_ma_cross(110.0, 110.0, 110.0, 110.0) == 0

    def test_no_cross_before_warmup(self):
        """Both averages 0.0 until enough prices exist"""
        assert determine_ma_cross(0.0, 0.0, 0.0, 0.0) == 0
