"""
core/types.py 테스트

모든 Enum의 value가 Binance wire 문자열과 일치하는지 확인
"""

from core.types import (
    CandlestickInterval,
    HttpMethod,
    MarginType,
    OrderSide,
    OrderStatus,
    OrderType,
    PeriodType,
    PositionMarginType,
    PositionSide,
    Security,
    TimeInForce,
    TradingMode,
)


class TestTradingMode:
    """TradingMode 테스트"""

    def test_values(self) -> None:
        """값 확인"""
        assert TradingMode.PRODUCTION.value == "production"
        assert TradingMode.TESTNET.value == "testnet"

    def test_from_string(self) -> None:
        """문자열에서 생성"""
        assert TradingMode("production") == TradingMode.PRODUCTION
        assert TradingMode("testnet") == TradingMode.TESTNET


class TestSecurity:
    """Security 테스트"""

    def test_members(self) -> None:
        assert [s.value for s in Security] == ["NONE", "API_KEY", "SIGNED"]


class TestWireValues:
    """요청 파라미터 Enum 값"""

    def test_order_enums(self) -> None:
        assert OrderSide.BUY.value == "BUY"
        assert PositionSide.BOTH.value == "BOTH"
        assert OrderType.TRAILING_STOP_MARKET.value == "TRAILING_STOP_MARKET"
        assert OrderStatus.CANCELED.value == "CANCELED"
        assert TimeInForce.GTX.value == "GTX"

    def test_http_method(self) -> None:
        assert HttpMethod.DELETE.value == "DELETE"

    def test_margin_type(self) -> None:
        assert MarginType.CROSSED.value == "CROSSED"
        assert PositionMarginType.ADD == 1
        assert PositionMarginType.REDUCE == 2

    def test_candlestick_interval(self) -> None:
        """분/월 구분 (1m vs 1M)"""
        assert CandlestickInterval.ONE_MINUTE.value == "1m"
        assert CandlestickInterval.MONTHLY.value == "1M"
        assert CandlestickInterval("4h") == CandlestickInterval.FOUR_HOURLY

    def test_period_type(self) -> None:
        assert PeriodType.FIVE_MINUTES.value == "5m"
        assert PeriodType.DAILY.value == "1d"
