"""
타입 정의 모듈

요청 파라미터와 엔드포인트 기술자에 쓰이는 Enum 정의
모든 Enum은 str을 상속하여 value가 그대로 wire 문자열이 됨
"""

from enum import Enum


class TradingMode(str, Enum):
    """거래 모드 (실거래 / 테스트넷)"""

    PRODUCTION = "production"
    TESTNET = "testnet"


class HttpMethod(str, Enum):
    """HTTP 메서드"""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class Security(str, Enum):
    """엔드포인트 보안 유형

    - NONE: 공개 엔드포인트 (헤더/서명 없음)
    - API_KEY: X-MBX-APIKEY 헤더만 필요 (MARKET_DATA)
    - SIGNED: 헤더 + timestamp + HMAC-SHA256 서명 (TRADE/USER_DATA)
    """

    NONE = "NONE"
    API_KEY = "API_KEY"
    SIGNED = "SIGNED"


class OrderSide(str, Enum):
    """주문 방향"""

    BUY = "BUY"
    SELL = "SELL"


class PositionSide(str, Enum):
    """포지션 방향 (Hedge Mode용)"""

    LONG = "LONG"
    SHORT = "SHORT"
    BOTH = "BOTH"


class OrderType(str, Enum):
    """주문 유형"""

    LIMIT = "LIMIT"
    MARKET = "MARKET"
    STOP = "STOP"
    STOP_MARKET = "STOP_MARKET"
    TAKE_PROFIT = "TAKE_PROFIT"
    TAKE_PROFIT_MARKET = "TAKE_PROFIT_MARKET"
    TRAILING_STOP_MARKET = "TRAILING_STOP_MARKET"


class OrderStatus(str, Enum):
    """주문 상태"""

    NEW = "NEW"
    PARTIALLY_FILLED = "PARTIALLY_FILLED"
    FILLED = "FILLED"
    CANCELED = "CANCELED"  # Binance API 사용 (미국식 철자)
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"


class TimeInForce(str, Enum):
    """주문 유효 기간"""

    GTC = "GTC"  # Good Till Cancel
    IOC = "IOC"  # Immediate Or Cancel
    FOK = "FOK"  # Fill Or Kill
    GTX = "GTX"  # Post Only


class WorkingType(str, Enum):
    """STOP 주문 트리거 가격 기준"""

    MARK_PRICE = "MARK_PRICE"
    CONTRACT_PRICE = "CONTRACT_PRICE"


class NewOrderRespType(str, Enum):
    """주문 응답 유형"""

    ACK = "ACK"
    RESULT = "RESULT"


class MarginType(str, Enum):
    """마진 타입"""

    ISOLATED = "ISOLATED"
    CROSSED = "CROSSED"


class PositionMarginType(int, Enum):
    """격리 마진 조정 유형 (1: 추가, 2: 감소)"""

    ADD = 1
    REDUCE = 2


class CandlestickInterval(str, Enum):
    """캔들스틱 간격"""

    ONE_MINUTE = "1m"
    THREE_MINUTES = "3m"
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    HALF_HOURLY = "30m"
    HOURLY = "1h"
    TWO_HOURLY = "2h"
    FOUR_HOURLY = "4h"
    SIX_HOURLY = "6h"
    EIGHT_HOURLY = "8h"
    TWELVE_HOURLY = "12h"
    DAILY = "1d"
    THREE_DAILY = "3d"
    WEEKLY = "1w"
    MONTHLY = "1M"


class PeriodType(str, Enum):
    """시장 통계(/futures/data) 집계 기간"""

    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    HALF_HOURLY = "30m"
    HOURLY = "1h"
    TWO_HOURLY = "2h"
    FOUR_HOURLY = "4h"
    SIX_HOURLY = "6h"
    TWELVE_HOURLY = "12h"
    DAILY = "1d"


class IncomeType(str, Enum):
    """수익/비용 유형"""

    TRANSFER = "TRANSFER"
    WELCOME_BONUS = "WELCOME_BONUS"
    REALIZED_PNL = "REALIZED_PNL"
    FUNDING_FEE = "FUNDING_FEE"
    COMMISSION = "COMMISSION"
    INSURANCE_CLEAR = "INSURANCE_CLEAR"
