"""
Binance USDT-M Futures 엔드포인트 기술자

엔드포인트마다 HTTP 메서드, 경로, 보안 유형, 파라미터 스키마(전송 순서),
응답 파서를 한 곳에 정의. 요청 생성 로직은 디스패처 하나에만 존재.
"""

from dataclasses import dataclass
from typing import Any, Callable

from core.types import HttpMethod, Security
from adapters.binance import models as m


@dataclass(frozen=True)
class Endpoint:
    """엔드포인트 기술자

    Attributes:
        name: 논리 이름 (로깅용)
        method: HTTP 메서드
        path: API 경로
        security: 보안 유형 (NONE / API_KEY / SIGNED)
        params: 허용 파라미터 (wire 이름, 직렬화 순서)
        required: 필수 파라미터
        parser: 응답(또는 항목) 변환 함수
        many: 응답이 배열인지 여부 (단일 객체 응답은 1개짜리 리스트로 변환)
    """

    name: str
    method: HttpMethod
    path: str
    security: Security
    parser: Callable[[Any], Any]
    params: tuple[str, ...] = ()
    required: tuple[str, ...] = ()
    many: bool = False

    def __post_init__(self) -> None:
        missing = set(self.required) - set(self.params)
        if missing:
            raise ValueError(f"{self.name}: required params not in schema: {sorted(missing)}")
        if len(set(self.params)) != len(self.params):
            raise ValueError(f"{self.name}: duplicate params in schema")

    @property
    def is_signed(self) -> bool:
        return self.security == Security.SIGNED

    @property
    def needs_api_key(self) -> bool:
        return self.security != Security.NONE


GET = HttpMethod.GET
POST = HttpMethod.POST
PUT = HttpMethod.PUT
DELETE = HttpMethod.DELETE

_RANGE = ("startTime", "endTime", "limit")
_STATS = ("symbol", "period") + _RANGE


def _public(name: str, method: HttpMethod, path: str, parser: Callable[[Any], Any], **kwargs: Any) -> Endpoint:
    return Endpoint(name, method, path, Security.NONE, parser, **kwargs)


def _signed(name: str, method: HttpMethod, path: str, parser: Callable[[Any], Any], **kwargs: Any) -> Endpoint:
    return Endpoint(name, method, path, Security.SIGNED, parser, **kwargs)


class Endpoints:
    """엔드포인트 테이블"""

    # -------------------------------------------------------------------------
    # 시장 데이터 (공개)
    # -------------------------------------------------------------------------

    PING = _public("ping", GET, "/fapi/v1/ping", m.parse_none)
    SERVER_TIME = _public("server_time", GET, "/fapi/v1/time", m.parse_server_time)
    EXCHANGE_INFORMATION = _public(
        "exchange_information", GET, "/fapi/v1/exchangeInfo", m.parse_exchange_information,
    )
    ORDER_BOOK = _public(
        "order_book", GET, "/fapi/v1/depth", m.parse_order_book,
        params=("symbol", "limit"), required=("symbol",),
    )
    RECENT_TRADES = _public(
        "recent_trades", GET, "/fapi/v1/trades", m.parse_trade,
        params=("symbol", "limit"), required=("symbol",), many=True,
    )
    OLD_TRADES = Endpoint(
        "old_trades", GET, "/fapi/v1/historicalTrades", Security.API_KEY, m.parse_trade,
        params=("symbol", "limit", "fromId"), required=("symbol",), many=True,
    )
    AGGREGATE_TRADES = _public(
        "aggregate_trades", GET, "/fapi/v1/aggTrades", m.parse_aggregate_trade,
        params=("symbol", "fromId") + _RANGE, required=("symbol",), many=True,
    )
    CANDLESTICK = _public(
        "candlestick", GET, "/fapi/v1/klines", m.parse_candlestick,
        params=("symbol", "interval") + _RANGE, required=("symbol", "interval"), many=True,
    )
    MARK_PRICE = _public(
        "mark_price", GET, "/fapi/v1/premiumIndex", m.parse_mark_price,
        params=("symbol",), many=True,
    )
    FUNDING_RATE = _public(
        "funding_rate", GET, "/fapi/v1/fundingRate", m.parse_funding_rate,
        params=("symbol",) + _RANGE, many=True,
    )
    TICKER_24HR = _public(
        "ticker_24hr", GET, "/fapi/v1/ticker/24hr", m.parse_price_change_ticker,
        params=("symbol",), many=True,
    )
    TICKER_PRICE = _public(
        "ticker_price", GET, "/fapi/v1/ticker/price", m.parse_symbol_price,
        params=("symbol",), many=True,
    )
    BOOK_TICKER = _public(
        "book_ticker", GET, "/fapi/v1/ticker/bookTicker", m.parse_symbol_order_book,
        params=("symbol",), many=True,
    )
    LIQUIDATION_ORDERS = _public(
        "liquidation_orders", GET, "/fapi/v1/allForceOrders", m.parse_liquidation_order,
        params=("symbol",) + _RANGE, many=True,
    )
    OPEN_INTEREST_STAT = _public(
        "open_interest_stat", GET, "/futures/data/openInterestHist", m.parse_open_interest_stat,
        params=_STATS, required=("symbol", "period"), many=True,
    )
    TOP_TRADER_ACCOUNT_RATIO = _public(
        "top_trader_account_ratio", GET, "/futures/data/topLongShortAccountRatio",
        m.parse_long_short_ratio,
        params=_STATS, required=("symbol", "period"), many=True,
    )
    TOP_TRADER_POSITION_RATIO = _public(
        "top_trader_position_ratio", GET, "/futures/data/topLongShortPositionRatio",
        m.parse_long_short_ratio,
        params=_STATS, required=("symbol", "period"), many=True,
    )
    GLOBAL_ACCOUNT_RATIO = _public(
        "global_account_ratio", GET, "/futures/data/globalLongShortAccountRatio",
        m.parse_long_short_ratio,
        params=_STATS, required=("symbol", "period"), many=True,
    )
    TAKER_LONG_SHORT_RATIO = _public(
        "taker_long_short_ratio", GET, "/futures/data/takerlongshortRatio",
        m.parse_taker_long_short_stat,
        params=_STATS, required=("symbol", "period"), many=True,
    )

    # -------------------------------------------------------------------------
    # 주문 (서명)
    # -------------------------------------------------------------------------

    NEW_ORDER = _signed(
        "new_order", POST, "/fapi/v1/order", m.parse_order,
        params=(
            "symbol", "side", "positionSide", "type", "timeInForce", "quantity",
            "price", "reduceOnly", "newClientOrderId", "stopPrice", "workingType",
            "newOrderRespType", "closePosition",
        ),
        required=("symbol", "side", "type"),
    )
    BATCH_ORDERS = _signed(
        "batch_orders", POST, "/fapi/v1/batchOrders", m.parse_batch_item,
        params=("batchOrders",), required=("batchOrders",), many=True,
    )
    CANCEL_ORDER = _signed(
        "cancel_order", DELETE, "/fapi/v1/order", m.parse_order,
        params=("symbol", "orderId", "origClientOrderId"), required=("symbol",),
    )
    CANCEL_ALL_OPEN_ORDERS = _signed(
        "cancel_all_open_orders", DELETE, "/fapi/v1/allOpenOrders", m.parse_response_result,
        params=("symbol",), required=("symbol",),
    )
    BATCH_CANCEL_ORDERS = _signed(
        "batch_cancel_orders", DELETE, "/fapi/v1/batchOrders", m.parse_batch_item,
        params=("symbol", "orderIdList", "origClientOrderIdList"), required=("symbol",), many=True,
    )
    QUERY_ORDER = _signed(
        "query_order", GET, "/fapi/v1/order", m.parse_order,
        params=("symbol", "orderId", "origClientOrderId"), required=("symbol",),
    )
    OPEN_ORDERS = _signed(
        "open_orders", GET, "/fapi/v1/openOrders", m.parse_order,
        params=("symbol",), many=True,
    )
    ALL_ORDERS = _signed(
        "all_orders", GET, "/fapi/v1/allOrders", m.parse_order,
        params=("symbol", "orderId") + _RANGE, required=("symbol",), many=True,
    )

    # -------------------------------------------------------------------------
    # 계좌 / 포지션 (서명)
    # -------------------------------------------------------------------------

    CHANGE_POSITION_SIDE = _signed(
        "change_position_side", POST, "/fapi/v1/positionSide/dual", m.parse_response_result,
        params=("dualSidePosition",), required=("dualSidePosition",),
    )
    POSITION_SIDE = _signed(
        "position_side", GET, "/fapi/v1/positionSide/dual", m.parse_position_mode,
    )
    CHANGE_MARGIN_TYPE = _signed(
        "change_margin_type", POST, "/fapi/v1/marginType", m.parse_response_result,
        params=("symbol", "marginType"), required=("symbol", "marginType"),
    )
    ADD_POSITION_MARGIN = _signed(
        "add_position_margin", POST, "/fapi/v1/positionMargin", m.parse_position_margin_result,
        params=("symbol", "positionSide", "amount", "type"), required=("symbol", "amount", "type"),
    )
    POSITION_MARGIN_HISTORY = _signed(
        "position_margin_history", GET, "/fapi/v1/positionMargin/history", m.parse_wallet_delta_log,
        params=("symbol", "type") + _RANGE, required=("symbol",), many=True,
    )
    BALANCE = _signed(
        "balance", GET, "/fapi/v2/balance", m.parse_account_balance, many=True,
    )
    ACCOUNT_INFORMATION = _signed(
        "account_information", GET, "/fapi/v2/account", m.parse_account_information,
    )
    CHANGE_LEVERAGE = _signed(
        "change_leverage", POST, "/fapi/v1/leverage", m.parse_leverage,
        params=("symbol", "leverage"), required=("symbol", "leverage"),
    )
    POSITION_RISK = _signed(
        "position_risk", GET, "/fapi/v2/positionRisk", m.parse_position_risk,
        params=("symbol",), many=True,
    )
    ACCOUNT_TRADES = _signed(
        "account_trades", GET, "/fapi/v1/userTrades", m.parse_my_trade,
        params=("symbol", "startTime", "endTime", "fromId", "limit"), required=("symbol",), many=True,
    )
    INCOME_HISTORY = _signed(
        "income_history", GET, "/fapi/v1/income", m.parse_income,
        params=("symbol", "incomeType") + _RANGE, many=True,
    )

    # -------------------------------------------------------------------------
    # User Data Stream (listenKey)
    # -------------------------------------------------------------------------

    START_USER_STREAM = _signed(
        "start_user_stream", POST, "/fapi/v1/listenKey", m.parse_listen_key,
    )
    KEEP_USER_STREAM = _signed(
        "keep_user_stream", PUT, "/fapi/v1/listenKey", m.parse_none,
        params=("listenKey",), required=("listenKey",),
    )
    CLOSE_USER_STREAM = _signed(
        "close_user_stream", DELETE, "/fapi/v1/listenKey", m.parse_none,
        params=("listenKey",), required=("listenKey",),
    )

    @classmethod
    def all(cls) -> list[Endpoint]:
        """정의된 모든 엔드포인트"""
        return [value for value in vars(cls).values() if isinstance(value, Endpoint)]
