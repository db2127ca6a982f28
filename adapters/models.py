"""
어댑터 공통 데이터 모델

Binance Futures REST 응답을 표준화한 값 타입.
모든 금액/수량/비율은 Decimal, 시간은 밀리초 타임스탬프(int).
모든 모델은 불변(frozen).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from core.types import OrderStatus, PositionSide


# -------------------------------------------------------------------------
# 공통
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class ResponseResult:
    """code/msg 형태의 단순 응답

    Attributes:
        code: 응답 코드 (200 = 성공)
        msg: 응답 메시지
    """

    code: int
    msg: str

    @property
    def is_success(self) -> bool:
        return self.code == 200


@dataclass(frozen=True)
class BatchOrderResult:
    """배치 주문/취소의 항목별 결과

    주문 성공 시 order, 실패 시 error 중 정확히 하나만 채워짐.
    """

    order: "Order | None" = None
    error: ResponseResult | None = None

    def __post_init__(self) -> None:
        if (self.order is None) == (self.error is None):
            raise ValueError("exactly one of order or error must be set")

    @property
    def ok(self) -> bool:
        return self.order is not None


# -------------------------------------------------------------------------
# 시장 데이터
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class RateLimit:
    """거래소 Rate Limit 규칙"""

    rate_limit_type: str
    interval: str
    interval_num: int
    limit: int


@dataclass(frozen=True)
class ExchangeSymbol:
    """심볼별 거래 규칙

    filters는 필터 타입별 구조가 달라 원본 dict 그대로 보존.
    """

    symbol: str
    status: str
    maint_margin_percent: Decimal
    required_margin_percent: Decimal
    base_asset: str
    quote_asset: str
    price_precision: int
    quantity_precision: int
    base_asset_precision: int
    quote_precision: int
    order_types: tuple[str, ...] = ()
    time_in_force: tuple[str, ...] = ()
    filters: tuple[dict[str, Any], ...] = ()

    def get_filter(self, filter_type: str) -> dict[str, Any] | None:
        """filterType으로 필터 조회 (예: PRICE_FILTER, LOT_SIZE)"""
        for item in self.filters:
            if item.get("filterType") == filter_type:
                return item
        return None


@dataclass(frozen=True)
class ExchangeInformation:
    """거래소 거래 규칙 및 심볼 정보"""

    timezone: str
    server_time: int
    rate_limits: tuple[RateLimit, ...] = ()
    exchange_filters: tuple[dict[str, Any], ...] = ()
    symbols: tuple[ExchangeSymbol, ...] = ()

    def get_symbol(self, symbol: str) -> ExchangeSymbol | None:
        for item in self.symbols:
            if item.symbol == symbol:
                return item
        return None


@dataclass(frozen=True)
class OrderBookEntry:
    """호가 한 단계"""

    price: Decimal
    qty: Decimal


@dataclass(frozen=True)
class OrderBook:
    """호가창

    bids는 가격 내림차순, asks는 가격 오름차순 (거래소 응답 순서).
    """

    last_update_id: int
    bids: tuple[OrderBookEntry, ...] = ()
    asks: tuple[OrderBookEntry, ...] = ()
    message_output_time: int | None = None
    transaction_time: int | None = None

    @property
    def best_bid(self) -> OrderBookEntry | None:
        return self.bids[0] if self.bids else None

    @property
    def best_ask(self) -> OrderBookEntry | None:
        return self.asks[0] if self.asks else None


@dataclass(frozen=True)
class Trade:
    """시장 체결 (recent / historical trades)"""

    id: int
    price: Decimal
    qty: Decimal
    quote_qty: Decimal
    time: int
    is_buyer_maker: bool


@dataclass(frozen=True)
class AggregateTrade:
    """집계 체결"""

    id: int
    price: Decimal
    qty: Decimal
    first_id: int
    last_id: int
    time: int
    is_buyer_maker: bool


@dataclass(frozen=True)
class Candlestick:
    """캔들스틱 (Kline)"""

    open_time: int
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal
    close_time: int
    quote_asset_volume: Decimal
    num_trades: int
    taker_buy_base_asset_volume: Decimal
    taker_buy_quote_asset_volume: Decimal


@dataclass(frozen=True)
class MarkPrice:
    """마크 가격 및 펀딩 정보 (premiumIndex)"""

    symbol: str
    mark_price: Decimal
    last_funding_rate: Decimal
    next_funding_time: int
    time: int
    index_price: Decimal | None = None


@dataclass(frozen=True)
class FundingRate:
    """펀딩비 이력"""

    symbol: str
    funding_rate: Decimal
    funding_time: int


@dataclass(frozen=True)
class PriceChangeTicker:
    """24시간 가격 변동 통계"""

    symbol: str
    price_change: Decimal
    price_change_percent: Decimal
    weighted_avg_price: Decimal
    last_price: Decimal
    last_qty: Decimal
    open_price: Decimal
    high_price: Decimal
    low_price: Decimal
    volume: Decimal
    quote_volume: Decimal
    open_time: int
    close_time: int
    first_id: int
    last_id: int
    count: int


@dataclass(frozen=True)
class SymbolPrice:
    """최신 가격"""

    symbol: str
    price: Decimal


@dataclass(frozen=True)
class SymbolOrderBook:
    """최우선 호가"""

    symbol: str
    bid_price: Decimal
    bid_qty: Decimal
    ask_price: Decimal
    ask_qty: Decimal


@dataclass(frozen=True)
class LiquidationOrder:
    """강제 청산 주문"""

    symbol: str
    price: Decimal
    orig_qty: Decimal
    executed_qty: Decimal
    average_price: Decimal
    status: str
    time_in_force: str
    order_type: str
    side: str
    time: int


@dataclass(frozen=True)
class OpenInterestStat:
    """미결제약정 통계"""

    symbol: str
    sum_open_interest: Decimal
    sum_open_interest_value: Decimal
    timestamp: int


@dataclass(frozen=True)
class CommonLongShortRatio:
    """롱/숏 비율 (계좌 또는 포지션 기준)"""

    symbol: str
    long_short_ratio: Decimal
    long_account: Decimal
    short_account: Decimal
    timestamp: int


@dataclass(frozen=True)
class TakerLongShortStat:
    """Taker 매수/매도 거래량 비율"""

    buy_sell_ratio: Decimal
    buy_vol: Decimal
    sell_vol: Decimal
    timestamp: int


# -------------------------------------------------------------------------
# 주문 / 계좌
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class Order:
    """주문 정보

    Attributes:
        order_id: 거래소 주문 ID
        client_order_id: 클라이언트 주문 ID
        symbol: 거래 심볼
        side: 주문 방향 (BUY/SELL)
        position_side: 포지션 방향 (BOTH/LONG/SHORT)
        order_type: 주문 유형 (MARKET/LIMIT/STOP_MARKET 등)
        status: 주문 상태
        orig_qty: 원래 주문 수량
        executed_qty: 체결된 수량
        cum_quote: 누적 체결 금액
        price: 지정가 (없으면 None)
        avg_price: 평균 체결가 (없으면 None)
        stop_price: 트리거 가격 (없으면 None)
        time_in_force: 주문 유효 기간
        reduce_only: 포지션 축소 전용 여부
        close_position: 전량 청산 주문 여부
        working_type: 트리거 가격 기준
        orig_type: 원래 주문 유형
        update_time: 마지막 업데이트 시간 (ms)
    """

    order_id: int
    client_order_id: str
    symbol: str
    side: str
    order_type: str
    status: str
    orig_qty: Decimal
    executed_qty: Decimal = Decimal("0")
    cum_quote: Decimal = Decimal("0")
    position_side: str = PositionSide.BOTH.value
    price: Decimal | None = None
    avg_price: Decimal | None = None
    stop_price: Decimal | None = None
    time_in_force: str | None = None
    reduce_only: bool = False
    close_position: bool = False
    working_type: str | None = None
    orig_type: str | None = None
    activate_price: Decimal | None = None
    price_rate: Decimal | None = None
    update_time: int | None = None

    @property
    def remaining_qty(self) -> Decimal:
        """잔여 수량"""
        return self.orig_qty - self.executed_qty

    @property
    def is_filled(self) -> bool:
        """완전 체결 여부"""
        return self.status == OrderStatus.FILLED.value

    @property
    def is_open(self) -> bool:
        """오픈 주문 여부 (NEW 또는 PARTIALLY_FILLED)"""
        return self.status in (
            OrderStatus.NEW.value,
            OrderStatus.PARTIALLY_FILLED.value,
        )


@dataclass(frozen=True)
class PositionMarginResult:
    """격리 마진 조정 결과"""

    amount: Decimal
    code: int
    msg: str
    type: int


@dataclass(frozen=True)
class WalletDeltaLog:
    """격리 마진 변경 이력"""

    symbol: str
    amount: Decimal
    asset: str
    type: int
    time: int
    position_side: str = PositionSide.BOTH.value


@dataclass(frozen=True)
class PositionMode:
    """포지션 모드 (True = Hedge Mode, False = One-way Mode)"""

    dual_side_position: bool


@dataclass(frozen=True)
class AccountBalance:
    """자산별 선물 계좌 잔고"""

    asset: str
    balance: Decimal
    cross_wallet_balance: Decimal
    cross_un_pnl: Decimal
    available_balance: Decimal
    max_withdraw_amount: Decimal
    account_alias: str = ""
    update_time: int | None = None


@dataclass(frozen=True)
class AccountAsset:
    """계좌 정보 내 자산 항목"""

    asset: str
    wallet_balance: Decimal
    unrealized_profit: Decimal
    margin_balance: Decimal
    maint_margin: Decimal
    initial_margin: Decimal
    position_initial_margin: Decimal
    open_order_initial_margin: Decimal
    max_withdraw_amount: Decimal


@dataclass(frozen=True)
class AccountPosition:
    """계좌 정보 내 포지션 항목"""

    symbol: str
    initial_margin: Decimal
    maint_margin: Decimal
    unrealized_profit: Decimal
    position_initial_margin: Decimal
    open_order_initial_margin: Decimal
    leverage: int
    isolated: bool
    entry_price: Decimal
    max_notional: Decimal
    position_side: str
    position_amt: Decimal


@dataclass(frozen=True)
class AccountInformation:
    """선물 계좌 정보"""

    can_deposit: bool
    can_trade: bool
    can_withdraw: bool
    fee_tier: int
    max_withdraw_amount: Decimal
    total_initial_margin: Decimal
    total_maint_margin: Decimal
    total_margin_balance: Decimal
    total_open_order_initial_margin: Decimal
    total_position_initial_margin: Decimal
    total_unrealized_profit: Decimal
    total_wallet_balance: Decimal
    update_time: int
    assets: tuple[AccountAsset, ...] = field(default_factory=tuple)
    positions: tuple[AccountPosition, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Leverage:
    """레버리지 변경 결과"""

    symbol: str
    leverage: int
    max_notional_value: Decimal


@dataclass(frozen=True)
class PositionRisk:
    """포지션 정보 (positionRisk)"""

    symbol: str
    position_amt: Decimal
    entry_price: Decimal
    mark_price: Decimal
    un_realized_profit: Decimal
    liquidation_price: Decimal
    leverage: int
    max_notional_value: Decimal
    margin_type: str
    isolated_margin: Decimal
    position_side: str

    @property
    def is_flat(self) -> bool:
        """포지션 없음 여부"""
        return self.position_amt == Decimal("0")


@dataclass(frozen=True)
class MyTrade:
    """계좌 체결 내역"""

    id: int
    order_id: int
    symbol: str
    side: str
    position_side: str
    price: Decimal
    qty: Decimal
    quote_qty: Decimal
    realized_pnl: Decimal
    commission: Decimal
    commission_asset: str
    time: int
    is_buyer: bool
    is_maker: bool
    margin_asset: str | None = None


@dataclass(frozen=True)
class Income:
    """수익/비용 이력"""

    symbol: str
    income_type: str
    income: Decimal
    asset: str
    time: int
    info: str = ""
    tran_id: int | None = None
    trade_id: str = ""
