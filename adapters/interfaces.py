"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from decimal import Decimal
from typing import Any, Protocol, Sequence, runtime_checkable

from core.types import (
    CandlestickInterval,
    IncomeType,
    MarginType,
    NewOrderRespType,
    OrderSide,
    OrderType,
    PeriodType,
    PositionMarginType,
    PositionSide,
    TimeInForce,
    WorkingType,
)
from adapters.models import (
    AccountBalance,
    AccountInformation,
    AggregateTrade,
    BatchOrderResult,
    Candlestick,
    CommonLongShortRatio,
    ExchangeInformation,
    FundingRate,
    Income,
    Leverage,
    LiquidationOrder,
    MarkPrice,
    MyTrade,
    OpenInterestStat,
    Order,
    OrderBook,
    PositionMarginResult,
    PositionMode,
    PositionRisk,
    PriceChangeTicker,
    ResponseResult,
    SymbolOrderBook,
    SymbolPrice,
    TakerLongShortStat,
    Trade,
    WalletDeltaLog,
)


@runtime_checkable
class ISyncRequestClient(Protocol):
    """USDT-M Futures 동기 REST 클라이언트 인터페이스

    모든 메서드는 응답을 받을 때까지 블로킹.
    금액/수량은 반드시 Decimal 타입 사용.
    실패 시 BinanceClientError 하위 타입 발생.
    """

    # -------------------------------------------------------------------------
    # 시장 데이터
    # -------------------------------------------------------------------------

    def get_exchange_information(self) -> ExchangeInformation:
        """거래 규칙 및 심볼 정보"""
        ...

    def get_order_book(self, symbol: str, limit: int | None = None) -> OrderBook:
        """호가창"""
        ...

    def get_recent_trades(self, symbol: str, limit: int | None = None) -> list[Trade]:
        ...

    def get_old_trades(
        self,
        symbol: str,
        limit: int | None = None,
        from_id: int | None = None,
    ) -> list[Trade]:
        ...

    def get_aggregate_trades(
        self,
        symbol: str,
        from_id: int | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[AggregateTrade]:
        ...

    def get_candlestick(
        self,
        symbol: str,
        interval: CandlestickInterval | str,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[Candlestick]:
        ...

    def get_mark_price(self, symbol: str | None = None) -> list[MarkPrice]:
        """마크 가격 (symbol 지정 시에도 1개짜리 리스트)"""
        ...

    def get_funding_rate(
        self,
        symbol: str | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[FundingRate]:
        ...

    def get_24hr_ticker_price_change(self, symbol: str | None = None) -> list[PriceChangeTicker]:
        ...

    def get_symbol_price_ticker(self, symbol: str | None = None) -> list[SymbolPrice]:
        ...

    def get_symbol_order_book_ticker(self, symbol: str | None = None) -> list[SymbolOrderBook]:
        ...

    def get_liquidation_orders(
        self,
        symbol: str | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[LiquidationOrder]:
        ...

    def get_open_interest_stat(
        self,
        symbol: str,
        period: PeriodType | str,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[OpenInterestStat]:
        ...

    def get_top_trader_account_ratio(
        self,
        symbol: str,
        period: PeriodType | str,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[CommonLongShortRatio]:
        ...

    def get_top_trader_position_ratio(
        self,
        symbol: str,
        period: PeriodType | str,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[CommonLongShortRatio]:
        ...

    def get_global_account_ratio(
        self,
        symbol: str,
        period: PeriodType | str,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[CommonLongShortRatio]:
        ...

    def get_taker_long_short_ratio(
        self,
        symbol: str,
        period: PeriodType | str,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[TakerLongShortStat]:
        ...

    # -------------------------------------------------------------------------
    # 주문
    # -------------------------------------------------------------------------

    def post_order(
        self,
        symbol: str,
        side: OrderSide | str,
        order_type: OrderType | str,
        position_side: PositionSide | str | None = None,
        time_in_force: TimeInForce | str | None = None,
        quantity: str | Decimal | None = None,
        price: str | Decimal | None = None,
        reduce_only: bool | str | None = None,
        new_client_order_id: str | None = None,
        stop_price: str | Decimal | None = None,
        working_type: WorkingType | str | None = None,
        new_order_resp_type: NewOrderRespType | str | None = None,
        close_position: bool | str | None = None,
        *,
        timestamp: int | None = None,
    ) -> Order:
        """주문 생성

        Raises:
            OrderError: 주문 거부
        """
        ...

    def post_batch_orders(
        self,
        batch_orders: str | Sequence[dict[str, Any]],
        *,
        timestamp: int | None = None,
    ) -> list[BatchOrderResult]:
        """배치 주문 (항목별 성공/실패)"""
        ...

    def cancel_order(
        self,
        symbol: str,
        order_id: int | None = None,
        orig_client_order_id: str | None = None,
        *,
        timestamp: int | None = None,
    ) -> Order:
        ...

    def cancel_all_open_orders(self, symbol: str, *, timestamp: int | None = None) -> ResponseResult:
        ...

    def batch_cancel_orders(
        self,
        symbol: str,
        order_id_list: str | Sequence[int] | None = None,
        orig_client_order_id_list: str | Sequence[str] | None = None,
        *,
        timestamp: int | None = None,
    ) -> list[BatchOrderResult]:
        ...

    def get_order(
        self,
        symbol: str,
        order_id: int | None = None,
        orig_client_order_id: str | None = None,
        *,
        timestamp: int | None = None,
    ) -> Order:
        ...

    def get_open_orders(self, symbol: str | None = None, *, timestamp: int | None = None) -> list[Order]:
        ...

    def get_all_orders(
        self,
        symbol: str,
        order_id: int | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
        *,
        timestamp: int | None = None,
    ) -> list[Order]:
        ...

    # -------------------------------------------------------------------------
    # 계좌 / 포지션
    # -------------------------------------------------------------------------

    def change_position_side(self, dual: bool, *, timestamp: int | None = None) -> ResponseResult:
        ...

    def get_position_side(self, *, timestamp: int | None = None) -> PositionMode:
        ...

    def change_margin_type(
        self,
        symbol: str,
        margin_type: MarginType | str,
        *,
        timestamp: int | None = None,
    ) -> ResponseResult:
        ...

    def add_isolated_position_margin(
        self,
        symbol: str,
        type: PositionMarginType | int,
        amount: str | Decimal,
        position_side: PositionSide | str | None = None,
        *,
        timestamp: int | None = None,
    ) -> PositionMarginResult:
        ...

    def get_position_margin_history(
        self,
        symbol: str,
        type: PositionMarginType | int | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
        *,
        timestamp: int | None = None,
    ) -> list[WalletDeltaLog]:
        ...

    def change_initial_leverage(
        self,
        symbol: str,
        leverage: int,
        *,
        timestamp: int | None = None,
    ) -> Leverage:
        ...

    def get_balance(self, *, timestamp: int | None = None) -> list[AccountBalance]:
        ...

    def get_account_information(self, *, timestamp: int | None = None) -> AccountInformation:
        ...

    def get_position_risk(
        self,
        symbol: str | None = None,
        *,
        timestamp: int | None = None,
    ) -> list[PositionRisk]:
        ...

    def get_account_trades(
        self,
        symbol: str,
        start_time: int | None = None,
        end_time: int | None = None,
        from_id: int | None = None,
        limit: int | None = None,
        *,
        timestamp: int | None = None,
    ) -> list[MyTrade]:
        ...

    def get_income_history(
        self,
        symbol: str | None = None,
        income_type: IncomeType | str | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
        *,
        timestamp: int | None = None,
    ) -> list[Income]:
        ...

    # -------------------------------------------------------------------------
    # listenKey 관리 (WebSocket User Data Stream용)
    # -------------------------------------------------------------------------

    def start_user_data_stream(self, *, timestamp: int | None = None) -> str:
        """listenKey 생성

        Returns:
            listenKey 문자열
        """
        ...

    def keep_user_data_stream(self, listen_key: str, *, timestamp: int | None = None) -> None:
        """listenKey 유효기간 연장 (30분마다 호출 필요)"""
        ...

    def close_user_data_stream(self, listen_key: str, *, timestamp: int | None = None) -> None:
        """listenKey 삭제"""
        ...
