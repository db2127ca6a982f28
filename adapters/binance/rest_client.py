"""
Binance Futures REST API 클라이언트 (동기)

모든 메서드는 REST 응답을 받을 때까지 블로킹된다.
실패/타임아웃 시 adapters.binance.errors의 BinanceClientError 하위 타입 발생.
ISyncRequestClient Protocol 준수.
"""

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Sequence

import httpx

from core.config.loader import Credentials, RequestOptions, load_client_config
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
from adapters.binance.dispatcher import RequestDispatcher, serialize_value
from adapters.binance.endpoints import Endpoint, Endpoints
from adapters.binance.errors import ExchangeError, OrderError, RateLimitError
from adapters.binance.rate_limiter import RateLimitTracker

logger = logging.getLogger(__name__)

Amount = str | Decimal | float


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def _encode_batch_orders(batch_orders: str | Sequence[dict[str, Any]]) -> str:
    """batchOrders 파라미터 직렬화 (문자열이면 그대로)

    각 주문의 값은 wire 문자열로 변환, None 값은 제외.
    """
    if isinstance(batch_orders, str):
        if not batch_orders.strip():
            raise ValueError("batch_orders must not be empty")
        return batch_orders

    orders = [
        {key: serialize_value(value) for key, value in order.items() if value is not None}
        for order in batch_orders
    ]
    if not orders:
        raise ValueError("batch_orders must not be empty")
    return _compact_json(orders)


def _encode_id_list(values: str | Sequence[Any] | None) -> str | None:
    if values is None or isinstance(values, str):
        return values
    return _compact_json(list(values))


class BinanceRestClient:
    """Binance USDT-M Futures 동기 REST 클라이언트

    생성자 하나로 공개 전용 / 인증 / 옵션 지정 생성을 모두 처리.
    인스턴스는 여러 스레드에서 공유 가능 (Rate Limit 스냅샷만 락으로 갱신).

    Args:
        api_key: API 키 (공개 엔드포인트만 쓰면 생략)
        api_secret: API 시크릿
        options: 요청 옵션 (None이면 기본값)
        transport: httpx 전송 계층 교체용 (테스트)

    사용 예:
        with BinanceRestClient("key", "secret") as client:
            book = client.get_order_book("BTCUSDT", limit=5)
    """

    def __init__(
        self,
        api_key: str = "",
        api_secret: str = "",
        options: RequestOptions | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.credentials = Credentials(api_key=api_key, api_secret=api_secret)
        self.options = options or RequestOptions()
        self._dispatcher = RequestDispatcher(self.credentials, self.options, transport=transport)

    @classmethod
    def from_config(
        cls,
        path: Path | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> "BinanceRestClient":
        """secrets.yaml 설정으로 클라이언트 생성"""
        config = load_client_config(path)
        return cls(
            api_key=config.credentials.api_key,
            api_secret=config.credentials.api_secret,
            options=config.options,
            transport=transport,
        )

    def close(self) -> None:
        """HTTP 커넥션 풀 종료"""
        self._dispatcher.close()

    @property
    def rate_tracker(self) -> RateLimitTracker:
        """최근 응답 기준 Rate Limit 사용량"""
        return self._dispatcher.rate_tracker

    def _call(
        self,
        endpoint: Endpoint,
        timestamp: int | None = None,
        **params: Any,
    ) -> Any:
        return self._dispatcher.dispatch(endpoint, params, timestamp=timestamp)

    # -------------------------------------------------------------------------
    # 서버
    # -------------------------------------------------------------------------

    def ping(self) -> None:
        """연결 확인"""
        self._call(Endpoints.PING)

    def get_server_time(self) -> int:
        """서버 시간 조회 (밀리초 타임스탬프)"""
        return self._call(Endpoints.SERVER_TIME)

    def sync_time(self) -> int:
        """서버 시간과 동기화

        로컬 시간과 서버 시간의 차이를 계산하여 오프셋 저장.
        이후 timestamp를 생략한 서명 요청에 적용된다.

        Returns:
            계산된 시간 오프셋 (밀리초)
        """
        local_time = self._dispatcher.get_timestamp() - self._dispatcher.time_offset
        server_time = self.get_server_time()
        self._dispatcher.time_offset = server_time - local_time

        logger.info(
            "서버 시간 동기화 완료",
            extra={"offset_ms": self._dispatcher.time_offset},
        )

        return self._dispatcher.time_offset

    # -------------------------------------------------------------------------
    # 시장 데이터
    # -------------------------------------------------------------------------

    def get_exchange_information(self) -> ExchangeInformation:
        """거래 규칙 및 심볼 정보 조회"""
        return self._call(Endpoints.EXCHANGE_INFORMATION)

    def get_order_book(self, symbol: str, limit: int | None = None) -> OrderBook:
        """호가창 조회

        Args:
            symbol: 거래 심볼 (예: BTCUSDT)
            limit: 호가 단계 수 (5, 10, 20, 50, 100, 500, 1000)
        """
        return self._call(Endpoints.ORDER_BOOK, symbol=symbol, limit=limit)

    def get_recent_trades(self, symbol: str, limit: int | None = None) -> list[Trade]:
        """최근 체결 조회"""
        return self._call(Endpoints.RECENT_TRADES, symbol=symbol, limit=limit)

    def get_old_trades(
        self,
        symbol: str,
        limit: int | None = None,
        from_id: int | None = None,
    ) -> list[Trade]:
        """과거 체결 조회 (API 키 필요)"""
        return self._call(Endpoints.OLD_TRADES, symbol=symbol, limit=limit, fromId=from_id)

    def get_aggregate_trades(
        self,
        symbol: str,
        from_id: int | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[AggregateTrade]:
        """집계 체결 조회"""
        return self._call(
            Endpoints.AGGREGATE_TRADES,
            symbol=symbol,
            fromId=from_id,
            startTime=start_time,
            endTime=end_time,
            limit=limit,
        )

    def get_candlestick(
        self,
        symbol: str,
        interval: CandlestickInterval | str,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[Candlestick]:
        """캔들스틱(Kline) 조회

        Args:
            symbol: 거래 심볼
            interval: 시간 간격 (1m, 3m, 5m, 15m, 30m, 1h, 2h, 4h, 6h, 8h, 12h, 1d, 3d, 1w, 1M)
            start_time: 시작 시간 (밀리초 타임스탬프)
            end_time: 종료 시간 (밀리초 타임스탬프)
            limit: 조회 개수 (기본 500, 최대 1500)
        """
        return self._call(
            Endpoints.CANDLESTICK,
            symbol=symbol,
            interval=interval,
            startTime=start_time,
            endTime=end_time,
            limit=limit,
        )

    def get_mark_price(self, symbol: str | None = None) -> list[MarkPrice]:
        """마크 가격 조회 (symbol 생략 시 전체)"""
        return self._call(Endpoints.MARK_PRICE, symbol=symbol)

    def get_funding_rate(
        self,
        symbol: str | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[FundingRate]:
        """펀딩비 이력 조회"""
        return self._call(
            Endpoints.FUNDING_RATE,
            symbol=symbol,
            startTime=start_time,
            endTime=end_time,
            limit=limit,
        )

    def get_24hr_ticker_price_change(self, symbol: str | None = None) -> list[PriceChangeTicker]:
        """24시간 가격 변동 통계"""
        return self._call(Endpoints.TICKER_24HR, symbol=symbol)

    def get_symbol_price_ticker(self, symbol: str | None = None) -> list[SymbolPrice]:
        """최신 가격 조회 (symbol 생략 시 전체)"""
        return self._call(Endpoints.TICKER_PRICE, symbol=symbol)

    def get_symbol_order_book_ticker(self, symbol: str | None = None) -> list[SymbolOrderBook]:
        """최우선 호가 조회 (symbol 생략 시 전체)"""
        return self._call(Endpoints.BOOK_TICKER, symbol=symbol)

    def get_liquidation_orders(
        self,
        symbol: str | None = None,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[LiquidationOrder]:
        """강제 청산 주문 조회"""
        return self._call(
            Endpoints.LIQUIDATION_ORDERS,
            symbol=symbol,
            startTime=start_time,
            endTime=end_time,
            limit=limit,
        )

    def get_open_interest_stat(
        self,
        symbol: str,
        period: PeriodType | str,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[OpenInterestStat]:
        """미결제약정 통계"""
        return self._stats(Endpoints.OPEN_INTEREST_STAT, symbol, period, start_time, end_time, limit)

    def get_top_trader_account_ratio(
        self,
        symbol: str,
        period: PeriodType | str,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[CommonLongShortRatio]:
        """상위 트레이더 롱/숏 비율 (계좌 기준)"""
        return self._stats(Endpoints.TOP_TRADER_ACCOUNT_RATIO, symbol, period, start_time, end_time, limit)

    def get_top_trader_position_ratio(
        self,
        symbol: str,
        period: PeriodType | str,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[CommonLongShortRatio]:
        """상위 트레이더 롱/숏 비율 (포지션 기준)"""
        return self._stats(Endpoints.TOP_TRADER_POSITION_RATIO, symbol, period, start_time, end_time, limit)

    def get_global_account_ratio(
        self,
        symbol: str,
        period: PeriodType | str,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[CommonLongShortRatio]:
        """전체 계좌 롱/숏 비율"""
        return self._stats(Endpoints.GLOBAL_ACCOUNT_RATIO, symbol, period, start_time, end_time, limit)

    def get_taker_long_short_ratio(
        self,
        symbol: str,
        period: PeriodType | str,
        start_time: int | None = None,
        end_time: int | None = None,
        limit: int | None = None,
    ) -> list[TakerLongShortStat]:
        """Taker 매수/매도 거래량 비율"""
        return self._stats(Endpoints.TAKER_LONG_SHORT_RATIO, symbol, period, start_time, end_time, limit)

    def _stats(
        self,
        endpoint: Endpoint,
        symbol: str,
        period: PeriodType | str,
        start_time: int | None,
        end_time: int | None,
        limit: int | None,
    ) -> list[Any]:
        return self._call(
            endpoint,
            symbol=symbol,
            period=period,
            startTime=start_time,
            endTime=end_time,
            limit=limit,
        )

    # -------------------------------------------------------------------------
    # 주문 실행
    # -------------------------------------------------------------------------

    def post_order(
        self,
        symbol: str,
        side: OrderSide | str,
        order_type: OrderType | str,
        position_side: PositionSide | str | None = None,
        time_in_force: TimeInForce | str | None = None,
        quantity: Amount | None = None,
        price: Amount | None = None,
        reduce_only: bool | str | None = None,
        new_client_order_id: str | None = None,
        stop_price: Amount | None = None,
        working_type: WorkingType | str | None = None,
        new_order_resp_type: NewOrderRespType | str | None = None,
        close_position: bool | str | None = None,
        *,
        timestamp: int | None = None,
    ) -> Order:
        """주문 생성

        Raises:
            OrderError: 거래소가 주문을 거부한 경우
        """
        params = dict(
            symbol=symbol,
            side=side,
            positionSide=position_side,
            type=order_type,
            timeInForce=time_in_force,
            quantity=quantity,
            price=price,
            reduceOnly=reduce_only,
            newClientOrderId=new_client_order_id,
            stopPrice=stop_price,
            workingType=working_type,
            newOrderRespType=new_order_resp_type,
            closePosition=close_position,
        )

        order = self._order_call("주문 생성", Endpoints.NEW_ORDER, timestamp, params)
        logger.info(
            "주문 생성 완료",
            extra={
                "order_id": order.order_id,
                "client_order_id": order.client_order_id,
                "symbol": order.symbol,
                "side": order.side,
                "type": order.order_type,
                "qty": str(order.orig_qty),
            },
        )
        return order

    def post_batch_orders(
        self,
        batch_orders: str | Sequence[dict[str, Any]],
        *,
        timestamp: int | None = None,
    ) -> list[BatchOrderResult]:
        """배치 주문 생성 (최대 5건)

        Args:
            batch_orders: JSON 문자열 또는 주문 dict 목록 (wire 키 사용)

        Returns:
            입력 순서대로 항목별 결과 (성공 주문 또는 에러)
        """
        params = {"batchOrders": _encode_batch_orders(batch_orders)}
        results = self._order_call("배치 주문", Endpoints.BATCH_ORDERS, timestamp, params)

        logger.info(
            "배치 주문 완료",
            extra={
                "accepted": sum(1 for r in results if r.ok),
                "rejected": sum(1 for r in results if not r.ok),
            },
        )
        return results

    def cancel_order(
        self,
        symbol: str,
        order_id: int | None = None,
        orig_client_order_id: str | None = None,
        *,
        timestamp: int | None = None,
    ) -> Order:
        """주문 취소 (order_id 또는 orig_client_order_id 필수)"""
        if order_id is None and not orig_client_order_id:
            raise ValueError("order_id or orig_client_order_id required")

        params = dict(symbol=symbol, orderId=order_id, origClientOrderId=orig_client_order_id)
        order = self._order_call("주문 취소", Endpoints.CANCEL_ORDER, timestamp, params)

        logger.info(
            "주문 취소 완료",
            extra={
                "order_id": order.order_id,
                "client_order_id": order.client_order_id,
            },
        )
        return order

    def cancel_all_open_orders(self, symbol: str, *, timestamp: int | None = None) -> ResponseResult:
        """특정 심볼의 모든 오픈 주문 취소"""
        result = self._call(Endpoints.CANCEL_ALL_OPEN_ORDERS, timestamp=timestamp, symbol=symbol)
        logger.info("모든 주문 취소 완료", extra={"symbol": symbol, "result_code": result.code})
        return result

    def batch_cancel_orders(
        self,
        symbol: str,
        order_id_list: str | Sequence[int] | None = None,
        orig_client_order_id_list: str | Sequence[str] | None = None,
        *,
        timestamp: int | None = None,
    ) -> list[BatchOrderResult]:
        """배치 주문 취소 (최대 10건)

        Args:
            symbol: 거래 심볼
            order_id_list: 주문 ID 목록 또는 JSON 문자열 (예: "[1234567,2345678]")
            orig_client_order_id_list: 클라이언트 주문 ID 목록 또는 JSON 문자열
        """
        if not order_id_list and not orig_client_order_id_list:
            raise ValueError("order_id_list or orig_client_order_id_list required")

        params = dict(
            symbol=symbol,
            orderIdList=_encode_id_list(order_id_list),
            origClientOrderIdList=_encode_id_list(orig_client_order_id_list),
        )
        return self._order_call("배치 주문 취소", Endpoints.BATCH_CANCEL_ORDERS, timestamp, params)

    def _order_call(
        self,
        action: str,
        endpoint: Endpoint,
        timestamp: int | None,
        params: dict[str, Any],
    ) -> Any:
        """주문 요청 실행, 거래소 거부는 OrderError로 변환"""
        try:
            return self._call(endpoint, timestamp=timestamp, **params)
        except RateLimitError:
            raise
        except ExchangeError as e:
            logger.error(
                f"{action} 실패",
                extra={
                    "error_code": e.code,
                    "error_message": e.message,
                    "symbol": params.get("symbol"),
                },
            )
            raise OrderError(code=e.code, message=e.message, status_code=e.status_code) from e

    # -------------------------------------------------------------------------
    # 주문 조회
    # -------------------------------------------------------------------------

    def get_order(
        self,
        symbol: str,
        order_id: int | None = None,
        orig_client_order_id: str | None = None,
        *,
        timestamp: int | None = None,
    ) -> Order:
        """특정 주문 조회 (order_id 또는 orig_client_order_id 필수)"""
        if order_id is None and not orig_client_order_id:
            raise ValueError("order_id or orig_client_order_id required")

        return self._call(
            Endpoints.QUERY_ORDER,
            timestamp=timestamp,
            symbol=symbol,
            orderId=order_id,
            origClientOrderId=orig_client_order_id,
        )

    def get_open_orders(self, symbol: str | None = None, *, timestamp: int | None = None) -> list[Order]:
        """오픈 주문 목록 조회 (symbol 생략 시 전체, 가중치 큼)"""
        return self._call(Endpoints.OPEN_ORDERS, timestamp=timestamp, symbol=symbol)

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
        """전체 주문 조회 (활성, 취소, 체결)"""
        return self._call(
            Endpoints.ALL_ORDERS,
            timestamp=timestamp,
            symbol=symbol,
            orderId=order_id,
            startTime=start_time,
            endTime=end_time,
            limit=limit,
        )

    # -------------------------------------------------------------------------
    # 계좌 / 포지션 설정
    # -------------------------------------------------------------------------

    def change_position_side(self, dual: bool, *, timestamp: int | None = None) -> ResponseResult:
        """포지션 모드 변경 (True = Hedge Mode, False = One-way Mode)"""
        result = self._call(
            Endpoints.CHANGE_POSITION_SIDE,
            timestamp=timestamp,
            dualSidePosition=bool(dual),
        )
        logger.info("포지션 모드 변경 완료", extra={"dual_side_position": dual})
        return result

    def get_position_side(self, *, timestamp: int | None = None) -> PositionMode:
        """현재 포지션 모드 조회"""
        return self._call(Endpoints.POSITION_SIDE, timestamp=timestamp)

    def change_margin_type(
        self,
        symbol: str,
        margin_type: MarginType | str,
        *,
        timestamp: int | None = None,
    ) -> ResponseResult:
        """마진 타입 변경 (ISOLATED, CROSSED)"""
        result = self._call(
            Endpoints.CHANGE_MARGIN_TYPE,
            timestamp=timestamp,
            symbol=symbol,
            marginType=margin_type,
        )
        logger.info(
            "마진 타입 변경 완료",
            extra={"symbol": symbol, "margin_type": serialize_value(margin_type)},
        )
        return result

    def add_isolated_position_margin(
        self,
        symbol: str,
        type: PositionMarginType | int,
        amount: Amount,
        position_side: PositionSide | str | None = None,
        *,
        timestamp: int | None = None,
    ) -> PositionMarginResult:
        """격리 마진 조정

        Args:
            symbol: 거래 심볼
            type: 1 = 추가, 2 = 감소
            amount: 조정 금액
            position_side: BOTH / LONG / SHORT (Hedge Mode에서 필수)
        """
        return self._call(
            Endpoints.ADD_POSITION_MARGIN,
            timestamp=timestamp,
            symbol=symbol,
            positionSide=position_side,
            amount=amount,
            type=type,
        )

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
        """격리 마진 변경 이력"""
        return self._call(
            Endpoints.POSITION_MARGIN_HISTORY,
            timestamp=timestamp,
            symbol=symbol,
            type=type,
            startTime=start_time,
            endTime=end_time,
            limit=limit,
        )

    def change_initial_leverage(
        self,
        symbol: str,
        leverage: int,
        *,
        timestamp: int | None = None,
    ) -> Leverage:
        """레버리지 설정"""
        result = self._call(
            Endpoints.CHANGE_LEVERAGE,
            timestamp=timestamp,
            symbol=symbol,
            leverage=leverage,
        )
        logger.info(
            "레버리지 설정 완료",
            extra={"symbol": symbol, "leverage": result.leverage},
        )
        return result

    # -------------------------------------------------------------------------
    # 계좌 조회
    # -------------------------------------------------------------------------

    def get_balance(self, *, timestamp: int | None = None) -> list[AccountBalance]:
        """자산별 선물 계좌 잔고"""
        return self._call(Endpoints.BALANCE, timestamp=timestamp)

    def get_account_information(self, *, timestamp: int | None = None) -> AccountInformation:
        """계좌 정보 (자산, 포지션 포함)"""
        return self._call(Endpoints.ACCOUNT_INFORMATION, timestamp=timestamp)

    def get_position_risk(
        self,
        symbol: str | None = None,
        *,
        timestamp: int | None = None,
    ) -> list[PositionRisk]:
        """포지션 조회 (symbol 생략 시 전체)"""
        return self._call(Endpoints.POSITION_RISK, timestamp=timestamp, symbol=symbol)

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
        """계좌 체결 내역"""
        return self._call(
            Endpoints.ACCOUNT_TRADES,
            timestamp=timestamp,
            symbol=symbol,
            startTime=start_time,
            endTime=end_time,
            fromId=from_id,
            limit=limit,
        )

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
        """수익/비용 이력 (실현 손익, 수수료, 펀딩비 등)"""
        return self._call(
            Endpoints.INCOME_HISTORY,
            timestamp=timestamp,
            symbol=symbol,
            incomeType=income_type,
            startTime=start_time,
            endTime=end_time,
            limit=limit,
        )

    # -------------------------------------------------------------------------
    # listenKey 관리
    # -------------------------------------------------------------------------

    def start_user_data_stream(self, *, timestamp: int | None = None) -> str:
        """listenKey 생성"""
        listen_key = self._call(Endpoints.START_USER_STREAM, timestamp=timestamp)
        logger.info("listenKey created")
        return listen_key

    def keep_user_data_stream(self, listen_key: str, *, timestamp: int | None = None) -> None:
        """listenKey 유효기간 연장 (60분 만료, 30분마다 호출 권장)"""
        self._call(Endpoints.KEEP_USER_STREAM, timestamp=timestamp, listenKey=listen_key)
        logger.debug("listenKey extended")

    def close_user_data_stream(self, listen_key: str, *, timestamp: int | None = None) -> None:
        """listenKey 삭제"""
        self._call(Endpoints.CLOSE_USER_STREAM, timestamp=timestamp, listenKey=listen_key)
        logger.info("listenKey deleted")

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    def __enter__(self) -> "BinanceRestClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
