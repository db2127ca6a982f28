"""
Binance REST 클라이언트 테스트

BinanceRestClient 공개 메서드 -> HTTP 요청 -> 값 타입 흐름 테스트 (respx 사용).
"""

import hashlib
import hmac
import json
from decimal import Decimal
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest
import respx

from adapters.binance.errors import ExchangeError, OrderError, RateLimitError, TransportError
from adapters.binance.rest_client import BinanceRestClient
from adapters.interfaces import ISyncRequestClient
from core.config.loader import RequestOptions
from core.constants import BinanceEndpoints, Headers
from core.types import MarginType, OrderSide, OrderType, PositionMarginType, TimeInForce


HOST = "fapi.binance.com"
TIMESTAMP = 1499827319559


@pytest.fixture
def client(options: RequestOptions) -> BinanceRestClient:
    """인증 클라이언트"""
    with BinanceRestClient("test_api_key", "test_api_secret", options=options) as rest_client:
        yield rest_client


@pytest.fixture
def public_client(options: RequestOptions) -> BinanceRestClient:
    """공개 전용 클라이언트"""
    with BinanceRestClient(options=options) as rest_client:
        yield rest_client


@pytest.fixture
def router():
    with respx.mock(assert_all_called=False) as mock_router:
        yield mock_router


def query_of(route: respx.Route) -> str:
    return route.calls.last.request.url.query.decode()


def params_of(route: respx.Route) -> dict[str, str]:
    return {key: values[0] for key, values in parse_qs(query_of(route)).items()}


class TestConstruction:
    """생성/수명 관리"""

    def test_protocol_conformance(self, client: BinanceRestClient) -> None:
        assert isinstance(client, ISyncRequestClient)

    def test_default_options(self) -> None:
        with BinanceRestClient() as rest_client:
            assert rest_client.options.base_url == BinanceEndpoints.PROD_REST_URL
            assert rest_client.credentials.is_empty

    def test_from_config(self, temp_secrets_file_with_options: Path) -> None:
        with BinanceRestClient.from_config(temp_secrets_file_with_options) as rest_client:
            assert rest_client.credentials.api_key == "prod_api_key_12345"
            assert rest_client.options.base_url == "https://proxy.example.com"
            assert rest_client.options.recv_window == 10000

    def test_context_manager_closes(self, options: RequestOptions) -> None:
        with BinanceRestClient(options=options) as rest_client:
            pass

        assert rest_client._dispatcher.is_closed


class TestMarketData:
    """시장 데이터 조회"""

    def test_order_book(
        self,
        client: BinanceRestClient,
        router: respx.MockRouter,
        order_book_payload: dict[str, Any],
    ) -> None:
        """공개 엔드포인트: 헤더/서명 없이 스키마 순서 query"""
        route = router.get(host=HOST, path="/fapi/v1/depth").mock(
            return_value=httpx.Response(200, json=order_book_payload),
        )

        book = client.get_order_book("BTCUSDT", limit=5)

        assert query_of(route) == "symbol=BTCUSDT&limit=5"
        assert Headers.API_KEY not in route.calls.last.request.headers
        assert book.last_update_id == 1027024
        assert book.best_bid is not None
        assert book.best_bid.price == Decimal("4.00000000")

    def test_public_client_market_data(
        self,
        public_client: BinanceRestClient,
        router: respx.MockRouter,
    ) -> None:
        """키 없는 클라이언트로 공개 엔드포인트 호출"""
        router.get(host=HOST, path="/fapi/v1/ticker/bookTicker").mock(
            return_value=httpx.Response(200, json=[
                {"symbol": "BTCUSDT", "bidPrice": "4.00000000", "bidQty": "431.00000000",
                 "askPrice": "4.00000200", "askQty": "9.00000000", "time": 1589437530011},
            ]),
        )

        tickers = public_client.get_symbol_order_book_ticker()

        assert tickers[0].ask_qty == Decimal("9.00000000")

    def test_mark_price_single_symbol(
        self,
        client: BinanceRestClient,
        router: respx.MockRouter,
        mark_price_payload: dict[str, Any],
    ) -> None:
        """symbol 지정 시 단일 객체 응답도 리스트로 반환"""
        route = router.get(host=HOST, path="/fapi/v1/premiumIndex").mock(
            return_value=httpx.Response(200, json=mark_price_payload),
        )

        prices = client.get_mark_price("BTCUSDT")

        assert query_of(route) == "symbol=BTCUSDT"
        assert len(prices) == 1
        assert prices[0].mark_price == Decimal("11793.63104562")

    def test_mark_price_all_symbols(
        self,
        client: BinanceRestClient,
        router: respx.MockRouter,
        mark_price_payload: dict[str, Any],
    ) -> None:
        other = dict(mark_price_payload, symbol="ETHUSDT")
        route = router.get(host=HOST, path="/fapi/v1/premiumIndex").mock(
            return_value=httpx.Response(200, json=[mark_price_payload, other]),
        )

        prices = client.get_mark_price()

        assert query_of(route) == ""
        assert [p.symbol for p in prices] == ["BTCUSDT", "ETHUSDT"]

    def test_candlestick(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        route = router.get(host=HOST, path="/fapi/v1/klines").mock(
            return_value=httpx.Response(200, json=[
                [1499040000000, "0.01634790", "0.80000000", "0.01575800", "0.01577100",
                 "148976.11427815", 1499644799999, "2434.19055334", 308,
                 "1756.87402397", "28.46694368", "17928899.62484339"],
            ]),
        )

        candles = client.get_candlestick("BTCUSDT", "1h", start_time=1499040000000, limit=1)

        assert query_of(route) == "symbol=BTCUSDT&interval=1h&startTime=1499040000000&limit=1"
        assert candles[0].num_trades == 308

    def test_old_trades_sends_api_key(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        """API_KEY 엔드포인트: 헤더만, 서명 없음"""
        route = router.get(host=HOST, path="/fapi/v1/historicalTrades").mock(
            return_value=httpx.Response(200, json=[]),
        )

        assert client.get_old_trades("BTCUSDT", limit=10, from_id=100) == []

        request = route.calls.last.request
        assert request.headers[Headers.API_KEY] == "test_api_key"
        assert query_of(route) == "symbol=BTCUSDT&limit=10&fromId=100"

    def test_old_trades_requires_api_key(
        self, public_client: BinanceRestClient, router: respx.MockRouter,
    ) -> None:
        route = router.get(host=HOST, path="/fapi/v1/historicalTrades")

        with pytest.raises(ValueError, match="api_key"):
            public_client.get_old_trades("BTCUSDT")

        assert not route.called

    def test_market_stats_public(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        """/futures/data 통계는 timestamp/서명 없음"""
        route = router.get(host=HOST, path="/futures/data/globalLongShortAccountRatio").mock(
            return_value=httpx.Response(200, json=[
                {"symbol": "BTCUSDT", "longShortRatio": "0.1960", "longAccount": "0.6622",
                 "shortAccount": "0.3378", "timestamp": "1583139600000"},
            ]),
        )

        ratios = client.get_global_account_ratio("BTCUSDT", "5m", limit=1)

        assert query_of(route) == "symbol=BTCUSDT&period=5m&limit=1"
        assert ratios[0].long_short_ratio == Decimal("0.1960")

    def test_exchange_error(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        """거래소 거부는 code/msg 그대로 ExchangeError"""
        router.get(host=HOST, path="/fapi/v1/depth").mock(
            return_value=httpx.Response(400, json={"code": -1121, "msg": "Invalid symbol."}),
        )

        with pytest.raises(ExchangeError) as exc_info:
            client.get_order_book("NOPE")

        assert not isinstance(exc_info.value, OrderError)
        assert exc_info.value.code == -1121
        assert exc_info.value.message == "Invalid symbol."

    def test_timeout(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        router.get(host=HOST, path="/fapi/v1/depth").mock(side_effect=httpx.ConnectTimeout)

        with pytest.raises(TransportError) as exc_info:
            client.get_order_book("BTCUSDT")

        assert exc_info.value.timed_out is True


class TestServerTime:
    """서버 시간"""

    def test_ping(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        router.get(host=HOST, path="/fapi/v1/ping").mock(return_value=httpx.Response(200, json={}))

        assert client.ping() is None

    def test_sync_time(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        """서버 시간과의 오프셋 저장 후 서명 요청에 적용"""
        router.get(host=HOST, path="/fapi/v1/time").mock(
            return_value=httpx.Response(200, json={"serverTime": TIMESTAMP}),
        )

        offset = client.sync_time()

        assert offset < 0
        assert abs(client._dispatcher.get_timestamp() - TIMESTAMP) < 60_000


class TestOrders:
    """주문 실행"""

    def test_post_order_signature(
        self,
        client: BinanceRestClient,
        router: respx.MockRouter,
        order_payload: dict[str, Any],
    ) -> None:
        """signature는 마지막 파라미터이고 앞부분의 HMAC과 일치"""
        route = router.post(host=HOST, path="/fapi/v1/order").mock(
            return_value=httpx.Response(200, json=order_payload),
        )

        order = client.post_order(
            symbol="BTCUSDT",
            side=OrderSide.BUY,
            order_type=OrderType.LIMIT,
            time_in_force=TimeInForce.GTC,
            quantity=Decimal("0.001"),
            price="9000",
            timestamp=TIMESTAMP,
        )

        payload, _, signature = query_of(route).rpartition("&signature=")
        assert payload == (
            "symbol=BTCUSDT&side=BUY&type=LIMIT&timeInForce=GTC&quantity=0.001"
            f"&price=9000&recvWindow=5000&timestamp={TIMESTAMP}"
        )
        assert signature == hmac.new(b"test_api_secret", payload.encode(), hashlib.sha256).hexdigest()
        assert route.calls.last.request.headers[Headers.API_KEY] == "test_api_key"
        assert order.order_id == 22542179

    def test_post_order_float_quantity(
        self,
        client: BinanceRestClient,
        router: respx.MockRouter,
        order_payload: dict[str, Any],
    ) -> None:
        """float 수량은 지수 표기 없이 전송"""
        route = router.post(host=HOST, path="/fapi/v1/order").mock(
            return_value=httpx.Response(200, json=order_payload),
        )

        client.post_order("BTCUSDT", "BUY", "MARKET", quantity=0.00001, timestamp=TIMESTAMP)

        query = query_of(route)
        assert "quantity=0.00001&" in query
        assert "e-" not in query

    def test_post_order_rejected(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        """주문 거부는 OrderError"""
        router.post(host=HOST, path="/fapi/v1/order").mock(
            return_value=httpx.Response(400, json={"code": -2019, "msg": "Margin is insufficient."}),
        )

        with pytest.raises(OrderError) as exc_info:
            client.post_order("BTCUSDT", "BUY", "MARKET", quantity="1")

        assert exc_info.value.code == -2019
        assert exc_info.value.status_code == 400

    def test_post_order_rate_limited(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        """Rate Limit은 OrderError로 바꾸지 않음"""
        router.post(host=HOST, path="/fapi/v1/order").mock(
            return_value=httpx.Response(429, json={"code": -1003, "msg": "Too many requests."},
                                        headers={"Retry-After": "5"}),
        )

        with pytest.raises(RateLimitError) as exc_info:
            client.post_order("BTCUSDT", "BUY", "MARKET", quantity="1")

        assert exc_info.value.retry_after == 5

    def test_post_order_missing_credentials(
        self, public_client: BinanceRestClient, router: respx.MockRouter,
    ) -> None:
        route = router.post(host=HOST, path="/fapi/v1/order")

        with pytest.raises(ValueError, match="api_key"):
            public_client.post_order("BTCUSDT", "BUY", "MARKET", quantity="1")

        assert not route.called

    def test_batch_orders(
        self,
        client: BinanceRestClient,
        router: respx.MockRouter,
        order_payload: dict[str, Any],
    ) -> None:
        """항목별 성공/실패 결과, 입력 순서 유지"""
        route = router.post(host=HOST, path="/fapi/v1/batchOrders").mock(
            return_value=httpx.Response(200, json=[
                order_payload,
                {"code": -2022, "msg": "ReduceOnly Order is rejected."},
            ]),
        )

        results = client.post_batch_orders(
            [
                {"symbol": "BTCUSDT", "side": OrderSide.BUY, "type": "LIMIT",
                 "quantity": Decimal("0.001"), "price": "9000", "timeInForce": "GTC"},
                {"symbol": "BTCUSDT", "side": "SELL", "type": "MARKET",
                 "quantity": "0.001", "reduceOnly": True, "positionSide": None},
            ],
            timestamp=TIMESTAMP,
        )

        assert [r.ok for r in results] == [True, False]
        assert results[0].order is not None
        assert results[0].order.order_id == 22542179
        assert results[1].error is not None
        assert results[1].error.code == -2022

        sent = json.loads(params_of(route)["batchOrders"])
        assert sent[0] == {
            "symbol": "BTCUSDT", "side": "BUY", "type": "LIMIT",
            "quantity": "0.001", "price": "9000", "timeInForce": "GTC",
        }
        assert sent[1]["reduceOnly"] == "true"
        assert "positionSide" not in sent[1]

    def test_batch_orders_json_string(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        """JSON 문자열은 그대로 전송"""
        raw = '[{"symbol":"BTCUSDT","side":"BUY","type":"MARKET","quantity":"1"}]'
        route = router.post(host=HOST, path="/fapi/v1/batchOrders").mock(
            return_value=httpx.Response(200, json=[{"code": -1102, "msg": "Mandatory parameter missing."}]),
        )

        results = client.post_batch_orders(raw, timestamp=TIMESTAMP)

        assert params_of(route)["batchOrders"] == raw
        assert not results[0].ok

    def test_batch_orders_empty(self, client: BinanceRestClient) -> None:
        with pytest.raises(ValueError):
            client.post_batch_orders([])

    def test_batch_orders_empty_string(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        """빈 문자열도 목록과 같이 거부 (전송 전)"""
        route = router.post(host=HOST, path="/fapi/v1/batchOrders")

        for value in ("", "   "):
            with pytest.raises(ValueError, match="empty"):
                client.post_batch_orders(value)

        assert not route.called

    def test_cancel_order(
        self,
        client: BinanceRestClient,
        router: respx.MockRouter,
        order_payload: dict[str, Any],
    ) -> None:
        canceled = dict(order_payload, status="CANCELED")
        route = router.delete(host=HOST, path="/fapi/v1/order").mock(
            return_value=httpx.Response(200, json=canceled),
        )

        order = client.cancel_order("BTCUSDT", order_id=22542179, timestamp=TIMESTAMP)

        assert query_of(route).startswith("symbol=BTCUSDT&orderId=22542179&recvWindow=5000&timestamp=")
        assert order.status == "CANCELED"
        assert not order.is_open

    def test_cancel_order_requires_id(self, client: BinanceRestClient) -> None:
        with pytest.raises(ValueError):
            client.cancel_order("BTCUSDT")

    def test_cancel_order_unknown(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        router.delete(host=HOST, path="/fapi/v1/order").mock(
            return_value=httpx.Response(400, json={"code": -2011, "msg": "Unknown order sent."}),
        )

        with pytest.raises(OrderError) as exc_info:
            client.cancel_order("BTCUSDT", orig_client_order_id="missing")

        assert exc_info.value.code == -2011

    def test_cancel_all_open_orders(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        router.delete(host=HOST, path="/fapi/v1/allOpenOrders").mock(
            return_value=httpx.Response(
                200, json={"code": 200, "msg": "The operation of cancel all open order is done."},
            ),
        )

        result = client.cancel_all_open_orders("BTCUSDT")

        assert result.is_success

    def test_batch_cancel_orders(
        self,
        client: BinanceRestClient,
        router: respx.MockRouter,
        order_payload: dict[str, Any],
    ) -> None:
        """ID 목록은 JSON 배열 문자열로 전송"""
        route = router.delete(host=HOST, path="/fapi/v1/batchOrders").mock(
            return_value=httpx.Response(200, json=[
                dict(order_payload, status="CANCELED"),
                {"code": -2011, "msg": "Unknown order sent."},
            ]),
        )

        results = client.batch_cancel_orders("BTCUSDT", order_id_list=[22542179, 1234567])

        assert params_of(route)["orderIdList"] == "[22542179,1234567]"
        assert "origClientOrderIdList" not in params_of(route)
        assert [r.ok for r in results] == [True, False]

    def test_batch_cancel_requires_ids(self, client: BinanceRestClient) -> None:
        with pytest.raises(ValueError):
            client.batch_cancel_orders("BTCUSDT")

    def test_get_open_orders(
        self,
        client: BinanceRestClient,
        router: respx.MockRouter,
        order_payload: dict[str, Any],
    ) -> None:
        route = router.get(host=HOST, path="/fapi/v1/openOrders").mock(
            return_value=httpx.Response(200, json=[order_payload]),
        )

        orders = client.get_open_orders()

        assert query_of(route).startswith("recvWindow=5000&timestamp=")
        assert orders[0].is_open


class TestAccount:
    """계좌/포지션"""

    def test_balance(
        self,
        client: BinanceRestClient,
        router: respx.MockRouter,
        balance_payload: dict[str, Any],
    ) -> None:
        router.get(host=HOST, path="/fapi/v2/balance").mock(
            return_value=httpx.Response(200, json=[balance_payload]),
        )

        balances = client.get_balance()

        assert balances[0].asset == "USDT"
        assert balances[0].available_balance == Decimal("23.72469206")

    def test_account_information(
        self,
        client: BinanceRestClient,
        router: respx.MockRouter,
        account_information_payload: dict[str, Any],
    ) -> None:
        router.get(host=HOST, path="/fapi/v2/account").mock(
            return_value=httpx.Response(200, json=account_information_payload),
        )

        info = client.get_account_information()

        assert info.can_trade
        assert info.positions[0].symbol == "BTCUSDT"

    def test_position_risk(
        self,
        client: BinanceRestClient,
        router: respx.MockRouter,
        position_risk_payload: dict[str, Any],
    ) -> None:
        route = router.get(host=HOST, path="/fapi/v2/positionRisk").mock(
            return_value=httpx.Response(200, json=[position_risk_payload]),
        )

        positions = client.get_position_risk("BTCUSDT")

        assert params_of(route)["symbol"] == "BTCUSDT"
        assert positions[0].is_flat

    def test_change_position_side(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        """bool은 소문자 문자열"""
        route = router.post(host=HOST, path="/fapi/v1/positionSide/dual").mock(
            return_value=httpx.Response(200, json={"code": 200, "msg": "success"}),
        )

        assert client.change_position_side(True).is_success
        assert query_of(route).startswith("dualSidePosition=true&")

    def test_get_position_side(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        router.get(host=HOST, path="/fapi/v1/positionSide/dual").mock(
            return_value=httpx.Response(200, json={"dualSidePosition": True}),
        )

        assert client.get_position_side().dual_side_position is True

    def test_change_margin_type(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        route = router.post(host=HOST, path="/fapi/v1/marginType").mock(
            return_value=httpx.Response(200, json={"code": 200, "msg": "success"}),
        )

        client.change_margin_type("BTCUSDT", MarginType.ISOLATED)

        assert params_of(route)["marginType"] == "ISOLATED"

    def test_add_isolated_position_margin(
        self, client: BinanceRestClient, router: respx.MockRouter,
    ) -> None:
        route = router.post(host=HOST, path="/fapi/v1/positionMargin").mock(
            return_value=httpx.Response(200, json={
                "amount": 100.0, "code": 200, "msg": "Successfully modify position margin.", "type": 1,
            }),
        )

        result = client.add_isolated_position_margin(
            "BTCUSDT", PositionMarginType.ADD, Decimal("100"), timestamp=TIMESTAMP,
        )

        assert query_of(route).startswith("symbol=BTCUSDT&amount=100&type=1&recvWindow=5000")
        assert result.amount == Decimal("100.0")

    def test_change_initial_leverage(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        router.post(host=HOST, path="/fapi/v1/leverage").mock(
            return_value=httpx.Response(
                200, json={"leverage": 21, "maxNotionalValue": "1000000", "symbol": "BTCUSDT"},
            ),
        )

        assert client.change_initial_leverage("BTCUSDT", 21).leverage == 21

    def test_income_history(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        route = router.get(host=HOST, path="/fapi/v1/income").mock(
            return_value=httpx.Response(200, json=[]),
        )

        assert client.get_income_history(income_type="FUNDING_FEE", limit=100) == []
        assert query_of(route).startswith("incomeType=FUNDING_FEE&limit=100&recvWindow=5000")


class TestUserDataStream:
    """listenKey 수명 주기"""

    def test_lifecycle(self, client: BinanceRestClient, router: respx.MockRouter) -> None:
        listen_key = "pqia91ma19a5s61cv6a81va65sdf19v8a65a1a5s61cv6a81va65sdf19v8a65a1"
        start = router.post(host=HOST, path="/fapi/v1/listenKey").mock(
            return_value=httpx.Response(200, json={"listenKey": listen_key}),
        )
        keep = router.put(host=HOST, path="/fapi/v1/listenKey").mock(
            return_value=httpx.Response(200, json={}),
        )
        close = router.delete(host=HOST, path="/fapi/v1/listenKey").mock(
            return_value=httpx.Response(200, json={}),
        )

        assert client.start_user_data_stream() == listen_key
        assert client.keep_user_data_stream(listen_key) is None
        assert client.close_user_data_stream(listen_key) is None

        assert start.call_count == keep.call_count == close.call_count == 1
        assert params_of(keep)["listenKey"] == listen_key
        assert params_of(close)["listenKey"] == listen_key
        assert "signature" in params_of(start)
