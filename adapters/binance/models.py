"""
Binance API 응답 -> 공통 모델 변환

Binance Futures API 응답을 adapters.models의 값 타입으로 변환.
모든 금액/수량은 문자열에서 Decimal로 변환.

필수 필드 누락/형식 오류 시 KeyError, TypeError, ValueError,
decimal.InvalidOperation이 그대로 발생하며, 디스패처가 ProtocolError로 감싼다.
"""

from decimal import Decimal
from typing import Any

from adapters.models import (
    AccountAsset,
    AccountBalance,
    AccountInformation,
    AccountPosition,
    AggregateTrade,
    BatchOrderResult,
    Candlestick,
    CommonLongShortRatio,
    ExchangeInformation,
    ExchangeSymbol,
    FundingRate,
    Income,
    Leverage,
    LiquidationOrder,
    MarkPrice,
    MyTrade,
    OpenInterestStat,
    Order,
    OrderBook,
    OrderBookEntry,
    PositionMarginResult,
    PositionMode,
    PositionRisk,
    PriceChangeTicker,
    RateLimit,
    ResponseResult,
    SymbolOrderBook,
    SymbolPrice,
    TakerLongShortStat,
    Trade,
    WalletDeltaLog,
)


def _optional_decimal(data: dict[str, Any], key: str) -> Decimal | None:
    """값이 없거나 "0"이면 None"""
    value = data.get(key)
    if value is None or value == "" or Decimal(str(value)) == 0:
        return None
    return Decimal(str(value))


def _decimal(value: Any) -> Decimal:
    # float 그대로 Decimal 변환 시 이진 오차가 붙으므로 str 경유
    return Decimal(str(value))


def _bool(value: Any) -> bool:
    """JSON bool 또는 "true"/"false" 문자열"""
    if isinstance(value, str):
        return value.lower() == "true"
    return bool(value)


# -------------------------------------------------------------------------
# 공통
# -------------------------------------------------------------------------

def parse_none(data: Any) -> None:
    """본문을 사용하지 않는 응답 (listenKey 갱신/삭제)"""
    return None


def parse_response_result(data: dict[str, Any]) -> ResponseResult:
    """{"code": 200, "msg": "success"} 형태 응답"""
    return ResponseResult(code=int(data["code"]), msg=str(data.get("msg", "")))


def parse_batch_item(data: dict[str, Any]) -> BatchOrderResult:
    """배치 주문/취소 항목

    성공 항목은 주문 객체, 실패 항목은 {"code": -2011, "msg": "..."}.
    """
    if "orderId" in data:
        return BatchOrderResult(order=parse_order(data))
    return BatchOrderResult(error=parse_response_result(data))


def parse_listen_key(data: dict[str, Any]) -> str:
    """{"listenKey": "..."}"""
    listen_key = data["listenKey"]
    if not isinstance(listen_key, str) or not listen_key:
        raise ValueError("listenKey must be a non-empty string")
    return listen_key


def parse_server_time(data: dict[str, Any]) -> int:
    """{"serverTime": 1499827319559}"""
    return int(data["serverTime"])


# -------------------------------------------------------------------------
# 시장 데이터
# -------------------------------------------------------------------------

def parse_exchange_information(data: dict[str, Any]) -> ExchangeInformation:
    """GET /fapi/v1/exchangeInfo 응답"""
    rate_limits = tuple(
        RateLimit(
            rate_limit_type=item["rateLimitType"],
            interval=item["interval"],
            interval_num=int(item["intervalNum"]),
            limit=int(item["limit"]),
        )
        for item in data.get("rateLimits", [])
    )

    symbols = tuple(
        ExchangeSymbol(
            symbol=item["symbol"],
            status=item.get("status", ""),
            maint_margin_percent=_decimal(item.get("maintMarginPercent", "0")),
            required_margin_percent=_decimal(item.get("requiredMarginPercent", "0")),
            base_asset=item["baseAsset"],
            quote_asset=item["quoteAsset"],
            price_precision=int(item["pricePrecision"]),
            quantity_precision=int(item["quantityPrecision"]),
            base_asset_precision=int(item.get("baseAssetPrecision", 0)),
            quote_precision=int(item.get("quotePrecision", 0)),
            order_types=tuple(item.get("orderTypes", [])),
            time_in_force=tuple(item.get("timeInForce", [])),
            filters=tuple(item.get("filters", [])),
        )
        for item in data.get("symbols", [])
    )

    return ExchangeInformation(
        timezone=data["timezone"],
        server_time=int(data["serverTime"]),
        rate_limits=rate_limits,
        exchange_filters=tuple(data.get("exchangeFilters", [])),
        symbols=symbols,
    )


def parse_order_book(data: dict[str, Any]) -> OrderBook:
    """GET /fapi/v1/depth 응답

    {
        "lastUpdateId": 1027024,
        "E": 1589436922972,
        "T": 1589436922959,
        "bids": [["4.00000000", "431.00000000"]],
        "asks": [["4.00000200", "12.00000000"]]
    }
    """
    return OrderBook(
        last_update_id=int(data["lastUpdateId"]),
        bids=tuple(OrderBookEntry(_decimal(p), _decimal(q)) for p, q in data["bids"]),
        asks=tuple(OrderBookEntry(_decimal(p), _decimal(q)) for p, q in data["asks"]),
        message_output_time=data.get("E"),
        transaction_time=data.get("T"),
    )


def parse_trade(data: dict[str, Any]) -> Trade:
    """GET /fapi/v1/trades, /fapi/v1/historicalTrades 항목"""
    return Trade(
        id=int(data["id"]),
        price=_decimal(data["price"]),
        qty=_decimal(data["qty"]),
        quote_qty=_decimal(data.get("quoteQty", "0")),
        time=int(data["time"]),
        is_buyer_maker=_bool(data.get("isBuyerMaker", False)),
    )


def parse_aggregate_trade(data: dict[str, Any]) -> AggregateTrade:
    """GET /fapi/v1/aggTrades 항목 (축약 키)"""
    return AggregateTrade(
        id=int(data["a"]),
        price=_decimal(data["p"]),
        qty=_decimal(data["q"]),
        first_id=int(data["f"]),
        last_id=int(data["l"]),
        time=int(data["T"]),
        is_buyer_maker=_bool(data["m"]),
    )


def parse_candlestick(item: list[Any]) -> Candlestick:
    """GET /fapi/v1/klines 항목

    [open_time, open, high, low, close, volume, close_time,
     quote_volume, trades, taker_buy_volume, taker_buy_quote_volume, ignore]
    """
    return Candlestick(
        open_time=int(item[0]),
        open=_decimal(item[1]),
        high=_decimal(item[2]),
        low=_decimal(item[3]),
        close=_decimal(item[4]),
        volume=_decimal(item[5]),
        close_time=int(item[6]),
        quote_asset_volume=_decimal(item[7]),
        num_trades=int(item[8]),
        taker_buy_base_asset_volume=_decimal(item[9]),
        taker_buy_quote_asset_volume=_decimal(item[10]),
    )


def parse_mark_price(data: dict[str, Any]) -> MarkPrice:
    """GET /fapi/v1/premiumIndex 항목"""
    index_price = data.get("indexPrice")
    return MarkPrice(
        symbol=data["symbol"],
        mark_price=_decimal(data["markPrice"]),
        last_funding_rate=_decimal(data.get("lastFundingRate") or "0"),
        next_funding_time=int(data.get("nextFundingTime", 0)),
        time=int(data["time"]),
        index_price=_decimal(index_price) if index_price is not None else None,
    )


def parse_funding_rate(data: dict[str, Any]) -> FundingRate:
    """GET /fapi/v1/fundingRate 항목"""
    return FundingRate(
        symbol=data["symbol"],
        funding_rate=_decimal(data["fundingRate"]),
        funding_time=int(data["fundingTime"]),
    )


def parse_price_change_ticker(data: dict[str, Any]) -> PriceChangeTicker:
    """GET /fapi/v1/ticker/24hr 항목"""
    return PriceChangeTicker(
        symbol=data["symbol"],
        price_change=_decimal(data["priceChange"]),
        price_change_percent=_decimal(data["priceChangePercent"]),
        weighted_avg_price=_decimal(data["weightedAvgPrice"]),
        last_price=_decimal(data["lastPrice"]),
        last_qty=_decimal(data["lastQty"]),
        open_price=_decimal(data["openPrice"]),
        high_price=_decimal(data["highPrice"]),
        low_price=_decimal(data["lowPrice"]),
        volume=_decimal(data["volume"]),
        quote_volume=_decimal(data["quoteVolume"]),
        open_time=int(data["openTime"]),
        close_time=int(data["closeTime"]),
        first_id=int(data["firstId"]),
        last_id=int(data["lastId"]),
        count=int(data["count"]),
    )


def parse_symbol_price(data: dict[str, Any]) -> SymbolPrice:
    """GET /fapi/v1/ticker/price 항목"""
    return SymbolPrice(symbol=data["symbol"], price=_decimal(data["price"]))


def parse_symbol_order_book(data: dict[str, Any]) -> SymbolOrderBook:
    """GET /fapi/v1/ticker/bookTicker 항목"""
    return SymbolOrderBook(
        symbol=data["symbol"],
        bid_price=_decimal(data["bidPrice"]),
        bid_qty=_decimal(data["bidQty"]),
        ask_price=_decimal(data["askPrice"]),
        ask_qty=_decimal(data["askQty"]),
    )


def parse_liquidation_order(data: dict[str, Any]) -> LiquidationOrder:
    """GET /fapi/v1/allForceOrders 항목"""
    return LiquidationOrder(
        symbol=data["symbol"],
        price=_decimal(data["price"]),
        orig_qty=_decimal(data["origQty"]),
        executed_qty=_decimal(data["executedQty"]),
        average_price=_decimal(data["averagePrice"]),
        status=data["status"],
        time_in_force=data["timeInForce"],
        order_type=data["type"],
        side=data["side"],
        time=int(data["time"]),
    )


def parse_open_interest_stat(data: dict[str, Any]) -> OpenInterestStat:
    """GET /futures/data/openInterestHist 항목"""
    return OpenInterestStat(
        symbol=data["symbol"],
        sum_open_interest=_decimal(data["sumOpenInterest"]),
        sum_open_interest_value=_decimal(data["sumOpenInterestValue"]),
        timestamp=int(data["timestamp"]),
    )


def parse_long_short_ratio(data: dict[str, Any]) -> CommonLongShortRatio:
    """GET /futures/data/*LongShort*Ratio 항목

    포지션 기준 응답은 longAccount/shortAccount 대신 longPosition/shortPosition
    키를 쓰는 경우가 있어 둘 다 허용.
    """
    long_value = data.get("longAccount", data.get("longPosition"))
    short_value = data.get("shortAccount", data.get("shortPosition"))
    if long_value is None or short_value is None:
        raise KeyError("longAccount/shortAccount")

    return CommonLongShortRatio(
        symbol=data["symbol"],
        long_short_ratio=_decimal(data["longShortRatio"]),
        long_account=_decimal(long_value),
        short_account=_decimal(short_value),
        timestamp=int(data["timestamp"]),
    )


def parse_taker_long_short_stat(data: dict[str, Any]) -> TakerLongShortStat:
    """GET /futures/data/takerlongshortRatio 항목"""
    return TakerLongShortStat(
        buy_sell_ratio=_decimal(data["buySellRatio"]),
        buy_vol=_decimal(data["buyVol"]),
        sell_vol=_decimal(data["sellVol"]),
        timestamp=int(data["timestamp"]),
    )


# -------------------------------------------------------------------------
# 주문 / 계좌
# -------------------------------------------------------------------------

def parse_order(data: dict[str, Any]) -> Order:
    """Binance 주문 응답 -> Order 모델

    Binance POST /fapi/v1/order 또는 GET /fapi/v1/openOrders 응답 예시:
    {
        "orderId": 8886774,
        "symbol": "BTCUSDT",
        "status": "NEW",
        "clientOrderId": "testOrder",
        "price": "0",
        "avgPrice": "0.00000",
        "origQty": "0.001",
        "executedQty": "0",
        "cumQuote": "0",
        "timeInForce": "GTC",
        "type": "MARKET",
        "reduceOnly": false,
        "closePosition": false,
        "side": "BUY",
        "positionSide": "BOTH",
        "stopPrice": "0",
        "workingType": "CONTRACT_PRICE",
        "origType": "MARKET",
        "updateTime": 1568879465651
    }
    """
    update_time = data.get("updateTime", data.get("time"))

    return Order(
        order_id=int(data["orderId"]),
        client_order_id=data.get("clientOrderId", ""),
        symbol=data["symbol"],
        side=data["side"],
        order_type=data.get("type", data.get("origType", "UNKNOWN")),
        status=data["status"],
        orig_qty=_decimal(data.get("origQty", "0")),
        executed_qty=_decimal(data.get("executedQty", "0")),
        cum_quote=_decimal(data.get("cumQuote", data.get("cumQty", "0"))),
        position_side=data.get("positionSide", "BOTH"),
        # 가격 처리 (0이면 None)
        price=_optional_decimal(data, "price"),
        avg_price=_optional_decimal(data, "avgPrice"),
        stop_price=_optional_decimal(data, "stopPrice"),
        time_in_force=data.get("timeInForce"),
        reduce_only=_bool(data.get("reduceOnly", False)),
        close_position=_bool(data.get("closePosition", False)),
        working_type=data.get("workingType"),
        orig_type=data.get("origType"),
        activate_price=_optional_decimal(data, "activatePrice"),
        price_rate=_optional_decimal(data, "priceRate"),
        update_time=int(update_time) if update_time is not None else None,
    )


def parse_position_margin_result(data: dict[str, Any]) -> PositionMarginResult:
    """POST /fapi/v1/positionMargin 응답"""
    return PositionMarginResult(
        amount=_decimal(data["amount"]),
        code=int(data["code"]),
        msg=str(data.get("msg", "")),
        type=int(data["type"]),
    )


def parse_wallet_delta_log(data: dict[str, Any]) -> WalletDeltaLog:
    """GET /fapi/v1/positionMargin/history 항목"""
    return WalletDeltaLog(
        symbol=data["symbol"],
        amount=_decimal(data["amount"]),
        asset=data["asset"],
        type=int(data["type"]),
        time=int(data["time"]),
        position_side=data.get("positionSide", "BOTH"),
    )


def parse_position_mode(data: dict[str, Any]) -> PositionMode:
    """GET /fapi/v1/positionSide/dual 응답"""
    return PositionMode(dual_side_position=_bool(data["dualSidePosition"]))


def parse_account_balance(data: dict[str, Any]) -> AccountBalance:
    """Binance 잔고 응답 -> AccountBalance

    Binance GET /fapi/v2/balance 응답 항목 예시:
    {
        "accountAlias": "SgsR",
        "asset": "USDT",
        "balance": "122607.35137903",
        "crossWalletBalance": "23.72469206",
        "crossUnPnl": "0.00000000",
        "availableBalance": "23.72469206",
        "maxWithdrawAmount": "23.72469206",
        "marginAvailable": true,
        "updateTime": 1617939110373
    }
    """
    update_time = data.get("updateTime")
    return AccountBalance(
        asset=data["asset"],
        balance=_decimal(data["balance"]),
        cross_wallet_balance=_decimal(data.get("crossWalletBalance", "0")),
        cross_un_pnl=_decimal(data.get("crossUnPnl", "0")),
        available_balance=_decimal(data["availableBalance"]),
        max_withdraw_amount=_decimal(data.get("maxWithdrawAmount", "0")),
        account_alias=data.get("accountAlias", ""),
        update_time=int(update_time) if update_time is not None else None,
    )


def _parse_account_asset(data: dict[str, Any]) -> AccountAsset:
    return AccountAsset(
        asset=data["asset"],
        wallet_balance=_decimal(data["walletBalance"]),
        unrealized_profit=_decimal(data.get("unrealizedProfit", "0")),
        margin_balance=_decimal(data.get("marginBalance", "0")),
        maint_margin=_decimal(data.get("maintMargin", "0")),
        initial_margin=_decimal(data.get("initialMargin", "0")),
        position_initial_margin=_decimal(data.get("positionInitialMargin", "0")),
        open_order_initial_margin=_decimal(data.get("openOrderInitialMargin", "0")),
        max_withdraw_amount=_decimal(data.get("maxWithdrawAmount", "0")),
    )


def _parse_account_position(data: dict[str, Any]) -> AccountPosition:
    return AccountPosition(
        symbol=data["symbol"],
        initial_margin=_decimal(data.get("initialMargin", "0")),
        maint_margin=_decimal(data.get("maintMargin", "0")),
        unrealized_profit=_decimal(data.get("unrealizedProfit", "0")),
        position_initial_margin=_decimal(data.get("positionInitialMargin", "0")),
        open_order_initial_margin=_decimal(data.get("openOrderInitialMargin", "0")),
        leverage=int(data.get("leverage", 1)),
        isolated=_bool(data.get("isolated", False)),
        entry_price=_decimal(data.get("entryPrice", "0")),
        max_notional=_decimal(data.get("maxNotional", "0")),
        position_side=data.get("positionSide", "BOTH"),
        position_amt=_decimal(data.get("positionAmt", "0")),
    )


def parse_account_information(data: dict[str, Any]) -> AccountInformation:
    """GET /fapi/v2/account 응답"""
    return AccountInformation(
        can_deposit=_bool(data["canDeposit"]),
        can_trade=_bool(data["canTrade"]),
        can_withdraw=_bool(data["canWithdraw"]),
        fee_tier=int(data["feeTier"]),
        max_withdraw_amount=_decimal(data["maxWithdrawAmount"]),
        total_initial_margin=_decimal(data["totalInitialMargin"]),
        total_maint_margin=_decimal(data["totalMaintMargin"]),
        total_margin_balance=_decimal(data["totalMarginBalance"]),
        total_open_order_initial_margin=_decimal(data["totalOpenOrderInitialMargin"]),
        total_position_initial_margin=_decimal(data["totalPositionInitialMargin"]),
        total_unrealized_profit=_decimal(data["totalUnrealizedProfit"]),
        total_wallet_balance=_decimal(data["totalWalletBalance"]),
        update_time=int(data.get("updateTime", 0)),
        assets=tuple(_parse_account_asset(item) for item in data.get("assets", [])),
        positions=tuple(_parse_account_position(item) for item in data.get("positions", [])),
    )


def parse_leverage(data: dict[str, Any]) -> Leverage:
    """POST /fapi/v1/leverage 응답"""
    return Leverage(
        symbol=data["symbol"],
        leverage=int(data["leverage"]),
        max_notional_value=_decimal(data["maxNotionalValue"]),
    )


def parse_position_risk(data: dict[str, Any]) -> PositionRisk:
    """Binance 포지션 응답 -> PositionRisk

    Binance GET /fapi/v2/positionRisk 응답 항목 예시:
    {
        "entryPrice": "0.00000",
        "marginType": "isolated",
        "isAutoAddMargin": "false",
        "isolatedMargin": "0.00000000",
        "leverage": "10",
        "liquidationPrice": "0",
        "markPrice": "6679.50671178",
        "maxNotionalValue": "20000000",
        "positionAmt": "0.000",
        "symbol": "BTCUSDT",
        "unRealizedProfit": "0.00000000",
        "positionSide": "BOTH"
    }
    """
    return PositionRisk(
        symbol=data["symbol"],
        position_amt=_decimal(data["positionAmt"]),
        entry_price=_decimal(data["entryPrice"]),
        mark_price=_decimal(data.get("markPrice", "0")),
        un_realized_profit=_decimal(data.get("unRealizedProfit", "0")),
        liquidation_price=_decimal(data.get("liquidationPrice", "0")),
        leverage=int(data.get("leverage", 1)),
        max_notional_value=_decimal(data.get("maxNotionalValue", "0")),
        margin_type=data.get("marginType", "cross").upper(),
        isolated_margin=_decimal(data.get("isolatedMargin", "0")),
        position_side=data.get("positionSide", "BOTH"),
    )


def parse_my_trade(data: dict[str, Any]) -> MyTrade:
    """GET /fapi/v1/userTrades 항목

    {
        "buyer": false,
        "commission": "-0.07819010",
        "commissionAsset": "USDT",
        "id": 698759,
        "maker": false,
        "orderId": 25851813,
        "price": "7819.01",
        "qty": "0.002",
        "quoteQty": "15.63802",
        "realizedPnl": "-0.91539999",
        "side": "SELL",
        "positionSide": "SHORT",
        "symbol": "BTCUSDT",
        "time": 1569514978020
    }
    """
    price = _decimal(data["price"])
    qty = _decimal(data["qty"])
    quote_qty = data.get("quoteQty")

    return MyTrade(
        id=int(data["id"]),
        order_id=int(data["orderId"]),
        symbol=data["symbol"],
        side=data["side"],
        position_side=data.get("positionSide", "BOTH"),
        price=price,
        qty=qty,
        quote_qty=_decimal(quote_qty) if quote_qty is not None else price * qty,
        realized_pnl=_decimal(data.get("realizedPnl", "0")),
        commission=_decimal(data.get("commission", "0")),
        commission_asset=data.get("commissionAsset", ""),
        time=int(data["time"]),
        is_buyer=_bool(data.get("buyer", False)),
        is_maker=_bool(data.get("maker", False)),
        margin_asset=data.get("marginAsset"),
    )


def parse_income(data: dict[str, Any]) -> Income:
    """GET /fapi/v1/income 항목"""
    tran_id = data.get("tranId")
    return Income(
        symbol=data.get("symbol", ""),
        income_type=data["incomeType"],
        income=_decimal(data["income"]),
        asset=data["asset"],
        time=int(data["time"]),
        info=str(data.get("info", "")),
        tran_id=int(tran_id) if tran_id not in (None, "") else None,
        trade_id=str(data.get("tradeId", "")),
    )
