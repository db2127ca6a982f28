"""
어댑터 테스트 픽스처

Binance 응답 샘플과 클라이언트 공통 설정 제공.
"""

from typing import Any

import pytest

from core.config.loader import Credentials, RequestOptions


TEST_BASE_URL = "https://fapi.binance.com"
TEST_API_KEY = "test_api_key"
TEST_API_SECRET = "test_api_secret"


@pytest.fixture
def credentials() -> Credentials:
    """테스트용 API 인증 정보"""
    return Credentials(api_key=TEST_API_KEY, api_secret=TEST_API_SECRET)


@pytest.fixture
def options() -> RequestOptions:
    """테스트용 요청 옵션"""
    return RequestOptions(base_url=TEST_BASE_URL, connect_timeout=1.0, read_timeout=1.0)


# -------------------------------------------------------------------------
# 응답 샘플
# -------------------------------------------------------------------------

@pytest.fixture
def order_book_payload() -> dict[str, Any]:
    """GET /fapi/v1/depth 응답"""
    return {
        "lastUpdateId": 1027024,
        "E": 1589436922972,
        "T": 1589436922959,
        "bids": [["4.00000000", "431.00000000"], ["3.99000000", "10.00000000"]],
        "asks": [["4.00000200", "12.00000000"]],
    }


@pytest.fixture
def order_payload() -> dict[str, Any]:
    """POST /fapi/v1/order 응답"""
    return {
        "clientOrderId": "testOrder",
        "cumQty": "0",
        "cumQuote": "0",
        "executedQty": "0",
        "orderId": 22542179,
        "avgPrice": "0.00000",
        "origQty": "10",
        "price": "0",
        "reduceOnly": False,
        "side": "BUY",
        "positionSide": "SHORT",
        "status": "NEW",
        "stopPrice": "9300",
        "closePosition": False,
        "symbol": "BTCUSDT",
        "timeInForce": "GTC",
        "type": "TRAILING_STOP_MARKET",
        "origType": "TRAILING_STOP_MARKET",
        "activatePrice": "9020",
        "priceRate": "0.3",
        "updateTime": 1566818724722,
        "workingType": "CONTRACT_PRICE",
        "priceProtect": False,
    }


@pytest.fixture
def mark_price_payload() -> dict[str, Any]:
    """GET /fapi/v1/premiumIndex 응답 (symbol 지정)"""
    return {
        "symbol": "BTCUSDT",
        "markPrice": "11793.63104562",
        "indexPrice": "11781.80495970",
        "estimatedSettlePrice": "11781.16138815",
        "lastFundingRate": "0.00038246",
        "interestRate": "0.00010000",
        "nextFundingTime": 1597392000000,
        "time": 1597370495002,
    }


@pytest.fixture
def position_risk_payload() -> dict[str, Any]:
    """GET /fapi/v2/positionRisk 항목"""
    return {
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
        "positionSide": "BOTH",
    }


@pytest.fixture
def balance_payload() -> dict[str, Any]:
    """GET /fapi/v2/balance 항목"""
    return {
        "accountAlias": "SgsR",
        "asset": "USDT",
        "balance": "122607.35137903",
        "crossWalletBalance": "23.72469206",
        "crossUnPnl": "0.00000000",
        "availableBalance": "23.72469206",
        "maxWithdrawAmount": "23.72469206",
        "marginAvailable": True,
        "updateTime": 1617939110373,
    }


@pytest.fixture
def account_information_payload() -> dict[str, Any]:
    """GET /fapi/v2/account 응답"""
    return {
        "feeTier": 0,
        "canTrade": True,
        "canDeposit": True,
        "canWithdraw": True,
        "updateTime": 0,
        "totalInitialMargin": "0.00000000",
        "totalMaintMargin": "0.00000000",
        "totalWalletBalance": "23.72469206",
        "totalUnrealizedProfit": "0.00000000",
        "totalMarginBalance": "23.72469206",
        "totalPositionInitialMargin": "0.00000000",
        "totalOpenOrderInitialMargin": "0.00000000",
        "maxWithdrawAmount": "23.72469206",
        "assets": [
            {
                "asset": "USDT",
                "walletBalance": "23.72469206",
                "unrealizedProfit": "0.00000000",
                "marginBalance": "23.72469206",
                "maintMargin": "0.00000000",
                "initialMargin": "0.00000000",
                "positionInitialMargin": "0.00000000",
                "openOrderInitialMargin": "0.00000000",
                "maxWithdrawAmount": "23.72469206",
            }
        ],
        "positions": [
            {
                "symbol": "BTCUSDT",
                "initialMargin": "0",
                "maintMargin": "0",
                "unrealizedProfit": "0.00000000",
                "positionInitialMargin": "0",
                "openOrderInitialMargin": "0",
                "leverage": "100",
                "isolated": True,
                "entryPrice": "0.00000",
                "maxNotional": "250000",
                "positionSide": "BOTH",
                "positionAmt": "0",
            }
        ],
    }


@pytest.fixture
def exchange_information_payload() -> dict[str, Any]:
    """GET /fapi/v1/exchangeInfo 응답 (축약)"""
    return {
        "timezone": "UTC",
        "serverTime": 1565613908500,
        "rateLimits": [
            {"rateLimitType": "REQUEST_WEIGHT", "interval": "MINUTE", "intervalNum": 1, "limit": 2400},
        ],
        "exchangeFilters": [],
        "symbols": [
            {
                "symbol": "BTCUSDT",
                "status": "TRADING",
                "maintMarginPercent": "2.5000",
                "requiredMarginPercent": "5.0000",
                "baseAsset": "BTC",
                "quoteAsset": "USDT",
                "pricePrecision": 2,
                "quantityPrecision": 3,
                "baseAssetPrecision": 8,
                "quotePrecision": 8,
                "orderTypes": ["LIMIT", "MARKET"],
                "timeInForce": ["GTC", "IOC", "FOK", "GTX"],
                "filters": [
                    {"filterType": "PRICE_FILTER", "minPrice": "0.01", "maxPrice": "100000", "tickSize": "0.01"},
                    {"filterType": "LOT_SIZE", "minQty": "0.001", "maxQty": "1000", "stepSize": "0.001"},
                ],
            }
        ],
    }
