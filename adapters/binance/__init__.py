"""
Binance 어댑터

Binance USDT-M Futures REST API 연동을 담당.
"""

from adapters.binance.rest_client import BinanceRestClient
from adapters.binance.dispatcher import RequestDispatcher, generate_signature
from adapters.binance.endpoints import Endpoint, Endpoints
from adapters.binance.errors import (
    BinanceClientError,
    ExchangeError,
    OrderError,
    ProtocolError,
    RateLimitError,
    TransportError,
)
from adapters.binance.rate_limiter import RateLimitTracker

__all__ = [
    "BinanceRestClient",
    "RequestDispatcher",
    "generate_signature",
    "Endpoint",
    "Endpoints",
    "BinanceClientError",
    "ExchangeError",
    "OrderError",
    "ProtocolError",
    "RateLimitError",
    "TransportError",
    "RateLimitTracker",
]
