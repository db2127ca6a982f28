"""
어댑터 레이어

외부 서비스(거래소) 연동을 담당.
Protocol 기반 인터페이스로 Mock 교체 가능.
"""

from adapters.interfaces import ISyncRequestClient
from adapters.models import (
    BatchOrderResult,
    Order,
    OrderBook,
    PositionRisk,
    ResponseResult,
)

__all__ = [
    # Interfaces
    "ISyncRequestClient",
    # Models
    "BatchOrderResult",
    "Order",
    "OrderBook",
    "PositionRisk",
    "ResponseResult",
]
