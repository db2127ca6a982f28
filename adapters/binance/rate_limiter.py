"""
Binance Rate Limit 추적

응답 헤더에서 Rate Limit 정보를 추적하고 임계값 상태를 제공.
요청을 지연/재시도하지 않음 (관측 전용).

여러 스레드가 같은 추적기를 갱신할 수 있으므로 갱신과 스냅샷은 락 안에서 수행.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from core.constants import Headers, RateLimitThresholds


def _to_int(value: Any) -> int | None:
    # 숫자가 아닌 헤더 값은 무시
    if value is None or not str(value).strip().isdigit():
        return None
    return int(value)


@dataclass
class RateLimitTracker:
    """Rate Limit 추적기

    Binance API 응답 헤더에서 Rate Limit 정보를 추출하여 추적.

    Binance Rate Limit 헤더:
    - X-MBX-USED-WEIGHT-1m: 1분간 사용된 요청 가중치
    - X-MBX-ORDER-COUNT-1m: 1분간 주문 수
    - Retry-After: 429 응답 시 대기 시간 (초)
    """

    used_weight_1m: int = 0
    order_count_1m: int = 0
    retry_after: int = 0
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def update_from_headers(self, headers: Mapping[str, Any]) -> None:
        """응답 헤더에서 Rate Limit 정보 업데이트

        가중치/주문 수는 헤더가 없으면 이전 값 유지.
        Retry-After는 응답마다 갱신 (없으면 0).

        Args:
            headers: HTTP 응답 헤더 (대소문자 무관)
        """
        headers_lower = {k.lower(): v for k, v in headers.items()}
        weight = _to_int(headers_lower.get(Headers.USED_WEIGHT_1M))
        order_count = _to_int(headers_lower.get(Headers.ORDER_COUNT_1M))
        retry_after = _to_int(headers_lower.get(Headers.RETRY_AFTER))

        with self._lock:
            if weight is not None:
                self.used_weight_1m = weight
            if order_count is not None:
                self.order_count_1m = order_count
            self.retry_after = retry_after or 0
            self.last_updated = datetime.now(timezone.utc)

    @property
    def should_warn(self) -> bool:
        """경고 임계값 도달 여부"""
        return self.used_weight_1m >= RateLimitThresholds.WEIGHT_WARN

    @property
    def should_slow_down(self) -> bool:
        """속도 저하 필요 여부"""
        return self.used_weight_1m >= RateLimitThresholds.WEIGHT_SLOW

    @property
    def should_stop(self) -> bool:
        """요청 중단 필요 여부"""
        return self.used_weight_1m >= RateLimitThresholds.WEIGHT_STOP

    @property
    def remaining_weight(self) -> int:
        """남은 가중치 (STOP 임계값 기준)"""
        return max(0, RateLimitThresholds.WEIGHT_STOP - self.used_weight_1m)

    def reset(self) -> None:
        """카운터 리셋"""
        with self._lock:
            self.used_weight_1m = 0
            self.order_count_1m = 0
            self.retry_after = 0
            self.last_updated = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (로깅용, 일관된 스냅샷)"""
        with self._lock:
            return {
                "used_weight_1m": self.used_weight_1m,
                "order_count_1m": self.order_count_1m,
                "retry_after": self.retry_after,
                "last_updated": self.last_updated.isoformat(),
                "should_warn": self.should_warn,
                "should_slow_down": self.should_slow_down,
                "should_stop": self.should_stop,
            }
