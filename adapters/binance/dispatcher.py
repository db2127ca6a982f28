"""
서명 요청 디스패처

엔드포인트 기술자 + 파라미터를 받아 HTTP 요청 1건을 생성/서명/전송하고
응답을 값 타입으로 변환한다. 재시도하지 않음.

서명 규칙:
    1. 스키마 순서대로 파라미터 직렬화 (None 제외)
    2. recvWindow, timestamp 추가 (서명 전)
    3. 완성된 query string에 HMAC-SHA256 → signature를 마지막에 추가
    4. query string을 그대로 URL에 붙여 전송 (서명한 바이트 = 전송한 바이트)
"""

import hashlib
import hmac
import json
import logging
import time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping
from urllib.parse import urlencode

import httpx

from core.config.loader import Credentials, RequestOptions
from core.constants import Headers
from adapters.binance.endpoints import Endpoint
from adapters.binance.errors import (
    ExchangeError,
    ProtocolError,
    RateLimitError,
    TransportError,
)
from adapters.binance.rate_limiter import RateLimitTracker

logger = logging.getLogger(__name__)


def serialize_value(value: Any) -> str:
    """파라미터 값을 wire 문자열로 변환

    bool은 "true"/"false", Enum은 value, Decimal/float는 지수 표기 없이.
    float는 repr 기준 최단 표현을 사용 (0.00001 → "0.00001").
    """
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    return str(value)


def build_query(
    endpoint: Endpoint,
    params: Mapping[str, Any] | None = None,
) -> list[tuple[str, str]]:
    """스키마 순서로 정렬된 (이름, 값) 목록 생성

    Raises:
        ValueError: 스키마에 없는 파라미터 또는 필수 파라미터 누락
    """
    params = dict(params or {})

    unknown = set(params) - set(endpoint.params)
    if unknown:
        raise ValueError(f"{endpoint.name}: unknown params {sorted(unknown)}")

    missing = [name for name in endpoint.required if params.get(name) is None]
    if missing:
        raise ValueError(f"{endpoint.name}: missing required params {missing}")

    return [
        (name, serialize_value(params[name]))
        for name in endpoint.params
        if params.get(name) is not None
    ]


def generate_signature(secret: str, query_string: str) -> str:
    """HMAC-SHA256 서명 생성

    Args:
        secret: API 시크릿
        query_string: URL 인코딩된 파라미터 문자열

    Returns:
        16진수 서명 문자열
    """
    return hmac.new(
        secret.encode("utf-8"),
        query_string.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


class RequestDispatcher:
    """엔드포인트 기술자 기반 요청 실행기

    Credentials/RequestOptions는 생성 후 변경되지 않으며, 호출 간 상태를
    보존하지 않으므로 여러 스레드에서 동시에 사용할 수 있다.
    httpx.Client(커넥션 풀)는 인스턴스 수명 동안 재사용.

    Args:
        credentials: API 키/시크릿
        options: 요청 옵션
        transport: httpx 전송 계층 교체용 (테스트)
    """

    def __init__(
        self,
        credentials: Credentials,
        options: RequestOptions,
        transport: httpx.BaseTransport | None = None,
    ):
        self.credentials = credentials
        self.options = options
        self.rate_tracker = RateLimitTracker()

        # 서버 시간 동기화용 오프셋 (밀리초), sync_time() 호출 시에만 변경
        self.time_offset: int = 0

        self._client = httpx.Client(
            timeout=httpx.Timeout(options.read_timeout, connect=options.connect_timeout),
            proxy=options.proxy,
            transport=transport,
        )

    def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if not self._client.is_closed:
            self._client.close()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def get_timestamp(self) -> int:
        """서버 시간 오프셋이 적용된 타임스탬프 반환 (밀리초)"""
        return int(time.time() * 1000) + self.time_offset

    def prepare(
        self,
        endpoint: Endpoint,
        params: Mapping[str, Any] | None = None,
        timestamp: int | None = None,
    ) -> tuple[str, dict[str, str]]:
        """전송할 query string과 헤더 생성 (I/O 없음)

        Returns:
            (query string, headers)
        """
        if endpoint.needs_api_key and not self.credentials.api_key:
            raise ValueError(f"{endpoint.name}: api_key is required")
        if endpoint.is_signed and not self.credentials.api_secret:
            raise ValueError(f"{endpoint.name}: api_secret is required")

        query = build_query(endpoint, params)
        headers: dict[str, str] = {}

        if endpoint.needs_api_key:
            headers[Headers.API_KEY] = self.credentials.api_key

        if endpoint.is_signed:
            if self.options.recv_window is not None:
                query.append(("recvWindow", str(self.options.recv_window)))
            if timestamp is None:
                timestamp = self.get_timestamp()
            query.append(("timestamp", str(timestamp)))

            query_string = urlencode(query)
            signature = generate_signature(self.credentials.api_secret, query_string)
            return f"{query_string}&signature={signature}", headers

        return urlencode(query), headers

    def dispatch(
        self,
        endpoint: Endpoint,
        params: Mapping[str, Any] | None = None,
        timestamp: int | None = None,
    ) -> Any:
        """API 요청 실행

        Args:
            endpoint: 엔드포인트 기술자
            params: wire 이름 기준 파라미터 (None 값은 생략)
            timestamp: 서명 요청의 timestamp (None이면 현재 시각)

        Returns:
            endpoint.parser로 변환된 결과

        Raises:
            ValueError: 파라미터 오류 (요청 전송 전)
            TransportError: 연결 실패/타임아웃
            ExchangeError: 거래소 에러 응답
            ProtocolError: 응답 해석 실패
        """
        query_string, headers = self.prepare(endpoint, params, timestamp)
        url = f"{self.options.base_url}{endpoint.path}"
        if query_string:
            url = f"{url}?{query_string}"

        logger.debug(
            "Binance request",
            extra={"endpoint": endpoint.name, "method": endpoint.method.value, "path": endpoint.path},
        )

        try:
            response = self._client.request(endpoint.method.value, url, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(
                "Request timeout",
                extra={"endpoint": endpoint.name, "path": endpoint.path},
            )
            raise TransportError(f"{type(e).__name__}: {e}", timed_out=True) from e
        except httpx.RequestError as e:
            logger.error(
                "Request error",
                extra={"endpoint": endpoint.name, "path": endpoint.path, "error": str(e)},
            )
            raise TransportError(f"{type(e).__name__}: {e}") from e

        self._track_rate_limit(response)
        data = self._decode(endpoint, response)

        try:
            if endpoint.many:
                # symbol 지정 시 단일 객체로 응답하는 엔드포인트 정규화
                items = data if isinstance(data, list) else [data]
                return [endpoint.parser(item) for item in items]
            return endpoint.parser(data)
        except (KeyError, IndexError, TypeError, ValueError, InvalidOperation) as e:
            logger.error(
                "응답 변환 실패",
                extra={"endpoint": endpoint.name, "error": repr(e)},
            )
            raise ProtocolError(
                f"cannot parse {endpoint.name} response: {e!r}",
                status_code=response.status_code,
                body=response.text,
            ) from e

    def _track_rate_limit(self, response: httpx.Response) -> None:
        """Rate Limit 헤더 추적 (관측 전용)"""
        self.rate_tracker.update_from_headers(response.headers)
        if self.rate_tracker.should_warn:
            logger.warning(
                "Rate limit threshold reached",
                extra={"rate_info": self.rate_tracker.to_dict()},
            )

    def _decode(self, endpoint: Endpoint, response: httpx.Response) -> Any:
        """상태 코드 확인 후 JSON 본문 반환"""
        status = response.status_code

        if status in (418, 429):
            retry_after = _retry_after(response)
            code, message = _error_fields(response)
            logger.warning(
                "Rate limited by Binance",
                extra={"endpoint": endpoint.name, "status": status, "retry_after": retry_after},
            )
            raise RateLimitError(
                retry_after=retry_after,
                message=message or "Rate limit exceeded",
                status_code=status,
                code=code,
            )

        if not 200 <= status < 300:
            code, message = _error_fields(response)
            logger.error(
                "Binance API error",
                extra={"endpoint": endpoint.name, "status": status, "error_code": code, "error_message": message},
            )
            raise ExchangeError(code=code, message=message, status_code=status)

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ProtocolError(
                f"invalid JSON body: {e}",
                status_code=status,
                body=response.text,
            ) from e

        # 2xx이지만 {"code": -1xxx, "msg": ...} 형태의 거부 응답
        if isinstance(data, dict) and isinstance(data.get("code"), int) and data["code"] < 0:
            logger.error(
                "Binance API error",
                extra={"endpoint": endpoint.name, "status": status, "error_code": data["code"], "error_message": data.get("msg")},
            )
            raise ExchangeError(code=data["code"], message=str(data.get("msg", "")), status_code=status)

        return data


def _error_fields(response: httpx.Response) -> tuple[int, str]:
    """에러 응답에서 (code, msg) 추출, 구조화된 본문이 없으면 (status, text)"""
    try:
        error_data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.status_code, response.text

    if isinstance(error_data, dict) and "code" in error_data:
        try:
            code = int(error_data["code"])
        except (TypeError, ValueError):
            return response.status_code, response.text
        return code, str(error_data.get("msg", response.text))

    return response.status_code, response.text


def _retry_after(response: httpx.Response) -> int:
    """Retry-After 헤더 (초), 없거나 숫자가 아니면 0"""
    value = response.headers.get(Headers.RETRY_AFTER, "")
    return int(value) if value.strip().isdigit() else 0
