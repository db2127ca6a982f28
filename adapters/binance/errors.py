"""
Binance 클라이언트 에러 계층

모든 실패는 BinanceClientError 하위 타입 하나로 호출자에게 전달된다.

    BinanceClientError
    ├── TransportError   연결 실패, DNS, 타임아웃 (HTTP 응답 없음)
    ├── ExchangeError    거래소가 거부 (non-2xx 또는 음수 code)
    │   ├── RateLimitError
    │   └── OrderError
    └── ProtocolError    2xx 응답이지만 본문 해석 불가
"""


class BinanceClientError(Exception):
    """클라이언트 레벨 공통 에러"""


class TransportError(BinanceClientError):
    """전송 계층 에러

    응답을 받지 못한 경우 (연결 거부, DNS 실패, 타임아웃).

    Attributes:
        description: 전송 실패 설명
        timed_out: 타임아웃 여부
    """

    def __init__(self, description: str, timed_out: bool = False):
        self.description = description
        self.timed_out = timed_out
        kind = "timeout" if timed_out else "transport"
        super().__init__(f"Binance {kind} error: {description}")


class ExchangeError(BinanceClientError):
    """Binance API 에러

    거래소가 에러 코드와 메시지로 요청을 거부했을 때 발생.
    code/message는 거래소 응답 그대로 보존.

    Attributes:
        code: 거래소 에러 코드 (에러 본문이 없으면 HTTP 상태 코드)
        message: 거래소 에러 메시지
        status_code: HTTP 상태 코드
    """

    def __init__(self, code: int, message: str, status_code: int | None = None):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"Binance API Error [{code}]: {message}")


class RateLimitError(ExchangeError):
    """Rate Limit 초과 에러

    429 (또는 IP 차단 418) 응답 수신 시 발생.
    retry_after 초 후 재시도 필요. 클라이언트는 재시도하지 않음.
    """

    def __init__(
        self,
        retry_after: int,
        message: str = "Rate limit exceeded",
        status_code: int = 429,
        code: int | None = None,
    ):
        self.retry_after = retry_after
        super().__init__(
            code=code if code is not None else status_code,
            message=message,
            status_code=status_code,
        )

    def __str__(self) -> str:
        return f"{self.message}. Retry after {self.retry_after} seconds."


class OrderError(ExchangeError):
    """주문 관련 에러

    주문 생성/취소 실패 시 발생.
    """
    pass


class ProtocolError(BinanceClientError):
    """응답 형식 에러

    2xx 응답이지만 JSON이 아니거나 기대한 형태로 변환할 수 없는 경우.
    "거래소가 거부함"과 "계약 불일치"를 구분하기 위한 별도 타입.

    Attributes:
        reason: 실패 사유
        status_code: HTTP 상태 코드
        body: 응답 본문 (최대 500자)
    """

    def __init__(self, reason: str, status_code: int | None = None, body: str = ""):
        self.reason = reason
        self.status_code = status_code
        self.body = body[:500]
        super().__init__(f"Unexpected Binance response ({status_code}): {reason}")
