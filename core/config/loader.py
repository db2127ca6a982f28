"""
설정 로더

secrets.yaml 로드 및 클라이언트 설정(Credentials, RequestOptions) 생성
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from core.constants import BinanceEndpoints, Defaults, Paths
from core.types import TradingMode


@dataclass(frozen=True)
class Credentials:
    """API 인증 정보

    빈 문자열이면 공개 엔드포인트 전용 클라이언트.
    api_secret은 repr에 노출하지 않음.
    """

    api_key: str = ""
    api_secret: str = field(default="", repr=False)

    @property
    def is_empty(self) -> bool:
        """키가 설정되지 않았는지 여부"""
        return not self.api_key


@dataclass(frozen=True)
class RequestOptions:
    """요청 옵션 (생성 후 불변)

    Attributes:
        base_url: REST API 베이스 URL
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 응답 대기 타임아웃 (초)
        proxy: 프록시 URL (예: http://127.0.0.1:8080)
        recv_window: 서명 요청의 recvWindow (밀리초, None이면 전송 안 함)
    """

    base_url: str = BinanceEndpoints.PROD_REST_URL
    connect_timeout: float = Defaults.CONNECT_TIMEOUT_SEC
    read_timeout: float = Defaults.READ_TIMEOUT_SEC
    proxy: str | None = None
    recv_window: int | None = Defaults.RECV_WINDOW_MS

    def __post_init__(self) -> None:
        """유효성 검증"""
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        if self.connect_timeout <= 0 or self.read_timeout <= 0:
            raise ValueError("timeouts must be positive")
        if self.recv_window is not None and not 0 < self.recv_window <= 60000:
            raise ValueError("recv_window must be in (0, 60000]")
        # 끝 슬래시 제거 (경로 결합 시 // 방지)
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))


@dataclass(frozen=True)
class Secrets:
    """보안 설정 (secrets.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    mode: TradingMode
    api_key: str
    api_secret: str = field(repr=False)


@dataclass(frozen=True)
class ClientConfig:
    """클라이언트 생성에 필요한 전체 설정"""

    credentials: Credentials
    options: RequestOptions


class SecretsLoadError(Exception):
    """Secrets 로드 실패 예외"""

    pass


def _read_yaml(path: Path | None) -> dict[str, Any]:
    """YAML 파일을 dict로 로드"""
    if path is None:
        path = Paths.SECRETS_FILE

    if not path.exists():
        raise SecretsLoadError(f"secrets.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SecretsLoadError(f"secrets.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SecretsLoadError("secrets.yaml이 비어 있습니다")
    if not isinstance(data, dict):
        raise SecretsLoadError("secrets.yaml 최상위는 매핑이어야 합니다")

    return data


def _parse_secrets(data: dict[str, Any]) -> Secrets:
    # mode 검증
    mode_str = data.get("mode")
    if mode_str is None:
        raise SecretsLoadError("secrets.yaml에 'mode' 필드가 없습니다")

    try:
        mode = TradingMode(mode_str)
    except ValueError as e:
        valid_modes = [m.value for m in TradingMode]
        raise ValueError(
            f"유효하지 않은 mode입니다: '{mode_str}'. "
            f"유효한 값: {valid_modes}"
        ) from e

    # 해당 모드의 API 키 로드
    mode_config = data.get(mode.value)
    if mode_config is None:
        raise SecretsLoadError(
            f"secrets.yaml에 '{mode.value}' 설정이 없습니다"
        )

    api_key = mode_config.get("api_key")
    api_secret = mode_config.get("api_secret")

    if not api_key:
        raise SecretsLoadError(
            f"secrets.yaml의 {mode.value} 섹션에 'api_key'가 없습니다"
        )
    if not api_secret:
        raise SecretsLoadError(
            f"secrets.yaml의 {mode.value} 섹션에 'api_secret'가 없습니다"
        )

    return Secrets(mode=mode, api_key=str(api_key), api_secret=str(api_secret))


def _parse_options(data: dict[str, Any], mode: TradingMode) -> RequestOptions:
    options = data.get("options") or {}
    if not isinstance(options, dict):
        raise SecretsLoadError("secrets.yaml의 'options'는 매핑이어야 합니다")

    unknown = set(options) - {
        "base_url", "connect_timeout", "read_timeout", "proxy", "recv_window",
    }
    if unknown:
        raise SecretsLoadError(
            f"secrets.yaml의 options에 알 수 없는 키가 있습니다: {sorted(unknown)}"
        )

    default_url = (
        BinanceEndpoints.PROD_REST_URL
        if mode == TradingMode.PRODUCTION
        else BinanceEndpoints.TEST_REST_URL
    )

    return RequestOptions(
        base_url=options.get("base_url") or default_url,
        connect_timeout=float(options.get("connect_timeout", Defaults.CONNECT_TIMEOUT_SEC)),
        read_timeout=float(options.get("read_timeout", Defaults.READ_TIMEOUT_SEC)),
        proxy=options.get("proxy"),
        recv_window=options.get("recv_window", Defaults.RECV_WINDOW_MS),
    )


def load_secrets(path: Path | None = None) -> Secrets:
    """secrets.yaml 파일 로드

    Args:
        path: secrets.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Secrets 인스턴스

    Raises:
        SecretsLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 mode인 경우
    """
    return _parse_secrets(_read_yaml(path))


def load_request_options(path: Path | None = None) -> RequestOptions:
    """secrets.yaml의 options 섹션으로 RequestOptions 생성

    base_url이 없으면 mode에 맞는 기본 URL 사용.
    """
    data = _read_yaml(path)
    secrets = _parse_secrets(data)
    return _parse_options(data, secrets.mode)


def load_client_config(path: Path | None = None) -> ClientConfig:
    """secrets.yaml 한 번 읽어서 Credentials + RequestOptions 생성"""
    data = _read_yaml(path)
    secrets = _parse_secrets(data)
    return ClientConfig(
        credentials=Credentials(api_key=secrets.api_key, api_secret=secrets.api_secret),
        options=_parse_options(data, secrets.mode),
    )

