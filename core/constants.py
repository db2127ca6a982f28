"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class BinanceEndpoints:
    """Binance API 엔드포인트 (고정값)

    공식 문서: https://developers.binance.com/docs/derivatives/usds-margined-futures/general-info
    """

    # Production (USDT-M Futures)
    PROD_REST_URL: str = "https://fapi.binance.com"

    # Testnet (USDT-M Futures)
    TEST_REST_URL: str = "https://demo-fapi.binance.com"


class Headers:
    """요청/응답 헤더 이름"""

    API_KEY: str = "X-MBX-APIKEY"
    USED_WEIGHT_1M: str = "x-mbx-used-weight-1m"
    ORDER_COUNT_1M: str = "x-mbx-order-count-1m"
    RETRY_AFTER: str = "retry-after"


class Defaults:
    """기본값 상수"""

    CONNECT_TIMEOUT_SEC: float = 10.0
    READ_TIMEOUT_SEC: float = 30.0
    RECV_WINDOW_MS: int = 5000

    LOG_LEVEL: str = "INFO"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    SECRETS_FILE: Path = CONFIG_DIR / "secrets.yaml"


class RateLimitThresholds:
    """Rate Limit 임계값 (1분 가중치, USDT-M 한도 2400)"""

    WEIGHT_WARN: int = 1500  # 경고
    WEIGHT_SLOW: int = 2000  # 속도 저하
    WEIGHT_STOP: int = 2300  # 요청 중단 권고
