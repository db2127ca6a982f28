"""
pytest 공통 fixture 정의

설정 로더 테스트용 secrets.yaml fixture
"""

import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_secrets_file(temp_dir: Path) -> Path:
    """테스트용 secrets.yaml 파일 생성"""
    secrets_content = """# 테스트용 secrets.yaml
mode: testnet

production:
  api_key: "prod_api_key_12345"
  api_secret: "prod_api_secret_67890"

testnet:
  api_key: "test_api_key_abcde"
  api_secret: "test_api_secret_fghij"
"""
    secrets_path = temp_dir / "secrets.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path


@pytest.fixture
def temp_secrets_file_production(temp_dir: Path) -> Path:
    """테스트용 secrets.yaml 파일 생성 (production 모드)"""
    secrets_content = """mode: production

production:
  api_key: "prod_api_key_12345"
  api_secret: "prod_api_secret_67890"

testnet:
  api_key: "test_api_key_abcde"
  api_secret: "test_api_secret_fghij"
"""
    secrets_path = temp_dir / "secrets_prod.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path


@pytest.fixture
def temp_secrets_file_invalid_mode(temp_dir: Path) -> Path:
    """잘못된 모드의 secrets.yaml 파일 생성"""
    secrets_content = """mode: invalid_mode

production:
  api_key: "prod_api_key"
  api_secret: "prod_api_secret"

testnet:
  api_key: "test_api_key"
  api_secret: "test_api_secret"
"""
    secrets_path = temp_dir / "secrets_invalid.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path


@pytest.fixture
def temp_secrets_file_with_options(temp_dir: Path) -> Path:
    """options 섹션이 있는 secrets.yaml 파일 생성"""
    secrets_content = """mode: production

production:
  api_key: "prod_api_key_12345"
  api_secret: "prod_api_secret_67890"

testnet:
  api_key: "test_api_key_abcde"
  api_secret: "test_api_secret_fghij"

options:
  base_url: "https://proxy.example.com/"
  connect_timeout: 3
  read_timeout: 7.5
  proxy: "http://127.0.0.1:8080"
  recv_window: 10000
"""
    secrets_path = temp_dir / "secrets_options.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path
