"""
설정 로더 모듈

YAML 설정 파일(또는 URL)을 순서대로 읽어 병합합니다.
환경 변수를 통한 오버라이드를 지원합니다.
"""

import copy
import os
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Sequence, Union
from urllib.parse import urlparse

import requests
import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = '/opt/devtools/config.yaml'
CONFIG_PATH_ENV = 'DEVTOOLS_CONFIG_PATH'
URL_FETCH_TIMEOUT = 10


def is_valid_url(value: str) -> bool:
    """http(s) URL인지 확인합니다."""
    parsed = urlparse(value)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    두 딕셔너리를 재귀적으로 병합합니다. override 값이 우선합니다.

    리스트는 병합하지 않고 통째로 교체합니다.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def config_sources_from_env() -> List[str]:
    """환경 변수에서 설정 소스 목록을 읽습니다."""
    raw = os.getenv(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH)
    return [item for item in raw.split(os.pathsep) if item]


def load_source(source: str) -> Optional[Dict[str, Any]]:
    """
    설정 소스 하나를 읽습니다.

    Args:
        source: 파일 경로 또는 http(s) URL

    Returns:
        Optional[Dict[str, Any]]: 설정 딕셔너리 (읽을 수 없으면 None)
    """
    if is_valid_url(source):
        try:
            response = requests.get(source, timeout=URL_FETCH_TIMEOUT)
            response.raise_for_status()
            data = yaml.safe_load(response.text)
        except (requests.exceptions.RequestException, yaml.YAMLError) as e:
            logger.error(f"설정 URL 로드 실패 ({source}): {e}")
            return None
    else:
        path = Path(source).resolve()
        if not path.exists():
            logger.warning(f"설정 파일을 찾을 수 없음: {path}")
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"설정 파일 로드 실패 ({path}): {e}")
            return None

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.error(f"설정 최상위는 매핑이어야 함: {source}")
        return None
    logger.info(f"설정 로드 완료: {source}")
    return data


def load_merged(sources: Sequence[str]) -> Dict[str, Any]:
    """여러 설정 소스를 순서대로 읽어 병합합니다. 뒤쪽 소스가 우선합니다."""
    merged: Dict[str, Any] = {}
    for source in sources:
        data = load_source(source)
        if data is not None:
            merged = deep_merge(merged, data)
    return merged


class Config:
    """
    설정 클래스

    YAML 파일/URL에서 설정을 로드하고 환경 변수로 오버라이드합니다.
    읽을 수 있는 소스가 하나도 없으면 기본 설정을 사용합니다.

    Attributes:
        config (Dict[str, Any]): 설정 딕셔너리
        sources (List[str]): 설정 소스 목록
    """

    def __init__(self, sources: Union[str, Sequence[str], None] = None):
        if sources is None:
            sources = config_sources_from_env()
        elif isinstance(sources, str):
            sources = [sources]
        self.sources: List[str] = list(sources)
        self.config: Dict[str, Any] = {}
        self._load_config()
        self._apply_env_overrides()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """딕셔너리로부터 Config를 생성합니다 (기본 설정 위에 병합)."""
        instance = cls.__new__(cls)
        instance.sources = []
        instance.config = deep_merge(cls._get_default_config(), data)
        return instance

    def _load_config(self) -> None:
        loaded = [data for data in (load_source(s) for s in self.sources) if data is not None]
        if not loaded:
            logger.warning("읽을 수 있는 설정 소스가 없음, 기본 설정을 사용합니다.")

        self.config = self._get_default_config()
        for data in loaded:
            self.config = deep_merge(self.config, data)

    def _apply_env_overrides(self) -> None:
        """환경 변수로 설정을 오버라이드합니다."""
        env_mappings = {
            'APP_NAME': ['application', 'name'],
            'APP_VERSION': ['application', 'version'],
            'ENVIRONMENT': ['application', 'environment'],
            'SERVER_HOST': ['server', 'host'],
            'SERVER_PORT': ['server', 'port'],
            'LOG_LEVEL': ['logging', 'console', 'level'],
            'LOG_FORMAT': ['logging', 'console', 'format'],
        }

        for env_var, config_path in env_mappings.items():
            env_value = os.getenv(env_var)
            if not env_value:
                continue
            if env_var == 'SERVER_PORT':
                try:
                    env_value = int(env_value)
                except ValueError:
                    logger.warning(f"잘못된 SERVER_PORT 값: {env_value}, 무시됨")
                    continue
            self._set_nested(self.config, config_path, env_value)
            logger.debug(f"환경 변수 적용: {env_var}={env_value}")

    @staticmethod
    def _set_nested(d: Dict, keys: list, value: Any) -> None:
        for key in keys[:-1]:
            d = d.setdefault(key, {})
        d[keys[-1]] = value

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """
        기본 설정을 반환합니다.

        Returns:
            Dict[str, Any]: 기본 설정 딕셔너리
        """
        return {
            'application': {
                'name': 'devtools-backend',
                'version': '1.0.0',
                'environment': 'production'
            },
            'server': {
                'host': '0.0.0.0',
                'port': 7007
            },
            'endpoints': {
                'base': '/api/devtools',
                'health': '/health',
                'info': '/info',
                'config': '/config',
                'external_dependencies': '/external-dependencies'
            },
            'logging': {
                'console': {
                    'enabled': True,
                    'level': 'INFO',
                    'format': 'text'
                },
                'file': {
                    'enabled': False,
                    'level': 'WARN',
                    'dir': '/opt/devtools/logs',
                    'filename': 'devtools.log',
                    'rotation': {
                        'max_size_mb': 10,
                        'backup_count': 5
                    }
                },
                'log_requests': False
            },
            'devTools': {
                'info': {
                    'rootDir': '.',
                    'versionFile': 'portal.json',
                    'lockfile': 'uv.lock',
                    'packagePrefix': 'devtools'
                }
            }
        }

    def get(self, *keys, default=None) -> Any:
        """
        중첩된 설정 값을 가져옵니다.

        Example:
            >>> config.get('server', 'port')
            7007
            >>> config.get('devTools', 'externalDependencies', 'endpoints')
            None
        """
        value = self.config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return default
            if value is None:
                return default
        return value

    def reload_raw(self) -> Dict[str, Any]:
        """같은 소스에서 설정을 다시 읽어 병합한 원본을 반환합니다."""
        return load_merged(self.sources) if self.sources else copy.deepcopy(self.config)


# 전역 설정 인스턴스
_config: Optional[Config] = None


def load_config(sources: Union[str, Sequence[str], None] = None) -> Config:
    """
    설정을 로드합니다.

    Args:
        sources: 설정 파일 경로/URL (None이면 DEVTOOLS_CONFIG_PATH 사용)

    Returns:
        Config: Config 인스턴스
    """
    global _config
    _config = Config(sources)
    return _config


def get_config() -> Config:
    """
    현재 설정 인스턴스를 반환합니다.

    Raises:
        RuntimeError: 설정이 로드되지 않은 경우
    """
    if _config is None:
        raise RuntimeError("설정이 로드되지 않았습니다. load_config()를 먼저 호출하세요.")
    return _config
