"""
설정 정리(sanitize) 모듈

병합된 설정을 스키마와 함께 순회하면서 visibility가 'secret'인 값을
플레이스홀더로 치환합니다.

지원하는 스키마 키워드:
- type, properties, additionalProperties, items, visibility
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

SECRET_PLACEHOLDER = '<secret>'
SECRET_VISIBILITY = 'secret'

_SECRET = {'type': 'string', 'visibility': 'secret'}

# 이 서비스 자체 설정과 포털 설정의 대표적인 자격 증명 위치
DEFAULT_SCHEMA: Dict[str, Any] = {
    'type': 'object',
    'properties': {
        'backend': {
            'type': 'object',
            'properties': {
                'auth': {
                    'type': 'object',
                    'properties': {
                        'keys': {
                            'type': 'array',
                            'items': {'type': 'object', 'properties': {'secret': _SECRET}},
                        },
                    },
                },
                'database': {
                    'type': 'object',
                    'properties': {
                        'connection': {
                            'type': 'object',
                            'properties': {'password': _SECRET},
                        },
                    },
                },
            },
        },
        'auth': {
            'type': 'object',
            'properties': {
                # providers.<provider>.<environment>.clientSecret
                'providers': {
                    'type': 'object',
                    'additionalProperties': {
                        'type': 'object',
                        'additionalProperties': {
                            'type': 'object',
                            'properties': {'clientSecret': _SECRET},
                        },
                    },
                },
            },
        },
        'integrations': {
            'type': 'object',
            'additionalProperties': {
                'type': 'array',
                'items': {
                    'type': 'object',
                    'properties': {'token': _SECRET, 'password': _SECRET},
                },
            },
        },
        'devTools': {
            'type': 'object',
            'properties': {
                'externalDependencies': {
                    'type': 'object',
                    'properties': {
                        'endpoints': {
                            'type': 'array',
                            'items': {
                                'type': 'object',
                                'properties': {
                                    'name': {'type': 'string'},
                                    'type': {'type': 'string'},
                                    'target': {'type': 'string', 'visibility': 'backend'},
                                },
                            },
                        },
                    },
                },
                'config': {
                    'type': 'object',
                    'properties': {
                        'schemaPaths': {'type': 'array', 'items': {'type': 'string'}},
                    },
                },
            },
        },
    },
}


def load_schema_file(path: str) -> Optional[Dict[str, Any]]:
    """YAML/JSON 스키마 파일을 읽습니다."""
    schema_path = Path(path)
    try:
        with open(schema_path, 'r', encoding='utf-8') as f:
            schema = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"스키마 로드 실패 ({schema_path}): {e}")
        return None
    if not isinstance(schema, dict):
        logger.error(f"스키마 최상위는 매핑이어야 함: {schema_path}")
        return None
    return schema


def _child_schemas_for_key(schemas: List[Dict[str, Any]], key: str) -> List[Dict[str, Any]]:
    children = []
    for schema in schemas:
        properties = schema.get('properties') or {}
        if key in properties:
            children.append(properties[key])
        elif isinstance(schema.get('additionalProperties'), dict):
            children.append(schema['additionalProperties'])
    return children


def _item_schemas(schemas: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [schema['items'] for schema in schemas if isinstance(schema.get('items'), dict)]


def sanitize(value: Any, schemas: List[Dict[str, Any]]) -> Any:
    """
    값을 스키마와 함께 순회하며 secret 값을 치환한 복사본을 반환합니다.

    여러 스키마가 같은 위치를 설명하면 하나라도 secret이면 치환합니다.

    Args:
        value: 설정 값 (JSON 호환)
        schemas: 현재 위치에 해당하는 스키마 노드 목록

    Returns:
        Any: 치환된 값
    """
    if any(schema.get('visibility') == SECRET_VISIBILITY for schema in schemas):
        return SECRET_PLACEHOLDER

    if isinstance(value, dict):
        return {
            key: sanitize(child, _child_schemas_for_key(schemas, key))
            for key, child in value.items()
        }
    if isinstance(value, list):
        item_schemas = _item_schemas(schemas)
        return [sanitize(item, item_schemas) for item in value]
    return value


class ConfigSanitizer:
    """
    설정 정리기

    Attributes:
        config_source: 병합된 원본 설정을 반환하는 함수
        schema_paths: 추가 스키마 파일 경로
    """

    def __init__(
        self,
        config_source: Callable[[], Dict[str, Any]],
        schema_paths: Optional[List[str]] = None,
        base_schema: Optional[Dict[str, Any]] = None
    ):
        self.config_source = config_source
        self.schema_paths = list(schema_paths or [])
        self.base_schema = base_schema if base_schema is not None else DEFAULT_SCHEMA
        self._schemas: Optional[List[Dict[str, Any]]] = None

    @property
    def schemas(self) -> List[Dict[str, Any]]:
        """스키마 목록 (최초 접근 시 한 번만 로드)"""
        if self._schemas is None:
            schemas = [self.base_schema]
            if not self.schema_paths:
                logger.warning(
                    "추가 설정 스키마가 없음, 기본 스키마에 등록된 secret만 치환됩니다."
                )
            for path in self.schema_paths:
                schema = load_schema_file(path)
                if schema is not None:
                    schemas.append(schema)
            logger.debug(f"설정 스키마 {len(schemas)}개 로드")
            self._schemas = schemas
        return self._schemas

    def list_config(self) -> Any:
        """secret 값이 치환된 설정 트리를 반환합니다."""
        return sanitize(self.config_source(), self.schemas)
