"""
베이스 체커 모듈

외부 의존성 체크의 입력(Endpoint)과 결과(ExternalDependency) 타입,
그리고 모든 체커의 부모 클래스를 정의합니다.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class DependencyStatus(str, Enum):
    """외부 의존성 상태"""
    HEALTHY = 'Healthy'
    UNHEALTHY = 'Unhealthy'


class EndpointType:
    """지원하는 체크 유형"""
    PING = 'ping'
    FETCH = 'fetch'


@dataclass(frozen=True)
class Endpoint:
    """
    체크 대상 엔드포인트

    Attributes:
        name: 엔드포인트 이름
        type: 체크 유형 ('ping' 또는 'fetch', 그 외 값도 그대로 보존)
        target: 호스트 주소 또는 URL
    """
    name: str
    type: str
    target: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Endpoint':
        """설정 딕셔너리에서 Endpoint를 생성합니다."""
        return cls(
            name=str(data.get('name', '')),
            type=str(data.get('type', '')),
            target=str(data.get('target', ''))
        )


@dataclass(frozen=True)
class ExternalDependency:
    """
    외부 의존성 체크 결과

    Attributes:
        name: 엔드포인트 이름
        type: 체크 유형
        target: 체크 대상
        status: 상태 (Healthy / Unhealthy)
        error: 에러 메시지 (선택)
    """
    name: str
    type: str
    target: str
    status: DependencyStatus
    error: Optional[str] = None

    def is_healthy(self) -> bool:
        """정상 상태인지 확인"""
        return self.status == DependencyStatus.HEALTHY

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환 (error가 없으면 키를 생략)"""
        data = {
            'name': self.name,
            'type': self.type,
            'target': self.target,
            'status': self.status.value
        }
        if self.error is not None:
            data['error'] = self.error
        return data


class BaseChecker(ABC):
    """
    외부 의존성 체커 베이스 클래스

    모든 체커는 이 클래스를 상속받아 check()를 구현해야 합니다.
    check()는 어떤 경우에도 예외를 밖으로 던지지 않고 결과를 반환해야 합니다.
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def check(self, endpoint: Endpoint) -> ExternalDependency:
        """
        엔드포인트 하나를 체크합니다.

        Args:
            endpoint: 체크 대상

        Returns:
            ExternalDependency: 체크 결과
        """
        pass

    def _create_result(
        self,
        endpoint: Endpoint,
        healthy: bool,
        error: Optional[str] = None
    ) -> ExternalDependency:
        """
        ExternalDependency 객체를 생성합니다.

        Args:
            endpoint: 체크 대상
            healthy: 정상 여부
            error: 에러 메시지

        Returns:
            ExternalDependency: 체크 결과
        """
        return ExternalDependency(
            name=endpoint.name,
            type=endpoint.type,
            target=endpoint.target,
            status=DependencyStatus.HEALTHY if healthy else DependencyStatus.UNHEALTHY,
            error=error
        )
