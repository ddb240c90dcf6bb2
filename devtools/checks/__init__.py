"""
외부 의존성 체크 패키지

체크 유형별로 모듈이 분리되어 있습니다:
- base: 입력/결과 타입 및 베이스 체커 클래스
- fetch: HTTP GET 체크
- ping: ICMP ping 체크
- orchestrator: 엔드포인트 목록 순회 및 결과 수집
"""

from .base import (
    BaseChecker,
    DependencyStatus,
    Endpoint,
    EndpointType,
    ExternalDependency,
)
from .fetch import FetchChecker
from .ping import PingChecker, PingResult, SystemPingProber
from .orchestrator import HealthOrchestrator

__all__ = [
    'BaseChecker',
    'DependencyStatus',
    'Endpoint',
    'EndpointType',
    'ExternalDependency',
    'FetchChecker',
    'PingChecker',
    'PingResult',
    'SystemPingProber',
    'HealthOrchestrator',
]
