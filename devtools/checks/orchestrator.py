"""
외부 의존성 오케스트레이터 모듈

설정된 엔드포인트 목록을 순서대로 체커에 분배하고 결과를 모읍니다.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence

from .base import (
    BaseChecker,
    DependencyStatus,
    Endpoint,
    EndpointType,
    ExternalDependency,
)
from .fetch import FetchChecker
from .ping import PingChecker, SystemPingProber

logger = logging.getLogger(__name__)

ENDPOINTS_CONFIG_KEYS = ('devTools', 'externalDependencies', 'endpoints')


class HealthOrchestrator:
    """
    외부 의존성 헬스체크 오케스트레이터

    - 입력 순서를 그대로 유지한 결과 리스트를 반환합니다.
    - 알 수 없는 체크 유형을 만나면 그 지점에서 중단하고
      지금까지의 결과만 반환합니다.
    - 개별 체크 실패는 Unhealthy 결과로 기록되며 예외로 전파되지 않습니다.
    """

    def __init__(
        self,
        ping_checker: Optional[BaseChecker] = None,
        fetch_checker: Optional[BaseChecker] = None,
        max_workers: int = 1
    ):
        """
        Args:
            ping_checker: ping 유형 체커
            fetch_checker: fetch 유형 체커
            max_workers: 동시 체크 개수 (1이면 순차 실행)
        """
        self.checkers: Dict[str, BaseChecker] = {
            EndpointType.PING: ping_checker or PingChecker(),
            EndpointType.FETCH: fetch_checker or FetchChecker(),
        }
        self.max_workers = max(1, int(max_workers))

    @classmethod
    def from_config(cls, config) -> 'HealthOrchestrator':
        """Config 인스턴스에서 오케스트레이터를 생성합니다."""
        timeout = config.get('devTools', 'externalDependencies', 'timeout')
        verify_ssl = config.get('devTools', 'externalDependencies', 'verifySsl', default=True)
        max_workers = config.get('devTools', 'externalDependencies', 'maxWorkers', default=1)
        return cls(
            ping_checker=PingChecker(SystemPingProber(timeout=timeout)),
            fetch_checker=FetchChecker(timeout=timeout, verify_ssl=verify_ssl),
            max_workers=max_workers
        )

    def run(self, endpoints: Optional[Sequence[Endpoint]]) -> List[ExternalDependency]:
        """
        엔드포인트 목록 전체를 체크합니다.

        Args:
            endpoints: 체크 대상 목록 (None 또는 빈 목록 허용)

        Returns:
            List[ExternalDependency]: 입력 순서대로 정렬된 결과
        """
        if not endpoints:
            return []

        runnable = self._runnable_prefix(endpoints)

        if self.max_workers == 1 or len(runnable) <= 1:
            return [self._check_one(endpoint) for endpoint in runnable]

        # map()은 완료 순서와 무관하게 입력 순서로 결과를 돌려준다
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(self._check_one, runnable))

    def run_configured(self, config) -> List[ExternalDependency]:
        """설정에 등록된 엔드포인트를 체크합니다."""
        raw_endpoints = config.get(*ENDPOINTS_CONFIG_KEYS)
        if not raw_endpoints:
            return []
        if not isinstance(raw_endpoints, list):
            logger.warning(
                f"엔드포인트 설정은 리스트여야 함 ({type(raw_endpoints).__name__}), 체크 중단"
            )
            return []

        # 매핑이 아닌 항목은 알 수 없는 유형처럼 그 지점에서 중단
        endpoints = []
        for index, item in enumerate(raw_endpoints):
            if not isinstance(item, dict):
                logger.warning(
                    f"잘못된 엔드포인트 항목 #{index} ({item!r}), "
                    f"나머지 {len(raw_endpoints) - index}개 엔드포인트 체크 중단"
                )
                break
            endpoints.append(Endpoint.from_dict(item))
        return self.run(endpoints)

    def _runnable_prefix(self, endpoints: Sequence[Endpoint]) -> List[Endpoint]:
        """첫 번째 알 수 없는 유형 이전까지의 엔드포인트만 반환합니다."""
        runnable = []
        for index, endpoint in enumerate(endpoints):
            if endpoint.type not in self.checkers:
                skipped = len(endpoints) - index
                logger.warning(
                    f"알 수 없는 체크 유형 '{endpoint.type}' ({endpoint.name}), "
                    f"나머지 {skipped}개 엔드포인트 체크 중단"
                )
                break
            runnable.append(endpoint)
        return runnable

    def _check_one(self, endpoint: Endpoint) -> ExternalDependency:
        logger.info(f"외부 의존성 체크: \"{endpoint.name}\" ({endpoint.target})")
        checker = self.checkers[endpoint.type]
        try:
            return checker.check(endpoint)
        except Exception as e:
            logger.error(f"체크 실행 실패 ({endpoint.name}): {e}", exc_info=True)
            return ExternalDependency(
                name=endpoint.name,
                type=endpoint.type,
                target=endpoint.target,
                status=DependencyStatus.UNHEALTHY,
                error=str(e) or e.__class__.__name__
            )


def summarize(results: Sequence[ExternalDependency]) -> Dict[str, Any]:
    """결과 목록의 개수 요약을 반환합니다."""
    healthy = sum(1 for result in results if result.is_healthy())
    return {'total': len(results), 'healthy': healthy, 'unhealthy': len(results) - healthy}
