"""
DevTools API 모듈

운영자 질문 세 가지에 답하는 진입점입니다:
- 외부 의존성 도달 가능 여부
- secret이 치환된 현재 설정
- 배포 메타데이터
"""

import logging
from typing import Any, List, Optional

from devtools.checks import ExternalDependency, HealthOrchestrator
from devtools.config import Config
from devtools.info import DependencyLister, DevToolsInfo
from devtools.sanitizer import ConfigSanitizer

logger = logging.getLogger(__name__)


class DevToolsApi:
    """진단 정보 수집 파사드"""

    def __init__(
        self,
        config: Config,
        orchestrator: Optional[HealthOrchestrator] = None,
        sanitizer: Optional[ConfigSanitizer] = None,
        lister: Optional[DependencyLister] = None
    ):
        self.config = config
        self.orchestrator = orchestrator or HealthOrchestrator.from_config(config)
        self.sanitizer = sanitizer or ConfigSanitizer(
            config_source=config.reload_raw,
            schema_paths=config.get('devTools', 'config', 'schemaPaths', default=[])
        )
        self.lister = lister or DependencyLister.from_config(config)

    def list_external_dependency_details(self) -> List[ExternalDependency]:
        return self.orchestrator.run_configured(self.config)

    def list_config(self) -> Any:
        return self.sanitizer.list_config()

    def list_info(self) -> DevToolsInfo:
        return self.lister.list_info()
