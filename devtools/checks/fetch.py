# ============================================================
# HTTP Fetch Dependency Checker
# HTTP GET 요청으로 외부 의존성 상태를 체크
# ============================================================

from typing import Optional

import requests
import urllib3

from .base import BaseChecker, Endpoint, ExternalDependency


class FetchChecker(BaseChecker):
    """
    HTTP GET 한 번으로 외부 의존성 상태를 판정하는 클래스

    판정 규칙:
    - 상태 코드가 정확히 200이면 Healthy
    - 그 외 상태 코드는 Unhealthy (error 없음)
    - 전송 계층 실패(DNS, 연결 거부, 타임아웃, SSL 등)는 Unhealthy + error
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        verify_ssl: bool = True
    ):
        """
        Args:
            session: HTTP 세션 (테스트 시 주입)
            timeout: 요청 타임아웃 (초, None이면 무제한)
            verify_ssl: SSL 인증서 검증 여부
        """
        super().__init__()
        self.session = session or requests.Session()
        self.timeout = timeout
        self.verify_ssl = verify_ssl

        if not verify_ssl:
            # verify_ssl=false 사용 시 경고 비활성화
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def check(self, endpoint: Endpoint) -> ExternalDependency:
        try:
            # 헤더만 받고 본문은 읽지 않는다
            response = self.session.get(
                endpoint.target,
                timeout=self.timeout,
                verify=self.verify_ssl,
                stream=True
            )
        except requests.exceptions.RequestException as e:
            message = str(e) or e.__class__.__name__
            self.logger.error(f"Fetch 실패: {endpoint.name} - {message}")
            return self._create_result(endpoint, healthy=False, error=message)

        try:
            status_code = response.status_code
        finally:
            response.close()

        self.logger.info(f"Fetch 결과: {endpoint.name} (status_code={status_code})")
        return self._create_result(endpoint, healthy=status_code == 200)
