"""
핑 체크 모듈
시스템 ping 명령으로 외부 호스트의 도달 가능 여부를 확인합니다.
"""

import re
import subprocess
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional

from .base import BaseChecker, Endpoint, ExternalDependency

UNKNOWN_PACKET_LOSS = 'unknown'
TOTAL_PACKET_LOSS = '100.000'

# Linux/macOS: "0% packet loss", Windows: "(0% loss)"
_PACKET_LOSS_PATTERN = re.compile(r'([\d.]+)%\s*(?:packet\s+)?loss', re.IGNORECASE)


@dataclass(frozen=True)
class PingResult:
    """
    핑 프로브 결과

    Attributes:
        alive: 응답 여부
        packet_loss: 패킷 손실률 문자열 ('100.000' 형식 또는 'unknown')
        output: ping 명령의 원본 출력
    """
    alive: bool
    packet_loss: str
    output: str


class SystemPingProber:
    """시스템 ping 바이너리를 한 번 실행하는 프로버"""

    def __init__(self, timeout: Optional[float] = None, executable: str = 'ping'):
        self.timeout = timeout
        self.executable = executable

    def __call__(self, target: str) -> PingResult:
        return self.probe(target)

    def build_command(self, target: str) -> List[str]:
        if not target or target.startswith('-'):
            raise ValueError(f"잘못된 ping 대상: '{target}'")
        count_flag = '-n' if sys.platform.startswith('win') else '-c'
        return [self.executable, count_flag, '1', target]

    def probe(self, target: str) -> PingResult:
        """
        대상 호스트로 ping을 한 번 보냅니다.

        Raises:
            ValueError: 대상이 비어 있거나 옵션처럼 보이는 경우
            OSError: ping 바이너리를 실행할 수 없는 경우
            subprocess.TimeoutExpired: 타임아웃 초과
        """
        completed = subprocess.run(
            self.build_command(target),
            capture_output=True,
            text=True,
            timeout=self.timeout
        )
        packet_loss = parse_packet_loss(completed.stdout)
        alive = completed.returncode == 0 and packet_loss != TOTAL_PACKET_LOSS
        return PingResult(alive=alive, packet_loss=packet_loss, output=completed.stdout)


def parse_packet_loss(output: str) -> str:
    """ping 출력에서 패킷 손실률을 소수점 세 자리 문자열로 추출합니다."""
    match = _PACKET_LOSS_PATTERN.search(output or '')
    if match is None:
        return UNKNOWN_PACKET_LOSS
    try:
        return f"{float(match.group(1)):.3f}"
    except ValueError:
        return UNKNOWN_PACKET_LOSS


class PingChecker(BaseChecker):
    """핑 응답으로 외부 의존성 상태를 판정하는 클래스"""

    def __init__(self, prober: Optional[Callable[[str], PingResult]] = None):
        super().__init__()
        self.prober = prober or SystemPingProber()

    def check(self, endpoint: Endpoint) -> ExternalDependency:
        try:
            result = self.prober(endpoint.target)
        except Exception as e:
            self.logger.error(f"Ping 실행 실패: {endpoint.name} - {e}")
            return self._create_result(
                endpoint, healthy=False, error=f"{endpoint.target} - {e}"
            )

        # alive 판정과 별개로 손실률만 보고 error를 채운다
        error = None
        if result.packet_loss in (TOTAL_PACKET_LOSS, UNKNOWN_PACKET_LOSS):
            self.logger.error(f"Ping 실패: {endpoint.name} - {result.output}")
            error = result.output if result.output != '' else f"{endpoint.target} - Unknown"

        self.logger.info(f"Ping 결과: {endpoint.name}: {result.output}")

        return self._create_result(endpoint, healthy=result.alive, error=error)
