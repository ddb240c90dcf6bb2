"""
DevTools 진단 서비스

외부 의존성 헬스체크, secret이 치환된 설정 조회, 배포 정보 조회를 제공합니다.
"""

__version__ = '1.0.0'
