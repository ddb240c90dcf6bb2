"""
배포 정보 모듈

호스트 OS, Python 런타임, 포털 버전, 그리고 lockfile에 고정된
패키지 버전을 수집합니다.
"""

import json
import logging
import platform
import sys
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

NOT_AVAILABLE = 'N/A'


@dataclass(frozen=True)
class PackageDependency:
    """패키지 이름과 쉼표로 연결된 버전 목록"""
    name: str
    versions: str

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'versions': self.versions}


@dataclass(frozen=True)
class DevToolsInfo:
    """배포 메타데이터"""
    operating_system: str
    python_version: str
    portal_version: str
    dependencies: List[PackageDependency] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'operating_system': self.operating_system,
            'python_version': self.python_version,
            'portal_version': self.portal_version,
            'dependencies': [dep.to_dict() for dep in self.dependencies]
        }


class Lockfile:
    """
    lockfile 파서

    uv.lock / poetry.lock의 [[package]] 테이블(name, version)을 읽습니다.
    같은 이름이 여러 번 나오면 모든 항목을 순서대로 보관합니다.
    """

    def __init__(self, packages: Dict[str, List[Dict[str, Any]]]):
        self.packages = packages

    @classmethod
    def parse(cls, text: str) -> 'Lockfile':
        data = tomllib.loads(text)
        packages: Dict[str, List[Dict[str, Any]]] = {}
        for entry in data.get('package', []):
            name = entry.get('name')
            if not name:
                continue
            packages.setdefault(name, []).append(entry)
        return cls(packages)

    @classmethod
    def load(cls, path: Path) -> 'Lockfile':
        """
        Raises:
            OSError: 파일을 읽을 수 없는 경우
            tomllib.TOMLDecodeError: TOML 형식이 아닌 경우
        """
        return cls.parse(Path(path).read_text(encoding='utf-8'))

    def keys(self) -> List[str]:
        return list(self.packages.keys())

    def get(self, name: str) -> List[Dict[str, Any]]:
        return self.packages.get(name, [])


def operating_system() -> str:
    """'<system> <release> - <platform>/<machine>' 형식의 OS 문자열"""
    return f"{platform.system()} {platform.release()} - {sys.platform}/{platform.machine()}"


def read_portal_version(path: Path) -> str:
    """버전 파일(JSON)의 version 값을 읽습니다. 없으면 'N/A'."""
    if not path.exists():
        return NOT_AVAILABLE
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except (OSError, ValueError) as e:
        logger.warning(f"버전 파일 읽기 실패 ({path}): {e}")
        return NOT_AVAILABLE
    if isinstance(data, dict) and data.get('version'):
        return str(data['version'])
    return NOT_AVAILABLE


def collect_dependencies(lockfile: Lockfile, prefix: str) -> List[PackageDependency]:
    """이름이 prefix로 시작하는 패키지의 고유 버전을 모읍니다."""
    dependencies = []
    for name in lockfile.keys():
        if not name.startswith(prefix):
            continue
        # 처음 나온 순서를 유지하며 중복 제거
        versions = dict.fromkeys(
            str(entry['version']) for entry in lockfile.get(name) if entry.get('version')
        )
        dependencies.append(PackageDependency(name=name, versions=', '.join(versions)))
    return dependencies


class DependencyLister:
    """
    배포 정보 수집기

    Attributes:
        root_dir: 버전 파일과 lockfile이 위치한 디렉토리
        package_prefix: 보고할 패키지 이름 접두어
    """

    def __init__(
        self,
        root_dir: str = '.',
        version_file: str = 'portal.json',
        lockfile: str = 'uv.lock',
        package_prefix: str = 'devtools',
        lockfile_loader: Optional[Callable[[Path], Lockfile]] = None,
        version_loader: Optional[Callable[[Path], str]] = None
    ):
        self.root_dir = Path(root_dir)
        self.version_path = self.root_dir / version_file
        self.lockfile_path = self.root_dir / lockfile
        self.package_prefix = package_prefix
        self.lockfile_loader = lockfile_loader or Lockfile.load
        self.version_loader = version_loader or read_portal_version

    @classmethod
    def from_config(cls, config) -> 'DependencyLister':
        return cls(
            root_dir=config.get('devTools', 'info', 'rootDir', default='.'),
            version_file=config.get('devTools', 'info', 'versionFile', default='portal.json'),
            lockfile=config.get('devTools', 'info', 'lockfile', default='uv.lock'),
            package_prefix=config.get('devTools', 'info', 'packagePrefix', default='devtools')
        )

    def _load_dependencies(self) -> List[PackageDependency]:
        try:
            lockfile = self.lockfile_loader(self.lockfile_path)
        except FileNotFoundError:
            logger.warning(f"lockfile을 찾을 수 없음: {self.lockfile_path}")
            return []
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error(f"lockfile 로드 실패 ({self.lockfile_path}): {e}")
            return []
        return collect_dependencies(lockfile, self.package_prefix)

    def list_info(self) -> DevToolsInfo:
        """현재 배포의 메타데이터를 반환합니다."""
        return DevToolsInfo(
            operating_system=operating_system() or NOT_AVAILABLE,
            python_version=platform.python_version() or NOT_AVAILABLE,
            portal_version=self.version_loader(self.version_path),
            dependencies=self._load_dependencies()
        )
