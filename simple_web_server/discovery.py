import os
from dataclasses import dataclass
from pathlib import Path

INDEX_NAME = "index.html"


class RootDerivationError(ValueError):
    pass


@dataclass(frozen=True)
class Discovery:
    roots: list
    browsing: bool


@dataclass(frozen=True)
class RootAssignment:
    root: Path
    port: int
    browsing: bool = False

    @property
    def url(self) -> str:
        return f"http://localhost:{self.port}/"


def find_index_files(start_dir) -> list[Path]:
    """start_dir 아래 모든 index.html (하위 폴더는 이름순, 위에서 아래로)"""
    found = []
    for dirpath, dirnames, filenames in os.walk(start_dir):
        dirnames.sort()
        if INDEX_NAME in filenames:
            found.append(Path(dirpath) / INDEX_NAME)
    return found


def root_from_index(index_file) -> Path:
    """
    <root>/<locale>/index.html 규칙: index.html 에서 두 단계 위가 루트.
    부모가 두 단계 없으면 (예: /index.html) RootDerivationError.
    """
    p = Path(os.path.abspath(index_file))
    locale_dir = p.parent
    root = locale_dir.parent
    if locale_dir == p or root == locale_dir:
        raise RootDerivationError(
            f"cannot derive a root two levels above {p}: "
            f"expected <root>/<locale>/{INDEX_NAME}"
        )
    return root


def discover_roots(start_dir) -> Discovery:
    start = Path(os.path.abspath(start_dir))
    index_files = find_index_files(start)
    if not index_files:
        # index.html 이 하나도 없으면 디렉토리 브라우징
        return Discovery(roots=[start], browsing=True)
    return Discovery(roots=[root_from_index(f) for f in index_files], browsing=False)


def assign_ports(discovery: Discovery, base_port: int) -> list[RootAssignment]:
    return [
        RootAssignment(root=root, port=base_port + i, browsing=discovery.browsing)
        for i, root in enumerate(discovery.roots)
    ]
