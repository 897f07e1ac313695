import os, sys
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

DEFAULT_HOST = "localhost"
DEFAULT_BASE_PORT = 8080
DEFAULT_LOG_FILE = "server_log.txt"

_FALSY = {"0", "false", "no", "off"}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ServerConfig:
    """시작 시 한 번 만들어서 모든 컴포넌트에 넘기는 설정값 (이후 변경 없음)"""
    host: str = DEFAULT_HOST
    base_port: int = DEFAULT_BASE_PORT
    log_file: Path = Path(DEFAULT_LOG_FILE)
    open_browser: bool = True
    debug: bool = False
    exclude_path: Path | None = None


def running_script() -> Path | None:
    # 디렉토리 목록에서 숨길 실행 파일 (python -m 실행이면 __main__.py 경로)
    if not sys.argv or not sys.argv[0]:
        return None
    return Path(sys.argv[0]).resolve()


def load_config(debug: bool = False, environ=None) -> ServerConfig:
    if environ is None:
        load_dotenv()
        environ = os.environ

    raw_port = environ.get("BASE_PORT", str(DEFAULT_BASE_PORT))
    try:
        base_port = int(raw_port)
    except ValueError:
        raise ConfigError(f"BASE_PORT must be an integer, got {raw_port!r}")
    if not 0 < base_port < 65536:
        raise ConfigError(f"BASE_PORT out of range: {base_port}")

    return ServerConfig(
        host=environ.get("SERVER_HOST", DEFAULT_HOST),
        base_port=base_port,
        log_file=Path(environ.get("LOG_FILE", DEFAULT_LOG_FILE)),
        open_browser=environ.get("OPEN_BROWSER", "1").strip().lower() not in _FALSY,
        debug=debug,
        exclude_path=running_script(),
    )
