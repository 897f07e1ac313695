import socket, threading
import pytest

from simple_web_server.config import ServerConfig
from simple_web_server.discovery import RootAssignment
from simple_web_server.listener import Listener


class RecordingLog:
    """ServerLog 대신 쓰는 테스트용 로그 (파일 없이 메시지만 모음)"""

    def __init__(self):
        self.lines = []
        self._lock = threading.Lock()

    def log(self, message):
        with self._lock:
            self.lines.append(message)

    def matching(self, prefix):
        return [l for l in self.lines if l.startswith(prefix)]


def free_port() -> int:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def base_url(listener) -> str:
    return f"http://127.0.0.1:{listener.port}"


@pytest.fixture
def recording_log():
    return RecordingLog()


@pytest.fixture
def serve(recording_log):
    """루트 하나를 임시 포트에 띄운다. 테스트 끝나면 정지."""
    started = []

    def _serve(root, browsing=False, exclude_path=None):
        config = ServerConfig(host="127.0.0.1", base_port=0, open_browser=False,
                              exclude_path=exclude_path)
        listener = Listener(RootAssignment(root=root, port=0, browsing=browsing), config, recording_log)
        assert listener.start()
        started.append(listener)
        return listener

    yield _serve
    for listener in started:
        listener.stop()
