import sys, threading, webbrowser
from functools import partial
from http.server import HTTPServer

from .config import ServerConfig
from .discovery import RootAssignment
from .handlers import DirectoryBrowsingHandler, StaticFileHandler


class RootHTTPServer(HTTPServer):
    """루트 하나 = 포트 하나. 연결은 받은 스레드에서 순서대로 처리한다."""

    def __init__(self, address, handler_class, server_log):
        self.server_log = server_log
        super().__init__(address, handler_class)

    def handle_error(self, request, client_address):
        # 요청 하나에서 난 예외는 기록만 하고 accept 루프는 계속
        exc = sys.exc_info()[1]
        self.server_log.log(f"Error on port {self.server_address[1]}: {exc}")


class Listener:
    def __init__(self, assignment: RootAssignment, config: ServerConfig, log):
        self.assignment = assignment
        self.config = config
        self.log = log
        self.server = None
        self.thread = None

    @property
    def port(self) -> int:
        if self.server is not None:
            return self.server.server_address[1]
        return self.assignment.port

    @property
    def url(self) -> str:
        return f"http://localhost:{self.port}/"

    def handler_class(self):
        handler = DirectoryBrowsingHandler if self.assignment.browsing else StaticFileHandler
        return partial(
            handler,
            directory=str(self.assignment.root),
            server_log=self.log,
            exclude_path=self.config.exclude_path,
        )

    def start(self) -> bool:
        """바인드 후 전용 스레드에서 serve_forever. 바인드 실패면 기록하고 False"""
        try:
            self.server = RootHTTPServer(
                (self.config.host, self.assignment.port), self.handler_class(), self.log
            )
        except (OSError, OverflowError) as e:
            self.log.log(f"Error on port {self.assignment.port}: {e}")
            return False

        if self.assignment.browsing:
            self.log.log(f"Directory browsing enabled for '{self.assignment.root}' on {self.url}")
        else:
            self.log.log(f"Server started for root directory '{self.assignment.root}' on {self.url}")

        self.thread = threading.Thread(
            target=self._serve, name=f"listener-{self.port}", daemon=True
        )
        self.thread.start()
        return True

    def _serve(self):
        try:
            self.server.serve_forever()
        except Exception as e:
            self.log.log(f"Error on port {self.port}: {e}")

    def stop(self):
        if self.server is None:
            return
        self.server.shutdown()
        self.server.server_close()
        if self.thread is not None:
            self.thread.join(timeout=5)


def open_in_browser(url: str, log, opener=webbrowser.open):
    try:
        ok = opener(url)
        reason = "no runnable browser found"
    except (webbrowser.Error, OSError) as e:
        ok, reason = False, str(e)
    if not ok:
        msg = f"Could not open browser for {url}: {reason}"
        # 디버그 로그가 켜져 있으면 로그가 콘솔에도 찍으므로 한 번만
        if not getattr(log, "enabled", False):
            print(msg)
        log.log(msg)
    return bool(ok)


def start_listeners(assignments, config: ServerConfig, log, opener=webbrowser.open) -> list[Listener]:
    """루트마다 포트 하나씩 띄우고, 콘솔에 URL 출력 + 브라우저 열기"""
    started = []
    for assignment in assignments:
        listener = Listener(assignment, config, log)
        if not listener.start():
            continue
        started.append(listener)

        # 디버그 여부와 관계없이 항상 URL 출력
        print(f"Listening on {listener.url} (click to open) for files in {assignment.root}")
        if config.open_browser:
            open_in_browser(listener.url, log, opener)
    return started
