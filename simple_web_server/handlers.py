import os
from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler
from pathlib import Path
from urllib.parse import quote, unquote
from jinja2 import Template

from . import __version__
from .content_types import content_type_for

# 루트 경로 요청 시 고정 문서 (locale 규칙, 설정 불가)
DEFAULT_DOCUMENT = ("en-US", "index.html")

NOT_FOUND_BODY = b"<html><body><h1>404 - File Not Found</h1></body></html>"
ERROR_BODY = b"<html><body><h1>500 - Internal Server Error</h1></body></html>"

LISTING_TPL = Template(
    "<html><body><h1>Directory Listing</h1><ul>"
    "{% for href, text in entries %}"
    '<li><a href="{{ href }}">{{ text|e }}</a></li>'
    "{% endfor %}"
    "</ul></body></html>"
)


class FileServingHandler(SimpleHTTPRequestHandler):
    """
    루트 하나에 묶인 요청 핸들러 공통부.
    요청 1건 = 연결 1개, 응답 후 항상 닫는다.
    요청 처리 중 예외는 그 요청만 500 으로 끝내고 리스너는 계속 돈다.
    """

    server_version = f"SimpleWebServer/{__version__}"

    def __init__(self, *args, directory, server_log, exclude_path=None, **kwargs):
        self.server_log = server_log
        self.exclude_path = Path(exclude_path).resolve() if exclude_path else None
        self._headers_sent = False
        super().__init__(*args, directory=directory, **kwargs)

    @property
    def port(self) -> int:
        return self.server.server_address[1]

    # ---------- 요청 처리 ----------
    def do_GET(self):
        self._headers_sent = False
        try:
            self.serve(self.resolve(self.path))
        except Exception as e:
            self.server_log.log(f"Error on port {self.port}: {e}")
            if not self._headers_sent:
                self.send_body(HTTPStatus.INTERNAL_SERVER_ERROR, ERROR_BODY)

    # 메서드 구분 없이 전부 GET 과 동일하게 처리
    do_HEAD = do_POST = do_PUT = do_DELETE = do_PATCH = do_OPTIONS = do_GET

    def resolve(self, url_path):
        raise NotImplementedError

    def serve(self, target):
        raise NotImplementedError

    # ---------- 경로 ----------
    @staticmethod
    def relative_path(url_path: str) -> str:
        # 쿼리/프래그먼트 제거 → 디코딩 → 앞쪽 구분자 제거
        path = url_path.split("?", 1)[0].split("#", 1)[0]
        path = unquote(path, errors="surrogateescape")
        return path.replace("\\", "/").lstrip("/")

    def join_under_root(self, rel: str):
        """루트 밖으로 나가는 경로(../ 등)는 None"""
        root = os.path.abspath(self.directory)
        parts = [p for p in rel.split("/") if p]
        target = os.path.normpath(os.path.join(root, *parts))
        if target != root and not target.startswith(root.rstrip(os.sep) + os.sep):
            return None
        return target

    # ---------- 응답 ----------
    def send_body(self, status, body: bytes, content_type="text/html"):
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Connection", "close")
        self.end_headers()
        self._headers_sent = True
        self.wfile.write(body)
        self.close_connection = True

    def send_file(self, path) -> str:
        with open(path, "rb") as f:
            body = f.read()
        ctype = content_type_for(path)
        self.send_body(HTTPStatus.OK, body, ctype)
        return ctype

    def send_not_found(self, shown):
        self.send_body(HTTPStatus.NOT_FOUND, NOT_FOUND_BODY)
        self.server_log.log(f"404 Not Found: {shown} on port {self.port}")

    # ---------- 로그 ----------
    def log_request(self, code="-", size="-"):
        # 요청별 로그는 Served / 404 줄로 대신한다
        pass

    def log_message(self, format, *args):
        self.server_log.log(f"{self.address_string()} on port {self.port}: {format % args}")


class StaticFileHandler(FileServingHandler):
    """index.html 이 있는 루트용: 파일 또는 404"""

    def resolve(self, url_path):
        rel = self.relative_path(url_path)
        if not rel:
            return os.path.join(self.directory, *DEFAULT_DOCUMENT)
        return self.join_under_root(rel)

    def serve(self, target):
        if target is not None and os.path.isfile(target):
            ctype = self.send_file(target)
            self.server_log.log(f"Served: {target} ({ctype}) on port {self.port}")
        else:
            self.send_not_found(target or self.path)


class DirectoryBrowsingHandler(FileServingHandler):
    """index.html 이 없을 때: 디렉토리 목록 / 파일 / 404"""

    def resolve(self, url_path):
        return self.join_under_root(self.relative_path(url_path))

    def serve(self, target):
        if target is not None and os.path.isdir(target):
            body = self.render_listing(target).encode("utf-8")
            self.send_body(HTTPStatus.OK, body, "text/html")
            self.server_log.log(f"Directory listing served for '{target}'")
        elif target is not None and os.path.isfile(target):
            self.send_file(target)
            self.server_log.log(f"Served: {target}")
        else:
            self.send_not_found(target or self.path)

    def listing_names(self, directory) -> list[str]:
        names = []
        for name in sorted(os.listdir(directory)):
            # 실행 중인 서버 스크립트 자신은 목록에서 제외
            if self.exclude_path is not None and Path(directory, name).resolve() == self.exclude_path:
                continue
            names.append(name)
        return names

    def render_listing(self, directory) -> str:
        # UTF-8 이 아닌 파일명: href 는 원래 바이트 그대로 인코딩, 표시는 깨진 글자 대체
        entries = []
        for name in self.listing_names(directory):
            raw = os.fsencode(name)
            entries.append((quote(raw), raw.decode("utf-8", "replace")))
        return LISTING_TPL.render(entries=entries)
