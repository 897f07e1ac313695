"""로컬 웹 루트를 찾아 포트별로 띄워주는 간단한 HTTP 파일 서버"""

__version__ = "0.1.0"
