import os
from types import MappingProxyType

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES = MappingProxyType({
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
})


def content_type_for(path) -> str:
    ext = os.path.splitext(str(path))[1].lower()
    return CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)
