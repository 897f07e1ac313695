import threading
from datetime import datetime
from pathlib import Path


class ServerLog:
    """
    디버그 모드에서만 동작하는 로그.
    한 줄 = 타임스탬프 + 메시지, 콘솔 출력과 파일 추가를 같은 락 안에서 처리한다.
    꺼져 있으면 아무것도 하지 않는다 (파일 생성/출력 없음).
    """

    def __init__(self, enabled: bool, log_file: str | Path = "server_log.txt"):
        self.enabled = enabled
        self.log_file = Path(log_file)
        self._lock = threading.Lock()

    def log(self, message: str):
        if not self.enabled:
            return
        with self._lock:
            line = f"{datetime.now():%Y-%m-%d %H:%M:%S}: {message}"
            # UTF-8 이 아닌 파일명(서로게이트)은 \x.. 형태로 남긴다
            line = line.encode("utf-8", "backslashreplace").decode("utf-8")
            print(line, flush=True)
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(line + "\n")
