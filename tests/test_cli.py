import builtins
import pytest
import requests

from simple_web_server import cli
from simple_web_server.discovery import RootDerivationError
from conftest import free_port


@pytest.mark.parametrize("argv, debug", [
    (["--debug"], True),
    ([], False),
    (["--verbose", "--debug"], False),
    (["--debu"], False),
    (["--debug", "extra"], True),
    (["--debug=1"], False),
    (["-h"], False),
    (["--help"], False),
])
def test_only_first_argument_enables_debug(argv, debug):
    assert cli.parse_args(argv).debug is debug


@pytest.fixture
def env(tmp_path, monkeypatch):
    port = free_port()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SERVER_HOST", "127.0.0.1")
    monkeypatch.setenv("BASE_PORT", str(port))
    monkeypatch.delenv("LOG_FILE", raising=False)
    monkeypatch.delenv("OPEN_BROWSER", raising=False)
    return port


def run_with_request(monkeypatch, argv, path):
    """input() 대기 중에 요청 하나를 보내고 바로 종료"""
    seen = {}

    def fake_input(prompt=""):
        seen["response"] = requests.get(f"http://127.0.0.1:{seen['port']}{path}", timeout=5)
        return ""

    monkeypatch.setattr(builtins, "input", fake_input)
    opened = []
    seen["opened"] = opened
    return seen, lambda: cli.main(argv, opener=lambda url: opened.append(url) or True)


def test_browsing_mode_end_to_end(tmp_path, env, monkeypatch, capsys):
    (tmp_path / "a.txt").write_text("aaa")
    seen, run = run_with_request(monkeypatch, [], "/a.txt")
    seen["port"] = env

    assert run() == 0
    assert seen["response"].status_code == 200
    assert seen["response"].text == "aaa"
    assert seen["opened"] == [f"http://localhost:{env}/"]

    out = capsys.readouterr().out
    assert "No index.html files found. Enabling directory browsing." in out
    assert "Debug mode enabled." not in out
    assert not (tmp_path / "server_log.txt").exists()


def test_static_mode_with_debug_writes_log(tmp_path, env, monkeypatch, capsys):
    index = tmp_path / "site" / "en-US" / "index.html"
    index.parent.mkdir(parents=True)
    index.write_text("<h1>site</h1>", encoding="utf-8")
    seen, run = run_with_request(monkeypatch, ["--debug"], "/")
    seen["port"] = env

    assert run() == 0
    assert seen["response"].text == "<h1>site</h1>"

    out = capsys.readouterr().out
    assert "Debug mode enabled." in out
    assert "Press any key to stop the servers..." in out
    assert f"Listening on http://localhost:{env}/ (click to open) for files in {tmp_path / 'site'}" in out

    lines = (tmp_path / "server_log.txt").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert "Server started for root directory" in lines[0]
    assert lines[1].endswith(f"index.html (text/html) on port {env}")


def test_eof_on_stdin_stops_cleanly(tmp_path, env, monkeypatch):
    def no_stdin(prompt=""):
        raise EOFError

    monkeypatch.setattr(builtins, "input", no_stdin)
    assert cli.main([], opener=lambda url: True) == 0


def test_bad_config_exits_with_error(env, monkeypatch):
    monkeypatch.setenv("BASE_PORT", "eighty")
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert str(exc.value).startswith("[ERROR] BASE_PORT")


def test_root_derivation_failure_exits(env, monkeypatch):
    def broken(start_dir):
        raise RootDerivationError("cannot derive a root two levels above /index.html")

    monkeypatch.setattr(cli, "discover_roots", broken)
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert "[ERROR] cannot derive a root" in str(exc.value)
