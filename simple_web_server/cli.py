import argparse, os, sys, webbrowser

from .config import ConfigError, load_config
from .discovery import RootDerivationError, assign_ports, discover_roots
from .listener import start_listeners
from .server_log import ServerLog


def parse_args(argv):
    # 첫 번째 인자가 정확히 --debug 일 때만 디버그. 그 외 인자는 무시하고 종료하지 않는다
    return argparse.Namespace(debug=argv[:1] == ["--debug"])


def wait_for_exit(prompt):
    try:
        input(prompt)
    except (EOFError, KeyboardInterrupt):
        print()


def main(argv=None, opener=webbrowser.open, start_dir=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    args = parse_args(argv)

    try:
        config = load_config(debug=args.debug)
    except ConfigError as e:
        raise SystemExit(f"[ERROR] {e}")

    if config.debug:
        print("Debug mode enabled.")
    log = ServerLog(config.debug, config.log_file)

    try:
        discovery = discover_roots(start_dir or os.getcwd())
    except RootDerivationError as e:
        raise SystemExit(f"[ERROR] {e}")

    if discovery.browsing:
        print("No index.html files found. Enabling directory browsing.")

    assignments = assign_ports(discovery, config.base_port)
    listeners = start_listeners(assignments, config, log, opener=opener)

    if config.debug:
        print("Press any key to stop the servers...")
    wait_for_exit("[Enter] 키를 누르면 서버를 종료합니다…\n")

    for listener in listeners:
        listener.stop()
    return 0
