from __future__ import annotations

import argparse
import sys

from linkedin_dashboard.version import APP_TITLE, BUILD_VERSION


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="linkedin-dashboard", description=APP_TITLE)
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8050)
    parser.add_argument("--debug", dest="debug", action="store_true", default=False)
    parser.add_argument("--no-debug", dest="debug", action="store_false")
    parser.add_argument("--reloader", dest="use_reloader", action="store_true", default=False)
    parser.add_argument("--no-reloader", dest="use_reloader", action="store_false")
    parser.add_argument("--version", action="version", version=f"%(prog)s {BUILD_VERSION}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    ns = _build_parser().parse_args(args)

    from linkedin_dashboard.ui.dash_app import main as dash_main

    dash_main(
        host=ns.host,
        port=ns.port,
        debug=ns.debug,
        use_reloader=ns.use_reloader,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
