#!/usr/bin/env python3
"""
SAFECORD identity backend -- command-line entry point.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8080 --reload
  python main.py console --user "Mark 2.0"
  python main.py console --user "Mark 2.0" --backend local
  echo "/rank 3 alice" | python main.py console --user "Mark 2.0"

Environment variables (see core/config.py for the full list):
  DATABASE_URL        persistent service store (default sqlite:///safecord.db)
  BACKEND_MODE        console backend: http (default) or local
  API_BASE_URL        where the console finds the HTTP service
  BOOTSTRAP_SECRET    enables POST /admin/init-rank5
"""

import argparse
import sys

from client.factory import make_client
from console.interpreter import AdminConsole
from console.sink import LoggingEventSink
from core.config import get_settings


def _serve(args: argparse.Namespace) -> None:
    """Run the persistent service under uvicorn."""
    import uvicorn

    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)


def _console(args: argparse.Namespace) -> None:
    """Read commands from stdin and print each resulting transcript line.

    Interactive when stdin is a terminal; otherwise processes piped input
    line by line and exits at EOF.
    """
    settings = get_settings()
    if args.backend:
        settings = settings.model_copy(update={"backend_mode": args.backend})

    interactive = sys.stdin.isatty()
    with make_client(settings) as client:
        console = AdminConsole(client, args.user, sink=LoggingEventSink())
        if interactive:
            print(f"SAFECORD admin console ({settings.backend_mode} backend) -- operator: {args.user}")
            print("Type /help for commands, Ctrl-D to exit.")
        while True:
            if interactive:
                print("> ", end="", flush=True)
            line = sys.stdin.readline()
            if not line:
                break
            for out in console.execute(line):
                # The echo line is redundant when the operator just typed it.
                if interactive and out.startswith("> "):
                    continue
                print(out)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="safecord",
        description="SAFECORD identity backend: HTTP service and operator console.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py serve --port 8000
  python main.py console --user "Mark 2.0"
  BACKEND_MODE=local python main.py console --user alice
        """,
    )
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the persistent HTTP service")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    serve.add_argument("--reload", action="store_true", help="Reload on source changes (development only)")
    serve.set_defaults(func=_serve)

    console = sub.add_parser("console", help="Run the admin command console")
    console.add_argument("--user", required=True, metavar="USERNAME", help="Operator account issuing commands")
    console.add_argument(
        "--backend",
        choices=["http", "local"],
        default=None,
        help="Override BACKEND_MODE for this session",
    )
    console.set_defaults(func=_console)

    args = parser.parse_args()
    if not getattr(args, "func", None):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
