import argparse
import logging
import os
import threading
import time
import webbrowser

import uvicorn


def _open_browser_later(url: str, delay: float = 1.0) -> None:
    """
    Open the default web browser after a short delay.

    This lets the server start first so the page is reachable.
    """

    def _worker() -> None:
        time.sleep(delay)
        try:
            webbrowser.open(url)
        except Exception:
            # Don't crash the CLI if opening the browser fails (e.g. headless env)
            pass

    thread = threading.Thread(target=_worker, daemon=True)
    thread.start()


def main(argv: list[str] | None = None) -> None:
    """
    Entry point for the CLI.

    - Uses the current working directory (or a provided path) as the project root,
      so relative route paths passed to /api/types/lookup resolve against it.
    - Starts the FastAPI server.
    """
    parser = argparse.ArgumentParser(
        prog="typeview",
        description=(
            "Serve request body type lookups for TypeScript API routes. "
            "By default, uses the current directory as the project root."
        ),
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the TypeScript project (default: current directory).",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host interface to bind the server to (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000).",
    )
    parser.add_argument(
        "--open",
        action="store_true",
        help="Open the interactive API docs in a browser once the server is up.",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Logging level (default: info).",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("typeview")

    target_path = os.path.abspath(args.path)
    if not os.path.isdir(target_path):
        raise SystemExit(f"Path is not a directory: {target_path}")

    # Change working directory so the API resolves relative paths against it.
    os.chdir(target_path)
    logger.info(f"Project root: {target_path}")

    url = f"http://{args.host}:{args.port}"
    logger.info(f"Starting server at {url} (Ctrl+C to stop)")

    if args.open:
        _open_browser_later(f"{url}/docs")

    uvicorn.run(
        "typeview.main:app",
        host=args.host,
        port=args.port,
        reload=False,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
