"""
HTTP server entry point (agentfs-serve).
"""

import argparse
import os

import uvicorn


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="agentfs-serve",
        description="Serve the workspace API with uvicorn.",
    )
    parser.add_argument("--host", default=os.getenv("HOST", "127.0.0.1"), help="Bind host")
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("PORT", "8000")), help="Bind port"
    )
    parser.add_argument(
        "--workspace",
        default=None,
        help="Workspace root (overrides AGENTFS_WORKSPACE_ROOT)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        default=os.getenv("RELOAD", "0") in {"1", "true", "True"},
        help="Reload on code changes (development)",
    )
    args = parser.parse_args(argv)

    # Settings are read at import time of the app, so export before uvicorn loads it
    if args.workspace:
        os.environ["AGENTFS_WORKSPACE_ROOT"] = os.path.abspath(
            os.path.expanduser(args.workspace)
        )
    uvicorn.run("agentfs.main:app", host=args.host, port=args.port, reload=args.reload)  # type: ignore[arg-type]
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
