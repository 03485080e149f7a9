#!/usr/bin/env python
"""
Run the Item Value API (FastAPI via uvicorn).

Usage:
    python scripts/run_api.py --store-csv catalog.csv --collection products --field price
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
src_path = project_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from item_value.config.settings import Settings
from item_value.errors import ConfigurationError


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the Item Value API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--store-csv", help="CSV catalog to serve documents from")
    parser.add_argument("--collection", help="Collection id (ITEM_VALUE_COLLECTION_ID)")
    parser.add_argument("--field", help="Document value field (ITEM_VALUE_VALUE_FIELD)")
    parser.add_argument("--no-reload", action="store_true")
    return parser.parse_args(argv)


def build_env(args, environ=None) -> dict:
    """Environment for the server process: src on PYTHONPATH, CLI options as ITEM_VALUE_* vars."""
    env = dict(os.environ if environ is None else environ)
    if env.get("PYTHONPATH"):
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = str(src_path)

    if args.store_csv:
        env["ITEM_VALUE_STORE_CSV"] = str(Path(args.store_csv).resolve())
    if args.collection:
        env["ITEM_VALUE_COLLECTION_ID"] = args.collection
    if args.field:
        env["ITEM_VALUE_VALUE_FIELD"] = args.field
    return env


def build_command(args) -> list[str]:
    cmd = [
        sys.executable, "-m", "uvicorn",
        "item_value.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if not args.no_reload:
        cmd.append("--reload")
    return cmd


def main(argv=None):
    args = parse_args(argv)
    env = build_env(args)

    # Fail here rather than on the first request
    try:
        Settings.load(env).validate()
    except ConfigurationError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print(f"Starting Item Value API on {args.host}:{args.port}...")
    try:
        subprocess.run(build_command(args), env=env, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
