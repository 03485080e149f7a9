#!/usr/bin/env python
"""
Run the Streamlit item value application.

Usage:
    python scripts/run_app.py [--store-csv catalog.csv] [--collection products]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
ui_path = project_root / 'src' / 'item_value' / 'ui' / 'app_streamlit.py'


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the Item Value Streamlit app")
    parser.add_argument("--store-csv", help="CSV catalog to serve documents from")
    parser.add_argument("--collection", help="Initial collection id")
    parser.add_argument("--field", help="Initial document value field")
    return parser.parse_args(argv)


def build_env(args, environ=None) -> dict:
    """Pass CLI options to the app as ITEM_VALUE_* vars; the sidebar starts from them."""
    env = dict(os.environ if environ is None else environ)
    if args.store_csv:
        env['ITEM_VALUE_STORE_CSV'] = str(Path(args.store_csv).resolve())
    if args.collection:
        env['ITEM_VALUE_COLLECTION_ID'] = args.collection
    if args.field:
        env['ITEM_VALUE_VALUE_FIELD'] = args.field
    return env


def main(argv=None):
    args = parse_args(argv)

    if not ui_path.exists():
        print(f"ERROR: UI module not found at {ui_path}")
        sys.exit(1)

    cmd = [sys.executable, '-m', 'streamlit', 'run', str(ui_path)]
    print(f"Starting Streamlit: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, cwd=str(project_root), env=build_env(args))
    except KeyboardInterrupt:
        print("\nApplication stopped.")


if __name__ == "__main__":
    main()
