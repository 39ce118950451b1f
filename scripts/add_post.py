#!/usr/bin/env python3
"""
Insert a post document from a JSON payload.

Usage: python scripts/add_post.py scripts/example_post.json [--no-overwrite]
"""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from blogcms.cli import add_post_main  # noqa: E402


if __name__ == "__main__":
    sys.exit(add_post_main())
