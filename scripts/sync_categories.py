#!/usr/bin/env python3
"""
Rebuild /categories/all from the categories of every post.
"""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from blogcms.cli import sync_categories_main  # noqa: E402


if __name__ == "__main__":
    sys.exit(sync_categories_main())
