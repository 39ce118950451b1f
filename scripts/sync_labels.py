#!/usr/bin/env python3
"""
Rebuild /labels/all from the labels of every post.
"""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from blogcms.cli import sync_labels_main  # noqa: E402


if __name__ == "__main__":
    sys.exit(sync_labels_main())
