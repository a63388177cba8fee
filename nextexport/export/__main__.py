"""
CLI entry point for running the export command directly.

Usage:
  python3 -m nextexport.export [options] <dir>
"""

from nextexport.export.command import main

if __name__ == "__main__":
    raise SystemExit(main())
