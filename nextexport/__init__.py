"""
nextexport
==========
Static export command for built web application projects.

Usage:
  nextexport export [options] <dir>
  python3 -m nextexport.export [options] <dir>
"""

__version__ = "0.1.0"
