"""
Entry point for module execution (``python -m import_shaker``).
"""

import sys
from import_shaker.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
