"""Entry point for running diffview as a module.

This allows the package to be executed as:
    python -m diffview [arguments]
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
