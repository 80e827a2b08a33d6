"""Package entry point for ``python -m mkrom``."""

import sys

from mkrom.cli import main

if __name__ == "__main__":
    sys.exit(main())
