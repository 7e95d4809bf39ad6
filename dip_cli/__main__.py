"""
Module execution entry point.

Allows running with: python -m dip_cli
"""

import sys
from dip_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
