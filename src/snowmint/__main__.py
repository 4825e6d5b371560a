"""Entry point for the snowmint command line tool."""

import sys

from snowmint.cli import main

if __name__ == "__main__":
    sys.exit(main())
