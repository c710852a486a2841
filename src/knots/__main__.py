"""Module entry point for running with python -m knots."""

import sys

from knots.cli import main

if __name__ == "__main__":
    sys.exit(main())
