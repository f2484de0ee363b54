#!/usr/bin/env python3
"""Slow-log CSV converter: command line entry point."""

import sys

from slowlog_converter.cli import main

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
    except BrokenPipeError:
        sys.exit(0)
