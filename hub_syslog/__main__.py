"""
Entry point for running the forwarder as a module.

This allows running the forwarder with: python -m hub_syslog
"""

import sys

from .server import main

if __name__ == "__main__":
    sys.exit(main())
