#!/usr/bin/env python3
"""
main.py - Entry point for padmouse
"""

import sys

from padmouse.main import main

if __name__ == "__main__":
    sys.exit(main())
