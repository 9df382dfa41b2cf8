#!/usr/bin/env python3
"""
Launch script for the headless Q-Learning Car runner.
"""

import sys

from qcar.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
