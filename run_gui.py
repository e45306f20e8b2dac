#!/usr/bin/env python3
"""
Launch script for the Q-Learning shortest path visualizer.
Sets Qt environment variables before importing PySide6.
"""

import os
import sys

os.environ.setdefault('QT_AUTO_SCREEN_SCALE_FACTOR', '0')
os.environ.setdefault('QT_LOGGING_RULES', 'qt.qpa.backingstore=false')

from qpath.gui import main

if __name__ == "__main__":
    sys.exit(main())
