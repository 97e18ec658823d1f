#!/usr/bin/env python3
"""
DMARC Analyzer

Command-line entry point for the DMARC Analyzer when run directly.
"""

import os
import sys

# Make the package importable when running from a source checkout
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dmarc_analyzer.cli import main

if __name__ == "__main__":
    main()
