#!/usr/bin/env python3
"""
run.py - Main entry point for iFactor
"""

import sys
import os

# Add the project root to Python path to ensure imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from ifactor.interfaces.cli import SimpleCLI


def main():
    """Main entry point for iFactor."""
    cli = SimpleCLI()
    try:
        cli.run(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nGame interrupted. Goodbye!")


if __name__ == "__main__":
    main()
