#!/usr/bin/env python3
"""
Main entry point for ghsync package when run as a module.
"""

from .cli import main

if __name__ == "__main__":
    main()
