"""
Main entry point for running papersmith as a module.

Usage: python -m papersmith [arguments]
"""

from papersmith.main import main

if __name__ == "__main__":
    main()
