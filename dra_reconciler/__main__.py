"""
Allow running the handler server as a Python module.

Usage:
    python -m dra_reconciler
"""

from .run_server import main

if __name__ == "__main__":
    main()
