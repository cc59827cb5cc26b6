"""
Package entry point.

Allows running the application via:

    python -m campusroute

This simply forwards execution to campusroute.cli.main().
"""

from campusroute.cli import main

if __name__ == "__main__":
    main()
