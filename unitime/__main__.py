"""
Package entry point.

Allows running the application via:

    python -m unitime

This simply forwards execution to unitime.cli.main().
"""

from unitime.cli import main

if __name__ == "__main__":
    main()
