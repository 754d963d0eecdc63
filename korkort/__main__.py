"""
Entry point for running korkort as a module.

Usage:
    python -m korkort status
    python -m korkort complete 3
    python -m korkort --help
"""
from korkort.cli import main

if __name__ == "__main__":
    main()
