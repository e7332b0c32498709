"""Main entry point for the starbooks package."""

from starbooks.cli import main

if __name__ == "__main__":
    main()
