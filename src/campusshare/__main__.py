"""Main entry point for the campusshare package."""

from campusshare.cli import main

if __name__ == "__main__":
    main()
