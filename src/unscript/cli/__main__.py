"""Main entry point for unscript CLI when run as a module."""

from unscript.cli.main import main

if __name__ == "__main__":  # pragma: no cover
    main()
