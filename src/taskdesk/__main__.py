"""Entry point for ``python -m taskdesk``."""

from taskdesk.cli import main

if __name__ == "__main__":
    main()
