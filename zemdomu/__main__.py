"""Entry point for ``python -m zemdomu``."""

from zemdomu.cli.main import main

if __name__ == "__main__":
    main()
