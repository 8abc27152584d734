#!/usr/bin/env python3
"""Entry point for the ZemDomu CLI when run as python -m zemdomu.cli."""

if __name__ == "__main__":
    from zemdomu.cli.main import main

    main()
