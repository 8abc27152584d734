"""ZemDomu command-line interface."""
