"""Allow running as ``python -m nodeopts``."""

from nodeopts.cli import main

main()
