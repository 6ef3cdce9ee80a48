"""Allow running the CLI with ``python -m scenarios.cli``."""

from scenarios.cli.main import main

if __name__ == "__main__":
    main()
