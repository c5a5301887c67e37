"""Entry point for running the CLI as a module.

Allows running with: python -m src.cli
"""

from src.cli.main import main

if __name__ == "__main__":
    main()
