"""Allow ``python -m sheet_enumerable``."""

from sheet_enumerable.cli import app

if __name__ == "__main__":
    app()
