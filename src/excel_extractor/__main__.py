"""Allow ``python -m excel_extractor``."""

from excel_extractor.cli import app

if __name__ == "__main__":
    app()
