"""Allow ``python -m sqlnaming``."""

from sqlnaming.cli.app import app

if __name__ == "__main__":
    app()
