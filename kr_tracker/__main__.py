# kr_tracker/__main__.py
"""Entry point for ``python -m kr_tracker``."""

from kr_tracker.cli import app

if __name__ == "__main__":
    app()
