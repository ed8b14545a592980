"""
Entry point for running i18n-auto as a module.

Usage:
    python -m i18n_auto --help
    python -m i18n_auto batch --dir src --yes
    python -m i18n_auto generate -l en -l ja
"""
from .cli import app


if __name__ == "__main__":
    app()
