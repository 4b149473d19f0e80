# qcomm/cli.py
from qcomm.__main__ import app as _typer_app
from qcomm.logging_config import setup_logging


def main():
    """Console script entrypoint for the qcomm CLI."""
    setup_logging()
    _typer_app()
