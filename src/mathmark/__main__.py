"""Allow ``python -m mathmark``."""

from mathmark.cli import cli

if __name__ == "__main__":
    cli(prog_name="mathmark")
