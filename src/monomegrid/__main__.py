"""Allow running as ``python -m monomegrid``."""

from monomegrid.cli.main import cli

if __name__ == "__main__":
    cli()
