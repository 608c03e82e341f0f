"""Console entry point for the mvpb command."""

from mvpb.interface.cli.cli import cli

__all__ = ["cli"]


if __name__ == "__main__":
    cli()
