from covgraph.cli.entry import cli, main

__all__ = ["cli", "main"]
