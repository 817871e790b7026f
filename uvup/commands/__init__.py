"""CLI subcommands for uvup."""
