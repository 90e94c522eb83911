"""wsbundle command line interface (Typer)."""
