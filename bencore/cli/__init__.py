"""Command-line interface for bencore."""
