"""Command-line interface for strictimpl."""
