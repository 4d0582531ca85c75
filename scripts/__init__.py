"""Command-line tools for the Community Digest."""
