"""Command-line interface for craftlock."""
