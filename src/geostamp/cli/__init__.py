"""Command line interface for Geostamp."""
