"""Command-line interface for opencursor."""
