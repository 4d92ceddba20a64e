"""Command-line interface for the sketchpad."""
