"""Command-line surface and plain-text rendering."""
