"""Command-line diagnostics for Mosaic engines."""
