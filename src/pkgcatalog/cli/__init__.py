"""Command-line entry points for the build stages."""
