"""Offline build pipeline for the package catalog."""

__version__ = "0.1.0"
