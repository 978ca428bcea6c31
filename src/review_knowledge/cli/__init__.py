"""Command line interface for Review Knowledge."""
