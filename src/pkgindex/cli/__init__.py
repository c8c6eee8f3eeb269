"""Command-line interface for pkgindex."""
