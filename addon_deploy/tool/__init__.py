"""Command line tool for building and publishing addons."""
