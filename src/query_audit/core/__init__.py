"""Linter host: traversal, rule context, suggestions, discovery and runner."""
