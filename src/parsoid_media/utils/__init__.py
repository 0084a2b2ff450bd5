"""Shared utilities: logging, retry and console rendering."""
