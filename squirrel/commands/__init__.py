"""Squirrel CLI commands."""
