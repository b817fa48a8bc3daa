"""Repositories for card, progress and remap rule files."""
