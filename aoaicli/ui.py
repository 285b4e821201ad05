"""Shared UI helpers for console output."""

from rich.console import Console

# Shared console instance so Rich status displays and prompts coordinate correctly.
console = Console()
