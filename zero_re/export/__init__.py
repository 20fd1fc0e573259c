"""Export decoded UCFB archives to files."""

from .exporter import export_all

__all__ = ["export_all"]
