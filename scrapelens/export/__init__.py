"""Export package — CSV / JSON serialisation of cached records."""

from scrapelens.export.formatter import ExportFile, ExportFormat, render, to_csv, to_json

__all__ = ["ExportFile", "ExportFormat", "render", "to_csv", "to_json"]
