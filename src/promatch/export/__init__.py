"""Export layer — Markdown, CSV and JSON output of ranked matches."""

from promatch.export.csv_export import CSVExporter
from promatch.export.json_export import JSONExporter
from promatch.export.markdown import MarkdownExporter

EXPORTERS = {
    "markdown": MarkdownExporter,
    "csv": CSVExporter,
    "json": JSONExporter,
}

__all__ = ["EXPORTERS", "CSVExporter", "JSONExporter", "MarkdownExporter"]
