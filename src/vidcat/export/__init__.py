"""vidcat export formats."""

from vidcat.export.exporter import FORMATS, ExportError, export_assets, export_filename

__all__ = ["FORMATS", "ExportError", "export_assets", "export_filename"]
