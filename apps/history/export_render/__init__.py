from .csv_render import generate_timeline_csv
from .filenames import content_disposition, export_filename, timeline_csv_filename
from .history_pdf import generate_history_pdf
from .sections import ExportOptions, ReportSection, build_report_sections

__all__ = [
    "ExportOptions",
    "ReportSection",
    "build_report_sections",
    "content_disposition",
    "export_filename",
    "generate_history_pdf",
    "generate_timeline_csv",
    "timeline_csv_filename",
]
