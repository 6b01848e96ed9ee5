"""Summary aggregation and Excel report output."""

from .excel_generator import ExcelReportGenerator
from .summary import aggregate, summarize_account

__all__ = ["ExcelReportGenerator", "aggregate", "summarize_account"]
