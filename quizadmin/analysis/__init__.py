from .summary import questions_frame, summarize_template, write_summary_csv

__all__ = ["questions_frame", "summarize_template", "write_summary_csv"]
