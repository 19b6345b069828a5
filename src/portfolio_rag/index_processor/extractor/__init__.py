from .cv import CV_DOCUMENT_ID, CV_SOURCE, format_cv_as_text, format_date

__all__ = ["CV_DOCUMENT_ID", "CV_SOURCE", "format_cv_as_text", "format_date"]
