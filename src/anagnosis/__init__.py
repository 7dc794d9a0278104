"""anagnosis - a hypertext viewer for manual pages."""

__version__ = "0.3.0"
