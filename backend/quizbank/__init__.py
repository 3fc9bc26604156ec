"""Quiz bank backend: CSV question ingestion and timed quiz sessions."""

__version__ = "1.0.0"
