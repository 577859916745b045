"""Bank statement ingestion and rule-based classification."""

__version__ = "0.1.0"
