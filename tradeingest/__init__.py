"""Compare bulk write and batch statement ingestion of trade records."""

__version__ = "0.1.0"
