"""Value objects for trade data."""

from tradeingest.models.trade import Trade, generate_sample_data

__all__ = ["Trade", "generate_sample_data"]
