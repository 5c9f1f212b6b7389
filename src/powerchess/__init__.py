"""Power Chess: chess with purchasable powers and timed board events."""

__version__ = "0.1.0"
