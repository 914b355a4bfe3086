"""PredictGenie: AI-assisted competitor pricing from product URLs or CSV batches."""

__version__ = "0.1.0"
