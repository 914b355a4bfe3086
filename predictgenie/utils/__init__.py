"""CSV ingestion, normalization, prompts and the pricing model client."""
