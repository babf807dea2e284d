"""Composable wrappers adding timeouts, retries, rate limits, pools, validation, error enrichment and duration metrics to objects."""

__version__ = "0.1.0"