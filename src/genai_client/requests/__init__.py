"""Input normalization, endpoint URLs and HTTP transport."""
