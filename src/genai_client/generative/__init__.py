"""Model handles and response readers."""
