"""Cloud provider implementations."""
