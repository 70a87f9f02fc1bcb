"""AWS infrastructure: client wrapper and resource handlers."""
