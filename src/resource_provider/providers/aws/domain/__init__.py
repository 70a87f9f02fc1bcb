"""Typed AWS resource models and their API mappings."""
