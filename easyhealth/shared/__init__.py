"""Shared base models, schemas, lookups and exceptions."""
