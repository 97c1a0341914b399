"""Credential verification adapters."""
