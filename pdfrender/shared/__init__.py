"""Shared utilities: errors, logging, identifiers, small types."""
