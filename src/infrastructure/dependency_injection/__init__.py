"""Composition root for the identity services."""
