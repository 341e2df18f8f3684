"""Shared test fixtures and sample declaration packages."""
