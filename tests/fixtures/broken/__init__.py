"""Deliberately malformed declarations, scanned together with `sample`."""
