"""Adapters (infrastructure) for CONTRACTSUITE.

Provide concrete implementations of the interfaces: package scanning and
in-memory declaration sources, a callable-backed producer, and a small
in-process runner for assembled units.

Dependency rule: may import `contractsuite.interfaces` and
`contractsuite.domain`; the domain must not import this package (the
top-level package re-exports `CallableProducer` for convenience only).
"""
