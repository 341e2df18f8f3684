"""Entrypoints (inbound adapters) for CONTRACTSUITE.

Expose the resolver to the outside world: the ``contractsuite`` CLI and the
pytest plugin. Parse and validate inputs, call the bootstrap and service
layer, and present results.

Dependency rule: may import `contractsuite.bootstrap` and
`contractsuite.service_layer`; avoid importing `contractsuite.adapters`
directly.
"""
