"""Domain layer for CONTRACTSUITE.

Contains the resolution rules: capabilities and their closure, the declaration
markers users put on their test classes, and the typed records built from
those markers (contract declarations, implementation declarations, test
plans). This package is deliberately free of any test-runner dependency.

Dependency rule: may import `contractsuite.interfaces`; do not import from
`contractsuite.adapters`, `contractsuite.service_layer` or
`contractsuite.entrypoints`.
"""
