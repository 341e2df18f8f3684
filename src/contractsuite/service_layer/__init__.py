"""Service layer for CONTRACTSUITE.

Implements the resolution use-cases: the declaration registry, the test plan
resolver, the suite assembler, dynamic suite support and reporting.

Dependency rule: may import `contractsuite.domain` and
`contractsuite.interfaces`, but not `contractsuite.adapters` or
`contractsuite.entrypoints`.
"""
