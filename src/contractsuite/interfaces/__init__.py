"""Interfaces (application boundary) for CONTRACTSUITE.

Defines framework-free contracts shared by the domain, the service layer and
adapters: the `Producer` handed to contract tests, the `Dynamic` suite
protocol, and the `DeclarationSource` discovery port.

Dependency rule: this package is independent; do not import from any
`contractsuite.*` modules. It may be imported by every other layer.
"""
