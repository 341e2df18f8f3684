"""A small, well-formed set of capabilities, implementations and contracts.

- `Named` is implemented by `Widget` and (through `Aged`) by `Person`.
- `Measurable` is a protocol implemented by `Box`.
- `Colored` has a contract suite but no implementation.
- `Stackable` has an implementation but no contract suite.
"""
