"""The ``contractsuite`` command-line interface."""
