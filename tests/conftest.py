"""Global pytest configuration for contractsuite."""

pytest_plugins = [
    "pytester",
    "contractsuite.entrypoints.pytest_plugin",
    "tests.fixtures.registries",
]
