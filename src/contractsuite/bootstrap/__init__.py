"""Bootstrap (composition root) for CONTRACTSUITE.

Assembles the application at runtime: reads configuration, wires the
discovery adapter to the declaration registry, and hands entrypoints a small
container holding what they need (registry, source, runner).

Import rules:
- Entry points import *this* package (not adapters/service_layer/interfaces/domain)
  for wiring.
- This package may import: `contractsuite.adapters`,
  `contractsuite.service_layer`, `contractsuite.interfaces`,
  `contractsuite.domain`, and `contractsuite.config`.
- Inner layers must not import `contractsuite.bootstrap`.
"""

from contractsuite.adapters.runner import Outcome, summarize

from .bootstrap import AppContainer, bootstrap, build_registry

__all__ = ["AppContainer", "Outcome", "bootstrap", "build_registry", "summarize"]
