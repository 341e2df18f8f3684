"""CONTRACTSUITE

Write interface-level behavioural tests once and have them re-run against
every concrete implementation of that interface. Contract declarations are
indexed by the capability they validate; an implementation suite resolves,
at run time, every contract reachable through the capabilities its target
type transitively satisfies.

Typical use::

    @contract(Named)
    class NamedContract:
        @inject
        def set_producer(self, producer):
            self.producer = producer

        def test_name_not_empty(self):
            assert self.producer.new_instance().get_name()


    @contract_impl(Widget)
    class TestWidget:
        @inject
        def get_producer(self):
            return CallableProducer(Widget)
"""

from contractsuite.adapters.producers import CallableProducer
from contractsuite.domain.markers import capability, contract, contract_impl, inject
from contractsuite.interfaces.dynamic import Dynamic
from contractsuite.interfaces.producer import Producer

__all__ = [
    "__version__",
    "CallableProducer",
    "Dynamic",
    "Producer",
    "capability",
    "contract",
    "contract_impl",
    "inject",
]
__version__ = "0.1.0"
