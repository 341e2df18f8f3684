"""Unit tests for runnable units."""

from __future__ import annotations

import pytest

from contractsuite import CallableProducer, contract, contract_impl, inject
from contractsuite.domain import errors
from contractsuite.domain.declarations import (
    ContractDeclaration,
    ImplementationDeclaration,
)
from contractsuite.service_layer.units import (
    PARSE_ERRORS_CASE,
    RESOLUTION_ERROR_CASE,
    ClassTestsUnit,
    ContractUnit,
    DirectTestsUnit,
    ErrorUnit,
    StructuralErrorUnit,
    run_xunit_method,
)
from tests.fixtures.broken import contracts as broken
from tests.fixtures.sample.capabilities import Named
from tests.fixtures.sample.implementations import Widget

# pylint: disable=too-few-public-methods, missing-function-docstring


class RecordingProducer(CallableProducer[Widget]):
    """Producer recording every call made on it."""

    def __init__(self, calls: list[str]) -> None:
        super().__init__(Widget)
        self.calls = calls

    def new_instance(self) -> Widget:
        self.calls.append("new_instance")
        return super().new_instance()

    def clean_up(self) -> None:
        self.calls.append("clean_up")
        super().clean_up()


def recording_suite(calls: list[str]) -> ImplementationDeclaration:
    @contract_impl(Widget)
    class Suite:
        @inject
        def get_producer(self):
            calls.append("get_producer")
            return RecordingProducer(calls)

    return ImplementationDeclaration.from_type(Suite)


def recording_contract(calls: list[str]) -> ContractDeclaration:
    @contract(Named)
    class Contract:
        @inject
        def set_producer(self, producer):
            calls.append("inject")
            self.producer = producer

        def setup_method(self, method):
            calls.append(f"setup {method.__name__}")

        def teardown_method(self, method):
            calls.append(f"teardown {method.__name__}")

        def test_passes(self):
            self.producer.new_instance()
            calls.append("test_passes")

        def test_fails(self):
            calls.append("test_fails")
            assert False, "expected failure"

    return ContractDeclaration.from_type(Contract)


class TestContractUnit:
    """Tests for `ContractUnit`."""

    @staticmethod
    def test_cases_follow_the_declaration() -> None:
        calls: list[str] = []
        unit = ContractUnit(recording_contract(calls), recording_suite(calls))
        cases = unit.cases()
        assert [case.name for case in cases] == ["test_passes", "test_fails"]
        assert {case.unit for case in cases} == {unit.name}
        assert unit.name.endswith(".Contract")

    @staticmethod
    def test_producer_lifecycle_of_a_passing_case() -> None:
        calls: list[str] = []
        unit = ContractUnit(recording_contract(calls), recording_suite(calls))
        unit.run_case("test_passes")
        assert calls == [
            "get_producer",
            "inject",
            "setup test_passes",
            "new_instance",
            "test_passes",
            "teardown test_passes",
            "clean_up",
        ]

    @staticmethod
    def test_clean_up_runs_after_a_failing_case() -> None:
        calls: list[str] = []
        unit = ContractUnit(recording_contract(calls), recording_suite(calls))
        with pytest.raises(AssertionError, match="expected failure"):
            unit.run_case("test_fails")
        assert calls[-2:] == ["teardown test_fails", "clean_up"]

    @staticmethod
    def test_each_case_gets_its_own_producer() -> None:
        calls: list[str] = []
        unit = ContractUnit(recording_contract(calls), recording_suite(calls))
        unit.run_case("test_passes")
        unit.run_case("test_passes")
        assert calls.count("get_producer") == 2
        assert calls.count("clean_up") == 2


class TestErrorUnit:
    """Tests for `ErrorUnit`."""

    @staticmethod
    def test_raises_every_recorded_error() -> None:
        declaration = ContractDeclaration.from_type(broken.UninjectedNamedContract)
        unit = ErrorUnit(declaration)
        [case] = unit.cases()
        assert case.name == PARSE_ERRORS_CASE
        with pytest.raises(errors.DeclarationParseError) as excinfo:
            case.run()
        assert excinfo.value.errors == declaration.errors


class TestClassTestsUnit:
    """Tests for `ClassTestsUnit` and `DirectTestsUnit`."""

    @staticmethod
    def test_fresh_instance_per_case() -> None:
        seen: list[int] = []

        class Plain:
            def test_one(self):
                seen.append(id(self))

            def test_two(self):
                seen.append(id(self))

        instances: list[object] = []
        original_init = Plain.__init__

        def tracking_init(self):
            instances.append(self)
            original_init(self)

        Plain.__init__ = tracking_init  # type: ignore[method-assign]
        for case in ClassTestsUnit(Plain).cases():
            case.run()
        assert len(instances) == 2
        assert len(seen) == 2

    @staticmethod
    def test_direct_tests_exclude_contract_tests() -> None:
        @contract(Named)
        class Contract:
            @inject
            def set_producer(self, producer):
                pass

            def test_contract(self):
                pass

        @contract_impl(Widget)
        class Suite(Contract):
            def test_own(self):
                pass

        unit = DirectTestsUnit(ImplementationDeclaration.from_type(Suite))
        assert unit.test_names() == ["test_own"]
        assert unit.name == Suite.__qualname__


def test_structural_error_unit_reraises() -> None:
    error = errors.MissingProducerError(Widget)
    unit = StructuralErrorUnit(Widget, error)
    [case] = unit.cases()
    assert case.name == RESOLUTION_ERROR_CASE
    with pytest.raises(errors.MissingProducerError):
        case.run()


class TestRunXunitMethod:
    """Tests for `run_xunit_method`."""

    @staticmethod
    def test_teardown_is_skipped_when_setup_fails() -> None:
        calls: list[str] = []

        class Plain:
            def setup_method(self, method):
                raise RuntimeError("setup")

            def teardown_method(self, method):
                calls.append("teardown")

            def test_x(self):
                calls.append("test")

        with pytest.raises(RuntimeError):
            run_xunit_method(Plain(), "test_x")
        assert calls == []

    @staticmethod
    def test_hooks_are_optional() -> None:
        calls: list[str] = []

        class Plain:
            def test_x(self):
                calls.append("test")

        run_xunit_method(Plain(), "test_x")
        assert calls == ["test"]
