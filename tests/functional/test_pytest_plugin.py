"""Functional tests running the pytest plugin in a throwaway project.

Each test writes a small project with `pytester` and runs pytest in process
with the plugin enabled on the command line.
"""

from __future__ import annotations

import pytest

PLUGIN = "contractsuite.entrypoints.pytest_plugin"  # pragma: no mutate

SHAPES = """
import abc

from contractsuite import contract, inject


class Sized(abc.ABC):
    @abc.abstractmethod
    def size(self) -> int:
        ...


@contract(Sized)
class SizedContract:
    @inject
    def set_producer(self, producer):
        self.producer = producer

    def test_size_is_not_negative(self):
        assert self.producer.new_instance().size() >= 0
"""

IMPLEMENTATIONS = """
from shapes import Sized


class Square(Sized):
    def __init__(self, side=2):
        self.side = side

    def size(self):
        return self.side * self.side


class Hole(Sized):
    def size(self):
        return -1
"""

# pylint: disable=redefined-outer-name


@pytest.fixture
def project(pytester: pytest.Pytester) -> pytest.Pytester:
    """A project with one capability, its contract and two implementations."""
    pytester.makepyfile(shapes=SHAPES, implementations=IMPLEMENTATIONS)
    pytester.syspathinsert()
    return pytester


def run(pytester: pytest.Pytester, *args: str) -> pytest.RunResult:
    return pytester.runpytest("-p", PLUGIN, "-v", *args)


def test_contract_and_direct_tests_run(project: pytest.Pytester) -> None:
    """A suite runs its own tests first, then every applicable contract test."""
    project.makepyfile(
        test_square="""
        from contractsuite import CallableProducer, contract_impl, inject
        from implementations import Square


        @contract_impl(Square)
        class TestSquare:
            @inject
            def get_producer(self):
                return CallableProducer(Square)

            def test_area(self):
                assert Square(3).size() == 9
        """
    )
    result = run(project, "--contract-package", "shapes")
    result.assert_outcomes(passed=2)
    result.stdout.fnmatch_lines(
        [
            "*TestSquare::TestSquare::test_area PASSED*",
            "*TestSquare::shapes.SizedContract::test_size_is_not_negative PASSED*",
        ]
    )


def test_violating_implementation_fails(project: pytest.Pytester) -> None:
    """A contract test that does not hold is an ordinary failure."""
    project.makepyfile(
        test_hole="""
        from contractsuite import CallableProducer, contract_impl, inject
        from implementations import Hole


        @contract_impl(Hole)
        class TestHole:
            @inject
            def get_producer(self):
                return CallableProducer(Hole)
        """
    )
    project.makeini("[pytest]\ncontract_packages = shapes\n")
    result = run(project)
    result.assert_outcomes(failed=1)


def test_contract_classes_are_not_collected_alone(project: pytest.Pytester) -> None:
    """A Test-named contract class only runs through implementations."""
    project.makepyfile(
        test_contract_here="""
        from contractsuite import contract, inject
        from shapes import Sized


        @contract(Sized)
        class TestSizedAgain:
            @inject
            def set_producer(self, producer):
                self.producer = producer

            def test_never_alone(self):
                raise AssertionError("collected on its own")
        """
    )
    result = run(project, "--contract-package", "shapes")
    result.assert_outcomes()
    assert result.ret == pytest.ExitCode.NO_TESTS_COLLECTED


def test_missing_producer_is_a_collection_error(project: pytest.Pytester) -> None:
    """A structural error is reported against the suite that caused it."""
    project.makepyfile(
        test_producerless="""
        from contractsuite import contract_impl
        from implementations import Square


        @contract_impl(Square)
        class TestProducerless:
            pass
        """
    )
    result = run(project, "--contract-package", "shapes")
    result.assert_outcomes(errors=1)
    result.stdout.fnmatch_lines(["*no @inject method returning a Producer*"])


def test_malformed_contract_fails_its_own_case(project: pytest.Pytester) -> None:
    """A malformed contract becomes one failing case; valid ones still run."""
    project.makepyfile(
        broken_shapes="""
        from contractsuite import contract
        from shapes import Sized


        @contract(Sized)
        class NoSetterContract:
            def test_unreachable(self):
                pass
        """,
        test_square="""
        from contractsuite import CallableProducer, contract_impl, inject
        from implementations import Square


        @contract_impl(Square)
        class TestSquare:
            @inject
            def get_producer(self):
                return CallableProducer(Square)
        """,
    )
    result = run(
        project, "--contract-package", "shapes", "--contract-package", "broken_shapes"
    )
    result.assert_outcomes(passed=1, failed=1)
    result.stdout.fnmatch_lines(
        ["*broken_shapes.NoSetterContract::errors during parsing FAILED*"]
    )


def test_dynamic_suite(project: pytest.Pytester) -> None:
    """Members inherit the target and producer; plain classes run unchanged."""
    project.makepyfile(
        test_dynamic="""
        from contractsuite import CallableProducer, Dynamic, contract_impl, inject
        from implementations import Square


        @contract_impl()
        class SquareMember:
            pass


        @contract_impl()
        class OtherSquareMember:
            pass


        class PlainChecks:
            def test_plain(self):
                assert Square().size() == 4


        @contract_impl(Square)
        class TestSquares(Dynamic):
            @inject
            def get_producer(self):
                return CallableProducer(Square)

            def suite_classes(self):
                return [SquareMember, PlainChecks, OtherSquareMember]
        """
    )
    result = run(project, "--contract-package", "shapes")
    result.assert_outcomes(passed=3)
    result.stdout.fnmatch_lines(
        [
            "*TestSquares::shapes.SizedContract::test_size_is_not_negative PASSED*",
            "*TestSquares::test_dynamic.PlainChecks::test_plain PASSED*",
            "*TestSquares::shapes.SizedContract?2?::test_size_is_not_negative PASSED*",
        ]
    )
