"""contractsuite test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- functional/   : Resolution scenarios and the pytest plugin driven through pytester.
- contract/     : contractsuite's own interfaces, tested with contractsuite.
- e2e/          : The ``contractsuite`` command through click's CliRunner.
- fixtures/     : Sample declaration packages (well-formed and broken).
- helpers/      : Shared utilities (no tests here).

General guidance
- Keep unit fast and deterministic; prefer the sample packages over mocks.
- Functional asserts user-observable results, not internals.
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
"""
