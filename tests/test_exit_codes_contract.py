"""The exit-code contract is part of the CLI's public surface."""

from query_audit.utils.exit_codes import ExitCode


def test_exit_code_values():
    assert ExitCode.SUCCESS == 0
    assert ExitCode.VIOLATION == 1
    assert ExitCode.ERROR == 2


def test_exit_codes_are_ints():
    assert all(isinstance(int(c), int) for c in ExitCode)
    assert len({int(c) for c in ExitCode}) == len(ExitCode)
