import subprocess
import sys

from doit.task import Task


def task_format() -> Task:
    """
    Run formatters.
    """

    return Task(
        "format",
        actions=[
            (_run, (["autoflake", "--in-place", "--recursive", "src", "test"],)),
            (_run, (["isort", "src", "test"],)),
            (_run, (["docformatter", "--in-place", "--recursive", "src"], {0, 3})),
            (_run, (["black", "src", "test"],)),
            (_run, (["toml-sort", "-i", "pyproject.toml"],)),
        ],
        targets=[],
        file_dep=[],
    )


def task_test() -> Task:
    """
    Run test suite.
    """

    return Task(
        "test",
        actions=[(_run, (["pytest", "-q"],))],
        targets=[],
        file_dep=[],
    )


def _run(cmd: list[str], expect_rc: int | set[int] = 0):
    expect_rcs = expect_rc if isinstance(expect_rc, set) else {expect_rc}
    print(f"=== Running: {' '.join(cmd)}")
    rc = subprocess.call(cmd)
    if rc not in expect_rcs:
        sys.exit(f"{cmd[0]} failed: rc={rc}")
