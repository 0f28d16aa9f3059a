"""Run a local solution against sample tests and classify the results."""

import difflib
import logging
import os
import signal
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from cftui.exceptions import CommandError, NoConfigItemError, NoScriptError
from cftui.models import ScriptSet, TestCase


logger = logging.getLogger(__name__)

FULL_PATH_PLACEHOLDER = "<% full %>"
PATH_PLACEHOLDER = "<% path %>"
FILE_PLACEHOLDER = "<% file %>"

DEFAULT_TIMEOUT = 1.0


@dataclass(frozen=True)
class DiffLine:
    """One line of a line-level diff between actual and expected output."""

    tag: str  # "equal", "insert" or "delete"
    text: str


@dataclass(frozen=True)
class Pending:
    pass


@dataclass(frozen=True)
class Running:
    pass


@dataclass(frozen=True)
class Accepted:
    pass


@dataclass(frozen=True)
class WrongAnswer:
    input: str
    actual: str
    expected: str
    diff: tuple[DiffLine, ...]


@dataclass(frozen=True)
class TimeLimitExceeded:
    pass


@dataclass(frozen=True)
class RuntimeOrSpawnError:
    detail: str


Verdict = Union[Pending, Running, Accepted, WrongAnswer, TimeLimitExceeded, RuntimeOrSpawnError]


def line_diff(actual: str, expected: str) -> tuple[DiffLine, ...]:
    """Diff actual against expected line by line.

    Lines only in the actual output are deletions, lines only in the answer
    are insertions.
    """
    actual_lines = actual.splitlines()
    expected_lines = expected.splitlines()
    matcher = difflib.SequenceMatcher(None, actual_lines, expected_lines, autojunk=False)

    diff: list[DiffLine] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            diff.extend(DiffLine("equal", line) for line in actual_lines[i1:i2])
            continue
        diff.extend(DiffLine("delete", line) for line in actual_lines[i1:i2])
        diff.extend(DiffLine("insert", line) for line in expected_lines[j1:j2])
    return tuple(diff)


def compare(test_case: TestCase, stdout: str) -> Verdict:
    actual = stdout.rstrip()
    expected = test_case.answer.rstrip()
    if actual == expected:
        return Accepted()
    return WrongAnswer(
        input=test_case.input,
        actual=actual,
        expected=expected,
        diff=line_diff(actual, expected),
    )


def resolve_scripts(commands: dict[str, ScriptSet], source: Path) -> ScriptSet:
    """Pick the ScriptSet configured for the extension of source."""
    extension = source.suffix.lstrip(".")
    scripts = commands.get(extension)
    if scripts is None:
        raise NoScriptError(extension)
    return scripts


def build_command(template: str, source: Path) -> str:
    """Substitute the source placeholders of a command template."""
    return (
        template.replace(FULL_PATH_PLACEHOLDER, str(source))
        .replace(PATH_PLACEHOLDER, str(source.parent))
        .replace(FILE_PLACEHOLDER, source.stem)
    )


def _decode(output: bytes) -> str:
    return output.decode("utf-8", errors="replace")


def _kill_group(process: subprocess.Popen) -> None:
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        pass


class Judge:
    """Runs one solution over a list of test cases.

    The before command runs once up front, every case then runs in its own
    process group under the timeout, and the after command runs once at the end.
    """

    def __init__(self, scripts: ScriptSet, source: Path, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.scripts = scripts
        self.source = source.resolve()
        self.timeout = timeout
        self._cancelled = threading.Event()
        self._process: Optional[subprocess.Popen] = None

    @property
    def cwd(self) -> Path:
        return self.source.parent

    def _run_stage(self, stage: str, template: Optional[str]) -> None:
        if not template:
            return
        command = build_command(template, self.source)
        logger.info("%s command: %s", stage, command)
        try:
            completed = subprocess.run(
                command,
                shell=True,
                cwd=self.cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise CommandError(stage, str(e)) from e
        if completed.returncode != 0:
            detail = _decode(completed.stderr).strip() or f"exit status {completed.returncode}"
            raise CommandError(stage, detail)

    def run_case(self, test_case: TestCase) -> Verdict:
        """Run a single test case and classify it."""
        command = build_command(self.scripts.script, self.source)
        try:
            process = subprocess.Popen(
                command,
                shell=True,
                cwd=self.cwd,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            return RuntimeOrSpawnError(str(e))

        self._process = process
        try:
            stdout, stderr = process.communicate(test_case.input.encode(), timeout=self.timeout)
        except subprocess.TimeoutExpired:
            _kill_group(process)
            process.communicate()
            return TimeLimitExceeded()
        except OSError as e:
            _kill_group(process)
            process.communicate()
            return RuntimeOrSpawnError(str(e))
        finally:
            self._process = None

        if self._cancelled.is_set():
            return RuntimeOrSpawnError("Cancelled")
        if process.returncode != 0:
            detail = _decode(stderr).strip() or f"exit status {process.returncode}"
            return RuntimeOrSpawnError(detail)
        return compare(test_case, _decode(stdout))

    def run(
        self,
        test_cases: list[TestCase],
        on_verdict: Callable[[int, Verdict], None],
    ) -> list[Verdict]:
        """Run every case in order, reporting each verdict as soon as it is known.

        Case ids passed to on_verdict are 1-based. Raises CommandError if the
        before or after command fails.
        """
        self._run_stage("Before", self.scripts.before_script)

        verdicts: list[Verdict] = []
        for id, test_case in enumerate(test_cases, start=1):
            if self._cancelled.is_set():
                break
            on_verdict(id, Running())
            verdict = self.run_case(test_case)
            logger.info("Test #%d: %s", id, type(verdict).__name__)
            verdicts.append(verdict)
            on_verdict(id, verdict)

        self._run_stage("After", self.scripts.after_script)
        return verdicts

    def cancel(self) -> None:
        """Stop the run, killing the case in progress."""
        self._cancelled.set()
        process = self._process
        if process is not None:
            _kill_group(process)


def open_in_editor(scripts: ScriptSet, source: Path) -> subprocess.Popen:
    """Start the open command for source without waiting for it."""
    if not scripts.open_script:
        raise NoConfigItemError("open_script")
    command = build_command(scripts.open_script, source)
    logger.info("Open command: %s", command)
    try:
        return subprocess.Popen(
            command,
            shell=True,
            cwd=source.parent,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        raise CommandError("Open", str(e)) from e
