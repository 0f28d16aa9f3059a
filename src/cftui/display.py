"""Formatting of records and verdicts shared by the TUI and the command line."""

from datetime import datetime, timezone
from typing import Optional

from rich.text import Text

from cftui.judge import (
    Accepted,
    Pending,
    Running,
    RuntimeOrSpawnError,
    TimeLimitExceeded,
    Verdict,
)
from cftui.models import Contest, Problem, Submission


VERDICT_NAMES = {
    "FAILED": "Failed",
    "OK": "Accepted",
    "PARTIAL": "Partial",
    "COMPILATION_ERROR": "Compilation Error",
    "RUNTIME_ERROR": "Runtime Error",
    "WRONG_ANSWER": "Wrong Answer",
    "PRESENTATION_ERROR": "Presentation Error",
    "TIME_LIMIT_EXCEEDED": "Time Limit Exceeded",
    "MEMORY_LIMIT_EXCEEDED": "Memory Limit Exceeded",
    "IDLENESS_LIMIT_EXCEEDED": "Idleness Limit Exceeded",
    "SECURITY_VIOLATED": "Security Violated",
    "CRASHED": "Crashed",
    "INPUT_PREPARATION_CRASHED": "Input Preparation Crashed",
    "CHALLENGED": "Challenged",
    "SKIPPED": "Skipped",
    "TESTING": "Testing",
    "REJECTED": "Rejected",
}

DIFF_STYLES = {"equal": "", "insert": "green", "delete": "red"}


def format_timestamp(seconds: Optional[int]) -> str:
    if seconds is None:
        return ""
    return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def format_duration(seconds: int) -> str:
    """Format a contest length as HH:MM, with a day count for long contests."""
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60
    if days:
        return f"{days}d {hours:02}:{minutes:02}"
    return f"{hours:02}:{minutes:02}"


def format_bytes(size: int) -> str:
    for unit in ("B", "KB", "MB"):
        if size < 1000:
            return f"{size} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1000
    return f"{size:.1f} GB"


def contest_row(contest: Contest) -> list[Text]:
    return [
        Text(contest.name),
        Text(format_timestamp(contest.start_time_seconds)),
        Text(format_duration(contest.duration_seconds)),
    ]


def problemset_row(problem: Problem) -> list[Text]:
    number = f"{problem.contest_id}{problem.index}" if problem.contest_id else problem.index
    return [Text(number), Text(problem.name), Text(", ".join(problem.tags))]


def problem_status(problem: Problem, submissions: list[Submission]) -> Text:
    """Accepted if any own submission passed, Rejected if all failed, else empty."""
    verdicts = [s.verdict for s in submissions if s.problem.index == problem.index]
    if "OK" in verdicts:
        return Text("Accepted", style="green")
    if verdicts:
        return Text("Rejected", style="red")
    return Text("")


def submission_verdict(submission: Submission) -> Text:
    verdict = submission.verdict
    test = submission.passed_test_count + 1
    if verdict is None:
        return Text("Failed", style="red")
    if verdict == "OK":
        return Text("Accepted", style="green")
    if verdict == "TESTING":
        return Text(f"Testing on test {test}", style="blue")
    return Text(f"{VERDICT_NAMES.get(verdict, verdict)} on test {test}", style="red")


def submission_row(submission: Submission) -> list[Text]:
    return [
        Text(format_timestamp(submission.creation_time_seconds)),
        Text(f"{submission.problem.index} - {submission.problem.name}"),
        submission_verdict(submission),
        Text(f"{submission.time_consumed_millis}ms"),
        Text(format_bytes(submission.memory_consumed_bytes)),
    ]


def format_points(points: float) -> str:
    return f"{points:.0f}"


def format_verdict(id: int, verdict: Verdict) -> list[Text]:
    """Render the verdict of test #id as a block of lines."""
    if isinstance(verdict, Accepted):
        return [Text(f"Passed #{id}.", style="green")]
    if isinstance(verdict, TimeLimitExceeded):
        return [Text(f"Time Limit Exceeded on Test #{id}", style="blue")]
    if isinstance(verdict, RuntimeOrSpawnError):
        return [Text(f"Error occured on Test #{id}: {verdict.detail}", style="red")]
    if isinstance(verdict, Running):
        return [Text(f"Running #{id}...")]
    if isinstance(verdict, Pending):
        return [Text(f"Testing #{id}...")]

    lines = [Text(f"Wrong Answer on Test #{id}", style="red"), Text("--- Input ---")]
    lines.extend(Text(line) for line in verdict.input.rstrip().splitlines())
    lines.append(Text("--- Output ---"))
    lines.extend(Text(line) for line in verdict.actual.splitlines())
    lines.append(Text("--- Answer ---"))
    lines.extend(Text(line) for line in verdict.expected.splitlines())
    lines.append(Text("--- Diff ---"))
    lines.extend(Text(line.text, style=DIFF_STYLES[line.tag]) for line in verdict.diff)
    return lines
