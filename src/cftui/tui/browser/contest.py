"""The contest browser: problems, standings and the user's submissions of one contest."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

import pyperclip
from rich.text import Text

from cftui.client import BASE_URL, CodeforcesClient
from cftui.display import format_points, problem_status, submission_row
from cftui.exceptions import (
    CFError,
    InteractiveProblemError,
    NoConfigItemError,
)
from cftui.judge import open_in_editor
from cftui.models import Contest, Problem, ScriptSet
from cftui.scraper import problem_url, scrape_test_cases
from cftui.storage import Workspace, generate_source
from cftui.tui import tasks
from cftui.tui.component import Component, Fetched, FetchingTable, describe, open_url, rows
from cftui.tui.context import Context
from cftui.tui.event import Event, is_key
from cftui.tui.msg import (
    DEFAULT_RATIO,
    NOOP,
    Change,
    Channel,
    EnterNewView,
    ErrorPopup,
    JudgePopup,
    SelectPopup,
    Set,
    UpdatablePopup,
)
from cftui.tui.view import BrowserView
from cftui.tui.widgets import Fixed


logger = logging.getLogger(__name__)

SELECT_RATIO = ((2, 1, 2), (1, 2, 1))


@dataclass(frozen=True)
class StandingsFetched(Fetched):
    header: tuple


def fetch_problems(client: CodeforcesClient, contest_id: int, username: Optional[str]) -> Fetched:
    standings = client.contest_standings(contest_id, from_=1, count=1)
    submissions = client.contest_status(contest_id, handle=username) if username else []
    problems = standings.problems
    return Fetched(
        tuple(problems),
        rows(
            problems,
            lambda p: [Text(p.index), Text(p.name), problem_status(p, submissions)],
        ),
    )


def fetch_standings(client: CodeforcesClient, contest_id: int) -> StandingsFetched:
    standings = client.contest_standings(contest_id, show_unofficial=True)
    header = ("#", "Who", *(problem.index for problem in standings.problems))
    return StandingsFetched(
        tuple(standings.rows),
        rows(
            standings.rows,
            lambda row: [
                Text(str(row.rank)),
                Text(row.party.handles),
                *(Text(format_points(result.points)) for result in row.problem_results),
            ],
        ),
        header,
    )


def fetch_submissions(client: CodeforcesClient, contest_id: int, username: Optional[str]) -> Fetched:
    if not username:
        raise NoConfigItemError("username")
    submissions = client.contest_status(contest_id, handle=username)
    return Fetched(tuple(submissions), rows(submissions, submission_row))


def parse_problem(
    workspace: Workspace,
    contest_id: int,
    problem_index: str,
    updates: Channel,
    popup_sender: Channel,
    line: Optional[int] = None,
) -> None:
    """Scrape and save the samples of one problem.

    With a line number the outcome replaces that line of the popup, otherwise
    it replaces the whole text and failures open an error popup.
    """
    try:
        problem_dir = workspace.problem_dir(contest_id, problem_index)
        test_cases = scrape_test_cases(problem_url(contest_id, problem_index))
        workspace.save_test_cases(problem_dir, test_cases)
    except Exception as e:
        logger.exception("Failed to parse problem %s of contest %d", problem_index, contest_id)
        if line is None:
            popup_sender.send(EnterNewView(ErrorPopup("Error from Parse", describe(e))))
        else:
            failure = Text(f"Failed to parse Problem {problem_index}: {describe(e)}", style="red")
            updates.send(Change(line, failure))
        return

    logger.info("Parsed %d tests for %d%s", len(test_cases), contest_id, problem_index)
    parsed = Text(f"Parsed {len(test_cases)} test cases for Problem {problem_index}", style="green")
    updates.send(Set((parsed,)) if line is None else Change(line, parsed))


class ProblemsList(FetchingTable):
    header = ("#", "Name", "Status")
    widths = (Fixed(3), 9, 1)
    error_title = "Error from Problems"

    def __init__(self, sender: Channel, context: Context, contest: Contest) -> None:
        self.title = contest.name
        self.contest = contest
        super().__init__(sender, context)

    def fetch(self) -> Callable[[], Fetched]:
        client, contest_id = self.context.client, self.contest.id
        username = self.context.settings.username
        return lambda: fetch_problems(client, contest_id, username)

    def on(self, event: Event) -> Any:
        if is_key(event, "p"):
            return self.parse()
        if is_key(event, "P", shift=True):
            return self.parse_all()
        if is_key(event, "t"):
            return self.test()
        if is_key(event, "g"):
            return self.generate()
        if is_key(event, "s"):
            return self.submit()
        if is_key(event, "o"):
            return self.open()
        return super().on(event)

    def enter(self) -> Any:
        problem: Problem = self.selected_record()
        return open_url(problem_url(self.contest.id, problem.index))

    def parse(self) -> Any:
        problem: Problem = self.selected_record()
        if problem.is_interactive:
            raise InteractiveProblemError(problem.index)
        workspace = self.context.workspace
        contest_id, problem_index = self.contest.id, problem.index

        def update(updates: Channel, popup_sender: Channel) -> None:
            tasks.spawn(
                parse_problem, workspace, contest_id, problem_index, updates, popup_sender, None,
                name=f"parse-{problem_index}",
            )

        return EnterNewView(
            UpdatablePopup(DEFAULT_RATIO, update, f"Parse Problem {problem_index}", (Text("Parsing..."),))
        )

    def parse_all(self) -> Any:
        workspace = self.context.workspace
        contest_id = self.contest.id
        problems = tuple(self.records)

        def update(updates: Channel, popup_sender: Channel) -> None:
            for line, problem in enumerate(problems):
                if problem.is_interactive:
                    updates.send(Change(line, Text(InteractiveProblemError(problem.index).message, style="red")))
                    continue
                tasks.spawn(
                    parse_problem, workspace, contest_id, problem.index, updates, popup_sender, line,
                    name=f"parse-{problem.index}",
                )

        text = tuple(Text(f"Parsing Problem {problem.index}...") for problem in problems)
        return EnterNewView(UpdatablePopup(DEFAULT_RATIO, update, f"Parsing {self.contest.name}", text))

    def _find_source(self, problem: Problem, problem_dir: Path) -> tuple[Path, ScriptSet]:
        commands = self.context.settings.commands
        return self.context.workspace.find_source(problem_dir, problem.index, commands)

    def test(self) -> Any:
        problem: Problem = self.selected_record()
        workspace = self.context.workspace
        problem_dir = workspace.problem_dir(self.contest.id, problem.index)
        test_cases = workspace.require_test_cases(problem_dir)
        source, scripts = self._find_source(problem, problem_dir)
        return EnterNewView(
            JudgePopup(scripts, tuple(test_cases), source, f"Test for Problem {problem.index}")
        )

    def generate(self) -> Any:
        templates = list(self.context.settings.templates)
        if not templates:
            raise NoConfigItemError("templates")
        problem: Problem = self.selected_record()
        workspace = self.context.workspace
        storage, settings = self.context.storage, self.context.settings
        contest_id = self.contest.id

        def handle_selection(index: int, sender: Channel) -> None:
            if not 0 <= index < len(templates):
                raise CFError(f"No template #{index}.")
            problem_dir = workspace.problem_dir(contest_id, problem.index)
            path = generate_source(storage, settings, templates[index], problem_dir, problem.index)
            logger.info("Generated %s", path)

        return EnterNewView(
            SelectPopup(
                SELECT_RATIO,
                handle_selection,
                f"Generate for Problem {problem.index}",
                ("Name", "Lang"),
                (1, 1),
                tuple((template.alias, template.lang) for template in templates),
            )
        )

    def submit(self) -> Any:
        problem: Problem = self.selected_record()
        problem_dir = self.context.workspace.problem_dir(self.contest.id, problem.index)
        source, _ = self._find_source(problem, problem_dir)
        try:
            code = source.read_text(encoding="utf-8")
        except OSError as e:
            raise CFError(f"Error occured when reading from {source}: {e}") from e
        try:
            pyperclip.copy(code)
        except pyperclip.PyperclipException as e:
            raise CFError(f"Error occured when trying to copy code to clipboard: {e}") from e
        return open_url(f"{BASE_URL}contest/{self.contest.id}/submit/{problem.index}")

    def open(self) -> Any:
        problem: Problem = self.selected_record()
        problem_dir = self.context.workspace.problem_dir(self.contest.id, problem.index)
        source, scripts = self._find_source(problem, problem_dir)
        open_in_editor(scripts, source)
        return NOOP


class StandingsList(FetchingTable):
    header = ("#", "Who")
    widths = (Fixed(5), 10)
    error_title = "Error from Standings"

    def __init__(self, sender: Channel, context: Context, contest: Contest) -> None:
        self.title = contest.name
        self.contest = contest
        super().__init__(sender, context)

    def fetch(self) -> Callable[[], Fetched]:
        client, contest_id = self.context.client, self.contest.id
        return lambda: fetch_standings(client, contest_id)

    def apply(self, result: Fetched) -> None:
        if isinstance(result, StandingsFetched):
            problem_count = len(result.header) - len(self.header)
            self.component.set_header(result.header, (*self.widths, *(1 for _ in range(problem_count))))
        super().apply(result)


class SubmissionsList(FetchingTable):
    header = ("When", "Problem", "Verdict", "Time", "Memory")
    widths = (2, 3, 3, 1, 1)
    error_title = "Error from Submission"

    def __init__(self, sender: Channel, context: Context, contest: Contest) -> None:
        self.title = contest.name
        self.contest = contest
        super().__init__(sender, context)

    def fetch(self) -> Callable[[], Fetched]:
        client, contest_id = self.context.client, self.contest.id
        username = self.context.settings.username
        return lambda: fetch_submissions(client, contest_id, username)

    def enter(self) -> Any:
        submission = self.selected_record()
        return open_url(f"{BASE_URL}contest/{self.contest.id}/submission/{submission.id}")


class ContestBrowserView(BrowserView):
    tab_titles = ("Problems", "Standings", "Submissions")

    def __init__(self, sender: Channel, context: Context, contest: Contest) -> None:
        self.contest = contest
        super().__init__(sender, context)

    def build_components(self) -> Sequence[Component]:
        return [
            ProblemsList(self.handler, self.context, self.contest),
            StandingsList(self.handler, self.context, self.contest),
            SubmissionsList(self.handler, self.context, self.contest),
        ]
