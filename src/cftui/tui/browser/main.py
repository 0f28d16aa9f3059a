"""The main browser: all contests and the problemset."""

from typing import Any, Callable, Sequence

from cftui.client import BASE_URL, CodeforcesClient
from cftui.display import contest_row, problemset_row
from cftui.tui.component import Component, Fetched, FetchingTable, open_url, rows
from cftui.tui.msg import ContestBrowser, EnterNewView
from cftui.tui.view import BrowserView
from cftui.tui.widgets import Fixed


def fetch_contests(client: CodeforcesClient) -> Fetched:
    contests = sorted(client.contest_list(), key=lambda contest: contest.id, reverse=True)
    return Fetched(tuple(contests), rows(contests, contest_row))


def fetch_problemset(client: CodeforcesClient) -> Fetched:
    problems = client.problemset_problems().problems
    return Fetched(tuple(problems), rows(problems, problemset_row))


def problemset_url(contest_id: int | None, index: str) -> str:
    if contest_id is None:
        return f"{BASE_URL}acmsguru/problem/99999/{index}"
    return f"{BASE_URL}problemset/problem/{contest_id}/{index}"


class ContestList(FetchingTable):
    title = "Contests"
    header = ("Name", "Start", "Length")
    widths = (3, Fixed(20), 1)
    error_title = "Error from Contest"

    def fetch(self) -> Callable[[], Fetched]:
        client = self.context.client
        return lambda: fetch_contests(client)

    def enter(self) -> Any:
        return EnterNewView(ContestBrowser(self.selected_record()))


class ProblemsetList(FetchingTable):
    title = "Problemset"
    header = ("#", "Name", "Tags")
    widths = (Fixed(6), 1, 1)
    error_title = "Error from ProblemSet"

    def fetch(self) -> Callable[[], Fetched]:
        client = self.context.client
        return lambda: fetch_problemset(client)

    def enter(self) -> Any:
        problem = self.selected_record()
        return open_url(problemset_url(problem.contest_id, problem.index))


class MainBrowserView(BrowserView):
    tab_titles = ("Contests", "Problemset")

    def build_components(self) -> Sequence[Component]:
        return [ContestList(self.handler, self.context), ProblemsetList(self.handler, self.context)]
