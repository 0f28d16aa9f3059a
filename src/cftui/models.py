"""Data models for cf-tui."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


@dataclass(frozen=True)
class TestCase:
    """Represents a sample test with its input and expected answer."""

    __test__ = False

    input: str
    answer: str


@dataclass(frozen=True)
class ScriptSet:
    """Shell command templates used to build, run and clean up a solution."""

    script: str
    before_script: Optional[str] = None
    after_script: Optional[str] = None
    open_script: Optional[str] = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ScriptSet":
        return cls(
            script=data["script"],
            before_script=data.get("before_script") or None,
            after_script=data.get("after_script") or None,
            open_script=data.get("open_script") or None,
        )


@dataclass(frozen=True)
class Template:
    """A solution skeleton that can be copied into a problem directory."""

    alias: str
    lang: str
    path: str


@dataclass
class Settings:
    """User configuration for the TUI."""

    username: Optional[str] = None
    key: Optional[str] = None
    secret: Optional[str] = None
    home_dir: Optional[Path] = None
    templates: list[Template] = field(default_factory=list)
    commands: dict[str, ScriptSet] = field(default_factory=dict)


@dataclass(frozen=True)
class Contest:
    """Represents a contest on Codeforces."""

    id: int
    name: str
    type: str
    phase: str
    frozen: bool
    duration_seconds: int
    start_time_seconds: Optional[int] = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Contest":
        return cls(
            id=data["id"],
            name=data["name"],
            type=data.get("type", ""),
            phase=data.get("phase", ""),
            frozen=data.get("frozen", False),
            duration_seconds=data.get("durationSeconds", 0),
            start_time_seconds=data.get("startTimeSeconds"),
        )


@dataclass(frozen=True)
class Problem:
    """Represents a problem, either in a contest or in the problemset."""

    index: str
    name: str
    contest_id: Optional[int] = None
    problemset_name: Optional[str] = None
    type: str = "PROGRAMMING"
    points: Optional[float] = None
    rating: Optional[int] = None
    tags: tuple[str, ...] = ()

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Problem":
        return cls(
            index=data["index"],
            name=data["name"],
            contest_id=data.get("contestId"),
            problemset_name=data.get("problemsetName"),
            type=data.get("type", "PROGRAMMING"),
            points=data.get("points"),
            rating=data.get("rating"),
            tags=tuple(data.get("tags", [])),
        )

    @property
    def is_interactive(self) -> bool:
        return "interactive" in self.tags


@dataclass(frozen=True)
class ProblemStatistics:
    """Represents how many users solved a problemset problem."""

    index: str
    solved_count: int
    contest_id: Optional[int] = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ProblemStatistics":
        return cls(
            index=data["index"],
            solved_count=data.get("solvedCount", 0),
            contest_id=data.get("contestId"),
        )


@dataclass(frozen=True)
class ProblemSet:
    """Represents the result of problemset.problems."""

    problems: list[Problem]
    statistics: list[ProblemStatistics]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ProblemSet":
        return cls(
            problems=[Problem.from_json(p) for p in data.get("problems", [])],
            statistics=[
                ProblemStatistics.from_json(s) for s in data.get("problemStatistics", [])
            ],
        )


@dataclass(frozen=True)
class Member:
    """Represents a member of a party."""

    handle: str
    name: Optional[str] = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Member":
        return cls(handle=data["handle"], name=data.get("name"))


@dataclass(frozen=True)
class Party:
    """Represents a party participating in a contest."""

    members: tuple[Member, ...]
    participant_type: str = ""
    team_name: Optional[str] = None
    ghost: bool = False

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Party":
        return cls(
            members=tuple(Member.from_json(m) for m in data.get("members", [])),
            participant_type=data.get("participantType", ""),
            team_name=data.get("teamName"),
            ghost=data.get("ghost", False),
        )

    @property
    def handles(self) -> str:
        return ",".join(member.handle for member in self.members)


@dataclass(frozen=True)
class Submission:
    """Represents a submission."""

    id: int
    creation_time_seconds: int
    problem: Problem
    author: Party
    programming_language: str
    verdict: Optional[str]
    passed_test_count: int
    time_consumed_millis: int
    memory_consumed_bytes: int
    contest_id: Optional[int] = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Submission":
        return cls(
            id=data["id"],
            creation_time_seconds=data.get("creationTimeSeconds", 0),
            problem=Problem.from_json(data["problem"]),
            author=Party.from_json(data.get("author", {})),
            programming_language=data.get("programmingLanguage", ""),
            verdict=data.get("verdict"),
            passed_test_count=data.get("passedTestCount", 0),
            time_consumed_millis=data.get("timeConsumedMillis", 0),
            memory_consumed_bytes=data.get("memoryConsumedBytes", 0),
            contest_id=data.get("contestId"),
        )


@dataclass(frozen=True)
class ProblemResult:
    """Represents the results of a party for one problem."""

    points: float
    rejected_attempt_count: int = 0
    penalty: Optional[int] = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ProblemResult":
        return cls(
            points=data.get("points", 0.0),
            rejected_attempt_count=data.get("rejectedAttemptCount", 0),
            penalty=data.get("penalty"),
        )


@dataclass(frozen=True)
class RanklistRow:
    """Represents a row of the standings."""

    party: Party
    rank: int
    points: float
    penalty: int
    problem_results: tuple[ProblemResult, ...]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "RanklistRow":
        return cls(
            party=Party.from_json(data["party"]),
            rank=data.get("rank", 0),
            points=data.get("points", 0.0),
            penalty=data.get("penalty", 0),
            problem_results=tuple(
                ProblemResult.from_json(r) for r in data.get("problemResults", [])
            ),
        )


@dataclass(frozen=True)
class Standings:
    """Represents the result of contest.standings."""

    contest: Contest
    problems: list[Problem]
    rows: list[RanklistRow]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Standings":
        return cls(
            contest=Contest.from_json(data["contest"]),
            problems=[Problem.from_json(p) for p in data.get("problems", [])],
            rows=[RanklistRow.from_json(r) for r in data.get("rows", [])],
        )
