"""Tests for the cftui.models module."""

import dataclasses

import pytest

from cftui.models import (
    Contest,
    Party,
    Problem,
    ProblemSet,
    ScriptSet,
    Standings,
    Submission,
    TestCase,
)


class TestTestCase:
    """Tests for the TestCase dataclass."""

    def test_is_immutable(self):
        """Test that a TestCase can't be changed once created."""
        test_case = TestCase(input="1 2\n", answer="3\n")
        with pytest.raises(dataclasses.FrozenInstanceError):
            test_case.input = "2 3\n"


class TestScriptSet:
    """Tests for ScriptSet.from_json()."""

    def test_all_stages(self):
        """Test that every stage is read."""
        scripts = ScriptSet.from_json(
            {
                "before_script": "g++ <% full %> -o <% file %>",
                "script": "./<% file %>",
                "after_script": "rm <% file %>",
                "open_script": "code <% full %>",
            }
        )
        assert scripts.before_script == "g++ <% full %> -o <% file %>"
        assert scripts.script == "./<% file %>"
        assert scripts.after_script == "rm <% file %>"
        assert scripts.open_script == "code <% full %>"

    def test_empty_stages_are_none(self):
        """Test that missing or empty optional stages become None."""
        scripts = ScriptSet.from_json({"script": "python3 <% full %>", "before_script": ""})
        assert scripts.before_script is None
        assert scripts.after_script is None
        assert scripts.open_script is None

    def test_script_is_required(self):
        """Test that a ScriptSet without a run script is rejected."""
        with pytest.raises(KeyError):
            ScriptSet.from_json({"before_script": "make"})


class TestContest:
    """Tests for Contest.from_json()."""

    def test_from_json(self):
        """Test parsing a contest.list entry."""
        contest = Contest.from_json(
            {
                "id": 1850,
                "name": "Codeforces Round 886 (Div. 4)",
                "type": "ICPC",
                "phase": "FINISHED",
                "frozen": False,
                "durationSeconds": 8100,
                "startTimeSeconds": 1689950100,
            }
        )
        assert contest.id == 1850
        assert contest.duration_seconds == 8100
        assert contest.start_time_seconds == 1689950100

    def test_missing_start_time(self):
        """Test that contests without a start time are accepted."""
        contest = Contest.from_json({"id": 1, "name": "Gym", "durationSeconds": 60})
        assert contest.start_time_seconds is None


class TestProblem:
    """Tests for Problem.from_json()."""

    def test_from_json(self):
        """Test parsing a problem with tags."""
        problem = Problem.from_json(
            {
                "contestId": 1850,
                "index": "A",
                "name": "To My Critics",
                "type": "PROGRAMMING",
                "rating": 800,
                "tags": ["implementation", "sortings"],
            }
        )
        assert problem.contest_id == 1850
        assert problem.tags == ("implementation", "sortings")
        assert problem.is_interactive is False

    def test_interactive(self):
        """Test that the interactive tag marks a problem interactive."""
        problem = Problem.from_json({"index": "E", "name": "Guess", "tags": ["interactive"]})
        assert problem.is_interactive is True


class TestParty:
    """Tests for Party."""

    def test_handles_are_joined(self):
        """Test that team members are listed comma separated."""
        party = Party.from_json(
            {"members": [{"handle": "tourist"}, {"handle": "Petr"}], "participantType": "CONTESTANT"}
        )
        assert party.handles == "tourist,Petr"
        assert party.participant_type == "CONTESTANT"


class TestSubmission:
    """Tests for Submission.from_json()."""

    def test_from_json(self):
        """Test parsing a contest.status entry."""
        submission = Submission.from_json(
            {
                "id": 123,
                "contestId": 42,
                "creationTimeSeconds": 1700000000,
                "problem": {"contestId": 42, "index": "A", "name": "Two Buttons"},
                "author": {"members": [{"handle": "tourist"}]},
                "programmingLanguage": "Python 3",
                "verdict": "WRONG_ANSWER",
                "passedTestCount": 3,
                "timeConsumedMillis": 46,
                "memoryConsumedBytes": 102400,
            }
        )
        assert submission.id == 123
        assert submission.problem.index == "A"
        assert submission.author.handles == "tourist"
        assert submission.verdict == "WRONG_ANSWER"
        assert submission.passed_test_count == 3

    def test_verdict_may_be_missing(self):
        """Test that a submission still in queue has no verdict."""
        submission = Submission.from_json(
            {"id": 1, "problem": {"index": "A", "name": "Two Buttons"}}
        )
        assert submission.verdict is None


class TestStandings:
    """Tests for Standings.from_json()."""

    def test_from_json(self):
        """Test parsing contest.standings with rows and problem results."""
        standings = Standings.from_json(
            {
                "contest": {"id": 42, "name": "Round 42", "durationSeconds": 7200},
                "problems": [{"index": "A", "name": "Two Buttons"}, {"index": "B", "name": "Stones"}],
                "rows": [
                    {
                        "party": {"members": [{"handle": "tourist"}]},
                        "rank": 1,
                        "points": 1500.0,
                        "penalty": 0,
                        "problemResults": [{"points": 500.0}, {"points": 1000.0}],
                    }
                ],
            }
        )
        assert standings.contest.id == 42
        assert [p.index for p in standings.problems] == ["A", "B"]
        assert standings.rows[0].rank == 1
        assert [r.points for r in standings.rows[0].problem_results] == [500.0, 1000.0]


class TestProblemSet:
    """Tests for ProblemSet.from_json()."""

    def test_from_json(self):
        """Test parsing problemset.problems."""
        problem_set = ProblemSet.from_json(
            {
                "problems": [{"contestId": 1, "index": "A", "name": "Theatre Square"}],
                "problemStatistics": [{"contestId": 1, "index": "A", "solvedCount": 200000}],
            }
        )
        assert problem_set.problems[0].name == "Theatre Square"
        assert problem_set.statistics[0].solved_count == 200000
