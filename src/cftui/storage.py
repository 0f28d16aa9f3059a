"""Local file operations for settings, the contest workspace and templates."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from cftui.exceptions import (
    ConfigError,
    NoConfigItemError,
    NoScriptError,
    SourceNotFoundError,
    TestCasesNotFoundError,
)
from cftui.judge import resolve_scripts
from cftui.models import ScriptSet, Settings, Template, TestCase


def _parse_settings(data: dict[str, Any]) -> Settings:
    home_dir = data.get("home_dir")
    try:
        templates = [
            Template(alias=t["alias"], lang=t["lang"], path=t["path"])
            for t in data.get("templates", [])
        ]
        commands = {
            ext.lstrip("."): ScriptSet.from_json(scripts)
            for ext, scripts in data.get("commands", {}).items()
        }
    except (KeyError, TypeError, AttributeError) as e:
        raise ConfigError(f"Invalid configuration: {e!r}") from e

    return Settings(
        username=data.get("username") or None,
        key=data.get("key") or None,
        secret=data.get("secret") or None,
        home_dir=Path(home_dir).expanduser() if home_dir else None,
        templates=templates,
        commands=commands,
    )


class Storage:
    """Manages local files: configuration, parsed tests and solution templates."""

    def __init__(self, base_path: Path | None = None) -> None:
        self.base_path = base_path or Path.home() / ".cf-tui"
        self.config_path = self.base_path / "config.json"
        self.templates_dir = self.base_path / "templates"
        self.log_path = self.base_path / "cf-tui.log"

    def _ensure_dirs(self) -> None:
        """Create base directories if they don't exist."""
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.templates_dir.mkdir(parents=True, exist_ok=True)

    def get_settings(self) -> Settings:
        """Load settings from config.json."""
        if not self.config_path.exists():
            return Settings()

        try:
            data = json.loads(self.config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to read {self.config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{self.config_path} must contain a JSON object")
        return _parse_settings(data)

    def save_settings(self, settings: Settings) -> None:
        """Save settings to config.json."""
        self._ensure_dirs()
        data = {
            "username": settings.username,
            "key": settings.key,
            "secret": settings.secret,
            "home_dir": str(settings.home_dir) if settings.home_dir else None,
            "templates": [
                {"alias": t.alias, "lang": t.lang, "path": t.path} for t in settings.templates
            ],
            "commands": {
                ext: {
                    "before_script": s.before_script,
                    "script": s.script,
                    "after_script": s.after_script,
                    "open_script": s.open_script,
                }
                for ext, s in settings.commands.items()
            },
        }
        self.config_path.write_text(json.dumps(data, indent=2), encoding="utf-8")


class Workspace:
    """The contest directory tree rooted at the configured home_dir."""

    def __init__(self, home_dir: Path | None) -> None:
        if home_dir is None:
            raise NoConfigItemError("home_dir")
        self.home_dir = home_dir
        self.contests_dir = home_dir / "Contests"

    def problem_dir(self, contest_id: int, problem_index: str, create: bool = True) -> Path:
        """Return Contests/{contest_id}/{problem_index}, creating it if asked."""
        problem_dir = self.contests_dir / str(contest_id) / problem_index
        if create:
            problem_dir.mkdir(parents=True, exist_ok=True)
        return problem_dir

    def save_test_cases(self, problem_dir: Path, test_cases: list[TestCase]) -> list[Path]:
        """Write in{k}.txt and ans{k}.txt for every test case. Returns written paths."""
        written = []
        for id, test_case in enumerate(test_cases, start=1):
            input_path = problem_dir / f"in{id}.txt"
            answer_path = problem_dir / f"ans{id}.txt"
            input_path.write_text(test_case.input, encoding="utf-8")
            answer_path.write_text(test_case.answer, encoding="utf-8")
            written.extend([input_path, answer_path])
        return written

    def load_test_cases(self, problem_dir: Path) -> list[TestCase]:
        """Read test cases in order until in{k}.txt or ans{k}.txt is missing."""
        test_cases = []
        id = 1
        while True:
            input_path = problem_dir / f"in{id}.txt"
            answer_path = problem_dir / f"ans{id}.txt"
            if not input_path.is_file() or not answer_path.is_file():
                break
            test_cases.append(
                TestCase(
                    input=input_path.read_text(encoding="utf-8"),
                    answer=answer_path.read_text(encoding="utf-8"),
                )
            )
            id += 1
        return test_cases

    def require_test_cases(self, problem_dir: Path) -> list[TestCase]:
        test_cases = self.load_test_cases(problem_dir)
        if not test_cases:
            raise TestCasesNotFoundError(str(problem_dir))
        return test_cases

    def find_source(
        self, problem_dir: Path, problem_index: str, commands: dict[str, ScriptSet]
    ) -> tuple[Path, ScriptSet]:
        """Find {problem_index}.{ext} with commands configured for ext."""
        if not commands:
            raise NoConfigItemError("commands")

        candidates = [
            path
            for path in sorted(problem_dir.glob(f"{problem_index}.*"))
            if path.is_file() and path.stem == problem_index
        ]
        if not candidates:
            raise SourceNotFoundError(str(problem_dir))

        error: NoScriptError | None = None
        for path in candidates:
            try:
                return path, resolve_scripts(commands, path)
            except NoScriptError as e:
                error = e
        raise error


def resolve_template_path(storage: Storage, template: Template) -> Path:
    path = Path(template.path).expanduser()
    if path.is_absolute():
        return path
    storage.templates_dir.mkdir(parents=True, exist_ok=True)
    return storage.templates_dir / path


def render_template(content: str, username: str, now: datetime) -> str:
    """Substitute the <% username %> and date placeholders of a template."""
    return (
        content.replace("<% username %>", username)
        .replace("<% year %>", str(now.year))
        .replace("<% month %>", f"{now.month:02}")
        .replace("<% day %>", f"{now.day:02}")
        .replace("<% hour %>", f"{now.hour:02}")
        .replace("<% minute %>", f"{now.minute:02}")
        .replace("<% second %>", f"{now.second:02}")
    )


def generate_source(
    storage: Storage,
    settings: Settings,
    template: Template,
    problem_dir: Path,
    problem_index: str,
    now: datetime | None = None,
) -> Path:
    """Copy a template into problem_dir as {problem_index}.{ext}. Returns the new path."""
    if not settings.username:
        raise NoConfigItemError("username")

    template_path = resolve_template_path(storage, template)
    try:
        content = template_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Error occured when reading from {template_path}: {e}") from e

    target_path = problem_dir / f"{problem_index}{template_path.suffix}"
    target_path.write_text(
        render_template(content, settings.username, now or datetime.now()), encoding="utf-8"
    )
    return target_path
