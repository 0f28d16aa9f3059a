"""Tests for local file storage."""

import json
from datetime import datetime

import pytest

from cftui.exceptions import (
    ConfigError,
    NoConfigItemError,
    NoScriptError,
    SourceNotFoundError,
    TestCasesNotFoundError,
)
from cftui.models import Settings, Template, TestCase
from cftui.storage import (
    Storage,
    Workspace,
    generate_source,
    render_template,
    resolve_template_path,
)


@pytest.fixture
def storage(tmp_path) -> Storage:
    """Create a Storage instance with a temporary base path."""
    return Storage(base_path=tmp_path)


@pytest.fixture
def workspace(home_dir) -> Workspace:
    """Create a Workspace rooted at a temporary home_dir."""
    return Workspace(home_dir)


@pytest.fixture
def sample_test_cases() -> list[TestCase]:
    return [
        TestCase(input="3\n1 2 3\n", answer="6\n"),
        TestCase(input="1\n5\n", answer="5\n"),
    ]


class TestSettings:
    """Tests for Storage.get_settings() and Storage.save_settings()."""

    def test_missing_config_returns_defaults(self, storage):
        """Test that an absent config.json yields empty settings."""
        settings = storage.get_settings()
        assert settings == Settings()
        assert settings.templates == []
        assert settings.commands == {}

    def test_defaults_are_not_shared(self, storage):
        """Test that mutating one default Settings does not leak into the next."""
        storage.get_settings().templates.append(Template("C++", "cpp", "main.cpp"))
        assert storage.get_settings().templates == []

    def test_load_full_config(self, storage, tmp_path):
        """Test that every configured item is read."""
        storage.config_path.write_text(
            json.dumps(
                {
                    "username": "tourist",
                    "key": "abc",
                    "secret": "def",
                    "home_dir": str(tmp_path / "cf"),
                    "templates": [{"alias": "C++", "lang": "cpp", "path": "main.cpp"}],
                    "commands": {
                        ".cpp": {
                            "before_script": "g++ <% full %> -o <% file %>",
                            "script": "./<% file %>",
                        }
                    },
                }
            ),
            encoding="utf-8",
        )

        settings = storage.get_settings()
        assert settings.username == "tourist"
        assert settings.key == "abc"
        assert settings.secret == "def"
        assert settings.home_dir == tmp_path / "cf"
        assert settings.templates == [Template(alias="C++", lang="cpp", path="main.cpp")]
        assert settings.commands["cpp"].script == "./<% file %>"
        assert settings.commands["cpp"].after_script is None

    def test_empty_strings_are_not_configured(self, storage):
        """Test that blank credentials count as missing."""
        storage.config_path.write_text(
            json.dumps({"username": "", "key": "", "secret": ""}), encoding="utf-8"
        )
        settings = storage.get_settings()
        assert settings.username is None
        assert settings.key is None
        assert settings.secret is None

    def test_invalid_json_raises(self, storage):
        """Test ConfigError on a malformed config.json."""
        storage.config_path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            storage.get_settings()

    def test_non_object_raises(self, storage):
        """Test ConfigError when config.json is not an object."""
        storage.config_path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ConfigError):
            storage.get_settings()

    def test_template_without_path_raises(self, storage):
        """Test ConfigError when a template entry is incomplete."""
        storage.config_path.write_text(
            json.dumps({"templates": [{"alias": "C++", "lang": "cpp"}]}), encoding="utf-8"
        )
        with pytest.raises(ConfigError):
            storage.get_settings()

    def test_save_and_load(self, storage, settings):
        """Test that saved settings load back unchanged."""
        storage.save_settings(settings)
        assert storage.get_settings() == settings


class TestTestCases:
    """Tests for saving and loading test cases in the workspace."""

    def test_workspace_requires_home_dir(self):
        """Test NoConfigItemError without a home_dir."""
        with pytest.raises(NoConfigItemError) as exc_info:
            Workspace(None)
        assert exc_info.value.item == "home_dir"

    def test_problem_dir_layout(self, workspace, home_dir):
        """Test that problem directories live under Contests/{contest}/{problem}."""
        problem_dir = workspace.problem_dir(1850, "A")
        assert problem_dir == home_dir / "Contests" / "1850" / "A"
        assert problem_dir.is_dir()

    def test_problem_dir_without_create(self, workspace):
        """Test that create=False does not touch the filesystem."""
        problem_dir = workspace.problem_dir(1850, "B", create=False)
        assert not problem_dir.exists()

    def test_save_writes_numbered_files(self, workspace, sample_test_cases):
        """Test that test cases are written as in{k}.txt and ans{k}.txt."""
        problem_dir = workspace.problem_dir(42, "A")
        written = workspace.save_test_cases(problem_dir, sample_test_cases)

        assert [path.name for path in written] == ["in1.txt", "ans1.txt", "in2.txt", "ans2.txt"]
        assert (problem_dir / "in1.txt").read_text(encoding="utf-8") == "3\n1 2 3\n"
        assert (problem_dir / "ans2.txt").read_text(encoding="utf-8") == "5\n"

    def test_load_reads_saved_cases(self, workspace, sample_test_cases):
        """Test that loading returns the saved cases in order."""
        problem_dir = workspace.problem_dir(42, "A")
        workspace.save_test_cases(problem_dir, sample_test_cases)
        assert workspace.load_test_cases(problem_dir) == sample_test_cases

    def test_load_stops_at_first_gap(self, workspace):
        """Test that loading stops when a numbered pair is incomplete."""
        problem_dir = workspace.problem_dir(42, "A")
        (problem_dir / "in1.txt").write_text("1\n", encoding="utf-8")
        (problem_dir / "ans1.txt").write_text("1\n", encoding="utf-8")
        (problem_dir / "in2.txt").write_text("2\n", encoding="utf-8")
        (problem_dir / "in3.txt").write_text("3\n", encoding="utf-8")
        (problem_dir / "ans3.txt").write_text("3\n", encoding="utf-8")

        assert workspace.load_test_cases(problem_dir) == [TestCase(input="1\n", answer="1\n")]

    def test_require_raises_when_empty(self, workspace):
        """Test TestCasesNotFoundError when nothing has been parsed."""
        problem_dir = workspace.problem_dir(42, "A", create=False)
        with pytest.raises(TestCasesNotFoundError):
            workspace.require_test_cases(problem_dir)


class TestFindSource:
    """Tests for Workspace.find_source()."""

    def test_finds_source_with_commands(self, workspace, python_scripts):
        """Test that the source matching a configured extension is returned."""
        problem_dir = workspace.problem_dir(42, "A")
        (problem_dir / "A.py").write_text("print(1)\n", encoding="utf-8")

        source, scripts = workspace.find_source(problem_dir, "A", {"py": python_scripts})
        assert source == problem_dir / "A.py"
        assert scripts == python_scripts

    def test_ignores_other_problems(self, workspace, python_scripts):
        """Test that A.py is not picked up for problem A1."""
        problem_dir = workspace.problem_dir(42, "A1")
        (problem_dir / "A.py").write_text("print(1)\n", encoding="utf-8")

        with pytest.raises(SourceNotFoundError):
            workspace.find_source(problem_dir, "A1", {"py": python_scripts})

    def test_skips_sources_without_commands(self, workspace, python_scripts):
        """Test that a source with a configured extension wins over one without."""
        problem_dir = workspace.problem_dir(42, "A")
        (problem_dir / "A.cpp").write_text("int main() {}\n", encoding="utf-8")
        (problem_dir / "A.py").write_text("print(1)\n", encoding="utf-8")

        source, _ = workspace.find_source(problem_dir, "A", {"py": python_scripts})
        assert source.name == "A.py"

    def test_no_commands_for_extension(self, workspace, python_scripts):
        """Test NoScriptError when only unconfigured sources exist."""
        problem_dir = workspace.problem_dir(42, "A")
        (problem_dir / "A.rs").write_text("fn main() {}\n", encoding="utf-8")

        with pytest.raises(NoScriptError) as exc_info:
            workspace.find_source(problem_dir, "A", {"py": python_scripts})
        assert exc_info.value.extension == "rs"

    def test_missing_source(self, workspace, python_scripts):
        """Test SourceNotFoundError for an empty problem directory."""
        problem_dir = workspace.problem_dir(42, "A")
        with pytest.raises(SourceNotFoundError):
            workspace.find_source(problem_dir, "A", {"py": python_scripts})

    def test_commands_not_configured(self, workspace):
        """Test NoConfigItemError when no commands are configured at all."""
        problem_dir = workspace.problem_dir(42, "A")
        with pytest.raises(NoConfigItemError) as exc_info:
            workspace.find_source(problem_dir, "A", {})
        assert exc_info.value.item == "commands"


class TestTemplates:
    """Tests for template rendering and source generation."""

    def test_render_placeholders(self):
        """Test that the username and date placeholders are substituted."""
        content = "// <% username %> <% year %>-<% month %>-<% day %> <% hour %>:<% minute %>:<% second %>"
        rendered = render_template(content, "tourist", datetime(2024, 3, 5, 7, 8, 9))
        assert rendered == "// tourist 2024-03-05 07:08:09"

    def test_relative_path_uses_templates_dir(self, storage):
        """Test that relative template paths resolve inside templates/."""
        path = resolve_template_path(storage, Template("C++", "cpp", "main.cpp"))
        assert path == storage.templates_dir / "main.cpp"

    def test_absolute_path_is_kept(self, storage, tmp_path):
        """Test that absolute template paths are used as they are."""
        absolute = tmp_path / "elsewhere" / "main.cpp"
        assert resolve_template_path(storage, Template("C++", "cpp", str(absolute))) == absolute

    def test_generate_source(self, tmp_storage, settings, workspace):
        """Test that a rendered copy of the template lands in the problem directory."""
        tmp_storage.templates_dir.mkdir(parents=True)
        (tmp_storage.templates_dir / "main.py").write_text(
            "# <% username %> <% year %>\n", encoding="utf-8"
        )
        problem_dir = workspace.problem_dir(42, "B")

        path = generate_source(
            tmp_storage, settings, settings.templates[0], problem_dir, "B", datetime(2023, 1, 2)
        )

        assert path == problem_dir / "B.py"
        assert path.read_text(encoding="utf-8") == "# tourist 2023\n"

    def test_generate_requires_username(self, tmp_storage, settings, workspace):
        """Test NoConfigItemError when username is missing."""
        settings.username = None
        with pytest.raises(NoConfigItemError) as exc_info:
            generate_source(
                tmp_storage, settings, settings.templates[0], workspace.problem_dir(42, "B"), "B"
            )
        assert exc_info.value.item == "username"

    def test_generate_missing_template(self, tmp_storage, settings, workspace):
        """Test ConfigError when the template file can't be read."""
        with pytest.raises(ConfigError):
            generate_source(
                tmp_storage, settings, settings.templates[0], workspace.problem_dir(42, "B"), "B"
            )
