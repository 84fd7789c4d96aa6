"""Tests for the prompt-hook entry point."""

import io
import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from steering.hook import read_hook_input, resolve_hook, run_hook
from steering.session import FileSessionStore


class TestReadHookInput:
    """Tests for hook payload parsing."""

    def test_args_win(self):
        assert read_hook_input(["emit", "state"], '{"prompt": "ignored"}') == {
            "prompt": "emit state"
        }

    def test_json_stdin(self):
        payload = read_hook_input([], '{"prompt": "hi", "session_id": "s1"}')

        assert payload == {"prompt": "hi", "session_id": "s1"}

    def test_plain_stdin(self):
        assert read_hook_input([], "add a cubit\n") == {"prompt": "add a cubit"}

    def test_empty_stdin(self):
        assert read_hook_input([], "  ") == {}

    def test_non_object_json(self):
        assert read_hook_input([], '"just a string"') == {"prompt": '"just a string"'}


@pytest.fixture
def project(flutter_project: Path, catalog_dir: Path) -> Path:
    """Flutter project configured to use the test catalog."""
    with open(flutter_project / "steering-config.yaml", "w") as f:
        yaml.dump({"catalog": {"path": str(catalog_dir)}}, f)
    return flutter_project


@pytest.mark.usefixtures("clean_env")
class TestRunHook:
    """Tests for run_hook."""

    def test_first_turn_injects_workspace_and_prompt_documents(self, project: Path):
        output = run_hook({"prompt": "which routes?", "session_id": "s1", "cwd": str(project)})

        assert '<steering count="2">' in output
        assert output.index('id="bloc-state"') < output.index('id="gorouter-navigation"')
        assert "Guidance for bloc-state." in output

    def test_second_turn_is_suppressed(self, project: Path):
        payload = {"prompt": "which routes?", "session_id": "s1", "cwd": str(project)}
        run_hook(payload)

        assert run_hook(payload) == ""

    def test_session_file_written(self, project: Path):
        run_hook({"prompt": "jank", "session_id": "s1", "cwd": str(project)})

        store = FileSessionStore(project / ".steering" / "sessions")
        data = json.loads(store._path("s1").read_text())

        assert data["already_loaded"] == ["bloc-state", "performance"]

    def test_sessions_are_independent(self, project: Path):
        run_hook({"prompt": "", "session_id": "s1", "cwd": str(project)})

        output = run_hook({"prompt": "", "session_id": "s2", "cwd": str(project)})

        assert 'id="bloc-state"' in output

    def test_non_string_prompt_and_session_id(self, project: Path):
        output = run_hook({"prompt": 42, "session_id": 7, "cwd": str(project)})

        assert 'id="bloc-state"' in output
        assert FileSessionStore(project / ".steering" / "sessions").get("7").already_loaded == {
            "bloc-state"
        }

    def test_list_prompt_is_read_as_text(self, project: Path):
        output = run_hook({"prompt": ["routes"], "session_id": "s1", "cwd": str(project)})

        assert 'id="gorouter-navigation"' in output

    def test_null_prompt(self, project: Path):
        output = run_hook({"prompt": None, "session_id": "s1", "cwd": str(project)})

        assert '<steering count="1">' in output

    def test_ignored_build_dirs_do_not_trigger(self, project: Path):
        """build/ holds app_router.dart but is skipped by the scanner."""
        output = run_hook({"prompt": "", "session_id": "s1", "cwd": str(project)})

        assert "gorouter-navigation" not in output


@pytest.mark.usefixtures("clean_env")
class TestResolveHook:
    """Tests for the console entry point."""

    def test_prints_injection(self, project: Path, capsys):
        stdin = json.dumps({"prompt": "jank", "session_id": "s9", "cwd": str(project)})

        with patch.object(sys, "argv", ["steering-resolve"]), patch.object(
            sys, "stdin", io.StringIO(stdin)
        ):
            resolve_hook()

        captured = capsys.readouterr()
        assert 'id="performance"' in captured.out

    def test_error_goes_to_stderr(self, tmp_path: Path, capsys):
        (tmp_path / "steering-config.yaml").write_text(
            yaml.dump({"catalog": {"path": str(tmp_path / "missing.yaml")}})
        )
        stdin = json.dumps({"prompt": "x", "cwd": str(tmp_path)})

        with patch.object(sys, "argv", ["steering-resolve"]), patch.object(
            sys, "stdin", io.StringIO(stdin)
        ):
            with pytest.raises(SystemExit) as exc_info:
                resolve_hook()

        captured = capsys.readouterr()
        assert exc_info.value.code == 1
        assert captured.out == ""
        assert "Catalog not found" in captured.err
