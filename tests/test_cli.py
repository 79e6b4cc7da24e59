"""
Tests for the one-shot CLI commands.

Each test runs against a fresh TASKPAD_DATA_DIR (see conftest.py), so
tasks persist between invocations within a test only.
"""

import json

from typer.testing import CliRunner

from taskpad.cli.main import app, __version__


runner = CliRunner()


def invoke(*args, **kwargs):
    return runner.invoke(app, list(args), **kwargs)


def add_task(title, *options):
    result = invoke("add", title, *options, "--json")
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def list_json(*options):
    result = invoke("ls", *options, "--json")
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_version():
    result = invoke("version")

    assert result.exit_code == 0
    assert f"Taskpad v{__version__}" in result.output


def test_help_lists_commands():
    result = invoke("help")

    assert result.exit_code == 0
    for command in ("add", "ls", "done", "rm", "edit", "show", "stats"):
        assert command in result.output


def test_add_and_list():
    """Added tasks show up in ls with defaults applied."""
    result = invoke("add", "Write spec")
    assert result.exit_code == 0
    assert "Task added successfully" in result.output

    tasks = list_json()
    assert len(tasks) == 1
    assert tasks[0]["title"] == "Write spec"
    assert tasks[0]["status"] == "pending"
    assert tasks[0]["priority"] == "medium"
    assert tasks[0]["dueDate"] == ""
    print("✓ add + ls works")


def test_add_with_options():
    task = add_task("Fix bug", "--priority", "high", "--due", "2025-03-01", "--desc", "Crash on save")

    assert task["priority"] == "high"
    assert task["dueDate"] == "2025-03-01"
    assert task["description"] == "Crash on save"


def test_add_rejects_blank_title():
    result = invoke("add", "   ")

    assert result.exit_code == 1
    assert "cannot be empty" in result.output
    assert list_json() == []


def test_add_rejects_unknown_priority():
    result = invoke("add", "Task", "--priority", "urgent")

    assert result.exit_code == 1
    assert "Invalid priority" in result.output


def test_ls_filter_and_sort():
    add_task("Low", "--priority", "low")
    add_task("High", "--priority", "high")
    done_me = add_task("Done", "--priority", "medium")
    invoke("done", done_me["id"])

    pending = list_json("--filter", "pending", "--sort", "priority", "--order", "asc")
    assert [t["title"] for t in pending] == ["High", "Low"]

    completed = list_json("--filter", "completed")
    assert [t["title"] for t in completed] == ["Done"]


def test_ls_default_is_newest_first():
    add_task("First")
    add_task("Second")

    assert [t["title"] for t in list_json()] == ["Second", "First"]


def test_ls_sort_by_due_date():
    add_task("Undated")
    add_task("Dated", "--due", "2025-06-01")

    titles = [t["title"] for t in list_json("--sort", "dueDate", "--order", "asc")]
    assert titles == ["Dated", "Undated"]


def test_ls_rejects_bad_filter():
    result = invoke("ls", "--filter", "archived")

    assert result.exit_code == 1
    assert "Invalid filter" in result.output


def test_ls_raw_and_table():
    task = add_task("Readable")

    raw = invoke("ls", "--raw")
    assert raw.stdout.strip() == f"{task['id']}: [ ] Readable (medium)"

    table = invoke("ls")
    assert "Readable" in table.output
    assert "Total: 1" in table.output


def test_done_toggles_with_prefix():
    task = add_task("Toggle me")

    result = invoke("done", task["id"][:6])
    assert result.exit_code == 0
    assert "Task marked as completed" in result.output

    result = invoke("done", task["id"])
    assert "Task marked as pending" in result.output


def test_done_multiple_ids():
    a = add_task("A")
    b = add_task("B")

    result = invoke("done", f"{a['id']},{b['id']}", "--json")

    assert result.exit_code == 0
    assert [t["status"] for t in json.loads(result.stdout)] == ["completed", "completed"]


def test_done_unknown_id_fails():
    result = invoke("done", "nope")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_rm_is_idempotent():
    task = add_task("Delete me")

    first = invoke("rm", task["id"])
    assert first.exit_code == 0
    assert "Task deleted successfully" in first.output

    second = invoke("rm", task["id"])
    assert second.exit_code == 0
    assert list_json() == []


def test_rm_json_lists_deleted():
    a = add_task("A")
    add_task("B")

    result = invoke("rm", f"{a['id']},missing", "--json")

    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"id": a["id"], "title": "A"}]
    assert [t["title"] for t in list_json()] == ["B"]


def test_edit_fields():
    task = add_task("Draft", "--due", "2025-03-01")

    result = invoke(
        "edit", task["id"],
        "--title", "Final",
        "--status", "in-progress",
        "--priority", "low",
        "--json",
    )
    assert result.exit_code == 0
    edited = json.loads(result.stdout)
    assert edited["id"] == task["id"]
    assert edited["createdAt"] == task["createdAt"]
    assert edited["title"] == "Final"
    assert edited["status"] == "in-progress"
    assert edited["priority"] == "low"
    assert edited["dueDate"] == "2025-03-01"

    cleared = json.loads(invoke("edit", task["id"], "--clear-due", "--json").stdout)
    assert cleared["dueDate"] == ""


def test_edit_without_changes_fails():
    task = add_task("Same")

    result = invoke("edit", task["id"])

    assert result.exit_code == 1
    assert "Nothing to change" in result.output


def test_show():
    task = add_task("Inspect", "--desc", "Look closely")

    result = invoke("show", task["id"], "--json")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["description"] == "Look closely"

    panel = invoke("show", task["id"])
    assert "Look closely" in panel.output

    missing = invoke("show", "nope")
    assert missing.exit_code == 1


def test_stats():
    a = add_task("A")
    add_task("B", "--status", "in-progress")
    invoke("done", a["id"])

    result = invoke("stats", "--json")

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"total": 2, "completed": 1, "pending": 1}


def test_corrupt_storage_warns_and_continues(isolated_env):
    data_dir = isolated_env / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "storage.json").write_text(json.dumps({"tasks": "{broken"}), encoding="utf-8")

    result = invoke("ls")

    assert result.exit_code == 0
    assert "Warning" in result.output
    assert "No tasks found" in result.output


def test_remote_backend_requires_url(monkeypatch):
    monkeypatch.setenv("TASKPAD_BACKEND", "remote")

    result = invoke("ls")

    assert result.exit_code == 1
    assert "TASKPAD_REMOTE_URL" in result.output


def test_no_command_launches_repl():
    """Running without a subcommand starts the REPL."""
    result = invoke(input="exit\n")

    assert result.exit_code == 0
    assert "Taskpad REPL" in result.output
    assert "Goodbye!" in result.output
