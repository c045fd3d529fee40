import os
import subprocess
import sys
from pathlib import Path

from test_file_rendering import GREETER_SOURCE


def _run_cli(args, cwd: Path, stdin: str = ""):
    env = os.environ.copy()
    pythonpath = env.get("PYTHONPATH", "")
    env["PYTHONPATH"] = str(Path("src").resolve()) + (os.pathsep + pythonpath if pythonpath else "")
    result = subprocess.run(
        [sys.executable, "-m", "cli", *args],
        cwd=cwd,
        env=env,
        input=stdin,
        check=False,
        capture_output=True,
        text=True,
    )
    return result


def test_cli_renders_to_stdout():
    result = _run_cli(["render", "tests/cases/greeter.py:build"], cwd=Path("."))
    assert result.returncode == 0, result.stderr
    assert result.stdout == GREETER_SOURCE


def test_cli_renders_to_file(tmp_path):
    output_path = tmp_path / "out" / "Greeter.kt"
    result = _run_cli(
        ["render", "tests/cases/greeter.py:build", "--out", str(output_path), "--indent", "4"],
        cwd=Path("."),
    )
    assert result.returncode == 0, result.stderr
    content = output_path.read_text(encoding="utf-8")
    assert "    fun greet(): String" in content


def test_cli_missing_script():
    result = _run_cli(["render", "tests/cases/missing.py:build"], cwd=Path("."))
    assert result.returncode == 1
    assert "ERROR: Script not found" in result.stderr


def test_cli_reports_import_conflicts():
    result = _run_cli(["render", "tests/cases/conflict.py:build"], cwd=Path("."))
    assert result.returncode == 1
    assert "ERROR: Rendering failed: conflicting imports for Date" in result.stderr


def test_cli_wrap():
    result = _run_cli(
        ["wrap", "--column-limit", "10", "--indent", "4"],
        cwd=Path("."),
        stdin="abcde fghij\nshort\n",
    )
    assert result.returncode == 0, result.stderr
    assert result.stdout == "abcde\n    fghij\nshort\n"


def test_cli_rejects_bad_column_limit():
    result = _run_cli(["wrap", "--column-limit", "1"], cwd=Path("."), stdin="x\n")
    assert result.returncode == 1
    assert "column_limit must be at least 2" in result.stderr


def test_cli_reports_invalid_declarations():
    result = _run_cli(["render", "tests/cases/invalid.py:build"], cwd=Path("."))
    assert result.returncode == 1
    assert "ERROR: at least one enum constant" in result.stderr
    assert "Traceback" not in result.stderr


def test_cli_reports_broken_scripts():
    result = _run_cli(["render", "tests/cases/broken_import.py:build"], cwd=Path("."))
    assert result.returncode == 1
    assert "ERROR:" in result.stderr
    assert "Traceback" not in result.stderr


def test_cli_wrap_keeps_glued_spaces():
    result = _run_cli(
        ["wrap", "--column-limit", "10", "--indent", "4"],
        cwd=Path("."),
        stdin="a·b c\naaaa·bbbb cc\n",
    )
    assert result.returncode == 0, result.stderr
    assert result.stdout == "a·b c\naaaa·bbbb\n    cc\n"
