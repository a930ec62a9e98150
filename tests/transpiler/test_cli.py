"""Tests for the zeno command line."""

import json
import logging

import pytest

from zenoscript import __version__
from zenoscript.transpiler.cli import main


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() installs handlers on the root logger; put the old ones back."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "hello.zs"
    path.write_text("let name = \"world\"\nconsole.log name\n", encoding="utf-8")
    return path


class TestFileMode:
    """zeno INPUT [OUTPUT]."""

    def test_prints_to_stdout(self, source_file, capsys):
        """Test that output goes to stdout without OUTPUT."""
        assert main([str(source_file)]) == 0
        out = capsys.readouterr().out
        assert out == 'const name = "world";\nconsole.log(name)\n\n'

    def test_writes_output_file(self, source_file, tmp_path, capsys):
        """Test writing OUTPUT and the confirmation line."""
        output = tmp_path / "dist" / "hello.ts"
        assert main([str(source_file), str(output)]) == 0
        assert output.read_text(encoding="utf-8") == 'const name = "world";\nconsole.log(name)\n'
        assert capsys.readouterr().out == f"Wrote {output}\n"

    def test_output_directory(self, source_file, tmp_path, capsys):
        """Test that a directory OUTPUT receives <stem>.ts."""
        out_dir = tmp_path / "build"
        out_dir.mkdir()
        assert main([str(source_file), str(out_dir)]) == 0
        assert (out_dir / "hello.ts").exists()
        assert "hello.ts" in capsys.readouterr().out

    def test_quiet(self, source_file, tmp_path, capsys):
        """Test that -q suppresses the confirmation line."""
        assert main([str(source_file), str(tmp_path / "o.ts"), "-q"]) == 0
        assert capsys.readouterr().out == ""

    def test_missing_file(self, tmp_path, capsys):
        """Test the exit status and message for a missing input."""
        assert main([str(tmp_path / "nope.zs")]) == 1
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "nope.zs" in err

    def test_syntax_error(self, tmp_path, capsys):
        """Test that a malformed construct exits with status 1."""
        bad = tmp_path / "bad.zs"
        bad.write_text("const x = 1 |>\n", encoding="utf-8")
        assert main([str(bad)]) == 1
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "Dangling pipe" in err

    def test_lex_error(self, tmp_path, capsys):
        """Test that an unterminated string exits with status 1."""
        bad = tmp_path / "bad.zs"
        bad.write_text('let s = "open\n', encoding="utf-8")
        assert main([str(bad)]) == 1
        assert "Unterminated string literal" in capsys.readouterr().err


class TestEvalMode:
    """zeno -e CODE."""

    def test_eval(self, capsys):
        """Test transpiling inline code."""
        assert main(["-e", "let x = 5"]) == 0
        assert capsys.readouterr().out == "const x = 5;\n"

    def test_eval_error(self, capsys):
        """Test an error in inline code."""
        assert main(["-e", "match x { foo => 1 }"]) == 1
        assert "Invalid match pattern" in capsys.readouterr().err

    def test_no_input(self, capsys):
        """Test that running without input is an error."""
        assert main([]) == 1
        assert "Error:" in capsys.readouterr().err


class TestFlags:
    """Version and logging flags."""

    def test_version(self, capsys):
        """Test --version output."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.strip() == f"Zenoscript v{__version__}"

    def test_verbose_logs_to_stderr(self, capsys):
        """Test that -V logs the completion notice to stderr only."""
        assert main(["-V", "-e", "let x = 5"]) == 0
        captured = capsys.readouterr()
        assert captured.out == "const x = 5;\n"
        assert "Transpilation completed successfully" in captured.err

    def test_debug_json_logs(self, capsys):
        """Test -d with JSON records carrying the stage name."""
        assert main(["-d", "--log-format", "json", "-e", "let x = 5"]) == 0
        records = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line.startswith("{")]
        assert any(record.get("stage") == "LetRewriter" for record in records)
