"""Tests for the gotoc command line, config loading and diagnostic rendering."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from gotoc import __version__
from gotoc.cli import main
from gotoc.config import CONFIG_NAME, GotocConfig, find_config, load_config
from gotoc.errors import Diagnostic, DiagnosticLabel, DiagnosticRenderer, Severity
from gotoc.source import NO_SPAN, Span

PROGRAM = (
    "package main\n"
    "\n"
    "func Add(a int, b int) int {\n"
    "    return a + b\n"
    "}\n"
)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def program(tmp_path):
    path = tmp_path / "add.go"
    path.write_text(PROGRAM)
    return path


class TestTranslate:
    def test_writes_c_to_stdout(self, runner, program):
        result = runner.invoke(main, [str(program)])
        assert result.exit_code == 0, result.output
        assert result.output == "int Add(int a, int b) {\n    return (a+b);\n}\n"

    def test_output_file(self, runner, program, tmp_path):
        out = tmp_path / "add.c"
        result = runner.invoke(main, [str(program), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert result.output == ""
        assert out.read_text() == "int Add(int a, int b) {\n    return (a+b);\n}\n"

    def test_ast_dump(self, runner, program):
        result = runner.invoke(main, [str(program), "--ast"])
        assert result.exit_code == 0
        assert "File" in result.output
        assert "FuncDecl" in result.output
        assert "name: 'Add'" in result.output
        assert result.output.endswith("    return (a+b);\n}\n")

    def test_ast_dump_layout(self, runner, program):
        result = runner.invoke(main, [str(program), "--ast"])
        lines = result.output.splitlines()
        assert lines[:4] == ["File @1", "  package: 'main'", "  decls:", "    FuncDecl @3"]
        assert "          names: ['a']" in lines
        assert "          names: []" in lines
        assert "          type: Ident int" in lines
        assert "                  left: Ident a" in lines
        assert "                  op: '+'" in lines

    def test_verbose_progress(self, runner, program):
        result = runner.invoke(main, [str(program), "--verbose"])
        assert result.exit_code == 0
        assert "parsing" in result.output
        assert "emitting 1 declarations" in result.output

    def test_missing_argument(self, runner):
        result = runner.invoke(main, [])
        assert result.exit_code == 2

    def test_nonexistent_source(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "nope.go")])
        assert result.exit_code == 2

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestFailures:
    def test_parse_error(self, runner, tmp_path):
        path = tmp_path / "bad.go"
        path.write_text("package main\n\nfunc f() {\n    switch x {\n    }\n}\n")
        result = runner.invoke(main, [str(path), "--no-color"])
        assert result.exit_code == 1
        assert "error[E200]: 'switch' statements are not supported" in result.output
        assert "bad.go:4:5" in result.output
        assert "    switch x {" in result.output

    def test_lex_error(self, runner, tmp_path):
        path = tmp_path / "bad.go"
        path.write_text('package main\nvar s = "open\n')
        result = runner.invoke(main, [str(path), "--no-color"])
        assert result.exit_code == 1
        assert "error[E101]" in result.output

    def test_emit_error_produces_no_c(self, runner, tmp_path):
        path = tmp_path / "multi.go"
        path.write_text("package main\nvar ok int\nfunc f() (int, error) {\n}\n")
        result = runner.invoke(main, [str(path), "--no-color"])
        assert result.exit_code == 1
        assert "error[E303]" in result.output
        assert "int ok;" not in result.output
        assert "note: C functions return at most one value" in result.output

    def test_emit_error_leaves_output_file_alone(self, runner, tmp_path):
        path = tmp_path / "multi.go"
        path.write_text("package main\nfunc f() {\n    return\n}\n")
        out = tmp_path / "multi.c"
        result = runner.invoke(main, [str(path), "-o", str(out)])
        assert result.exit_code == 1
        assert not out.exists()

    def test_source_not_utf8(self, runner, tmp_path):
        path = tmp_path / "latin1.go"
        path.write_bytes(b"package main\nvar x \xff\n")
        result = runner.invoke(main, [str(path)])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert f"error: cannot read {path}" in result.output

    def test_color_by_default(self, runner, tmp_path):
        path = tmp_path / "bad.go"
        path.write_text("package main\nfunc (t T) M() {}\n")
        result = runner.invoke(main, [str(path)], color=True)
        assert result.exit_code == 1
        assert "\033[" in result.output


class TestConfigFile:
    def test_discovered_config(self, runner, program, tmp_path):
        (tmp_path / CONFIG_NAME).write_text("[emit]\nindent_width = 2\n")
        result = runner.invoke(main, [str(program)])
        assert result.exit_code == 0
        assert "\n  return (a+b);\n" in result.output

    def test_discovered_in_parent_directory(self, runner, tmp_path):
        (tmp_path / CONFIG_NAME).write_text("[emit]\nindent_width = 8\n")
        sub = tmp_path / "pkg"
        sub.mkdir()
        src = sub / "add.go"
        src.write_text(PROGRAM)
        result = runner.invoke(main, [str(src)])
        assert result.exit_code == 0
        assert "\n        return (a+b);\n" in result.output

    def test_explicit_config(self, runner, program, tmp_path):
        cfg = tmp_path / "custom.toml"
        cfg.write_text("[emit]\nindent_width = 1\n")
        result = runner.invoke(main, [str(program), "--config", str(cfg)])
        assert result.exit_code == 0
        assert "\n return (a+b);\n" in result.output

    def test_config_disables_color(self, runner, tmp_path):
        (tmp_path / CONFIG_NAME).write_text("[diagnostics]\ncolor = false\n")
        path = tmp_path / "bad.go"
        path.write_text("package main\nfunc (t T) M() {}\n")
        result = runner.invoke(main, [str(path)], color=True)
        assert result.exit_code == 1
        assert "\033[" not in result.output
        assert "error[E200]" in result.output

    def test_invalid_config(self, runner, program, tmp_path):
        (tmp_path / CONFIG_NAME).write_text("[emit]\nindent_width = -3\n")
        result = runner.invoke(main, [str(program)])
        assert result.exit_code == 1
        assert "invalid configuration" in result.output


class TestConfig:
    def test_defaults(self):
        config = GotocConfig()
        assert config.emit.indent_width == 4
        assert config.diagnostics.color is True

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / CONFIG_NAME
        path.write_text("")
        assert load_config(path) == GotocConfig()

    def test_load(self, tmp_path):
        path = tmp_path / CONFIG_NAME
        path.write_text("[emit]\nindent_width = 2\n\n[diagnostics]\ncolor = false\n")
        config = load_config(path)
        assert config.emit.indent_width == 2
        assert config.diagnostics.color is False

    def test_rejects_non_integer_width(self, tmp_path):
        path = tmp_path / CONFIG_NAME
        path.write_text('[emit]\nindent_width = "wide"\n')
        with pytest.raises(ValueError, match="indent_width"):
            load_config(path)

    def test_find_from_file(self, tmp_path):
        (tmp_path / CONFIG_NAME).write_text("")
        src = tmp_path / "main.go"
        src.write_text("")
        assert find_config(src) == (tmp_path / CONFIG_NAME).resolve()

    def test_find_not_found(self, tmp_path, monkeypatch):
        # Stop the upward search from finding a stray config above tmp_path
        monkeypatch.setattr("gotoc.config.CONFIG_NAME", "gotoc-test-absent.toml")
        with pytest.raises(FileNotFoundError):
            find_config(tmp_path)


class TestDiagnostics:
    def _diag(self, span: Span) -> Diagnostic:
        return Diagnostic(
            severity=Severity.ERROR,
            code="E300",
            message="unsupported expression: Foo",
            labels=[DiagnosticLabel(span=span, message="here")],
            notes=["try something simpler"],
        )

    def test_plain_render(self, tmp_path):
        path = tmp_path / "x.go"
        path.write_text("package main\nvar x = y\n")
        span = Span(str(path), 2, 9, 2, 9)
        text = DiagnosticRenderer(color=False).render(self._diag(span))
        assert text.splitlines() == [
            "error[E300]: unsupported expression: Foo",
            f"  --> {path}:2:9",
            "     |",
            "     2 | var x = y",
            "     |         ^",
            "     |   here",
            "  = note: try something simpler",
        ]

    def test_color_render(self):
        text = DiagnosticRenderer(color=True).render(self._diag(NO_SPAN))
        assert text.startswith("\033[1;31merror[E300]")

    def test_unknown_span_renders_header_only(self):
        text = DiagnosticRenderer(color=False).render(self._diag(NO_SPAN))
        assert text.splitlines() == [
            "error[E300]: unsupported expression: Foo",
            "  = note: try something simpler",
        ]

    def test_missing_source_file(self):
        span = Span("/nonexistent/dir/x.go", 3, 1, 3, 4)
        text = DiagnosticRenderer(color=False).render(self._diag(span))
        assert "  --> /nonexistent/dir/x.go:3:1" in text
        assert "^" not in text

    def test_source_excerpt_is_utf8(self, tmp_path):
        path = tmp_path / "x.go"
        path.write_bytes('package main\nvar café = y\n'.encode("utf-8"))
        span = Span(str(path), 2, 5, 2, 8)
        text = DiagnosticRenderer(color=False).render(self._diag(span))
        assert "     2 | var café = y" in text.splitlines()

    def test_undecodable_source_skips_excerpt(self, tmp_path):
        path = tmp_path / "x.go"
        path.write_bytes(b"package main\nvar \xff = y\n")
        span = Span(str(path), 2, 5, 2, 5)
        text = DiagnosticRenderer(color=False).render(self._diag(span))
        assert f"  --> {path}:2:5" in text
        assert "^" not in text
