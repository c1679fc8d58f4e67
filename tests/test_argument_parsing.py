"""
Tests for CLI argument parsing, validation and ScanParams creation.
"""
import pytest
from dupescan.cli import CLIApplication


class TestArgumentParsing:
    """Test CLI argument parsing with argparse."""

    def test_roots_are_positional(self):
        args = CLIApplication.parse_args(["/tmp/one", "/tmp/two"])

        assert args.roots == ["/tmp/one", "/tmp/two"]

    def test_roots_are_required(self):
        with pytest.raises(SystemExit):
            CLIApplication.parse_args([])

    def test_defaults(self):
        args = CLIApplication.parse_args(["/tmp"])

        assert args.non_recursive is False
        assert args.include_empty is False
        assert args.min_size == "0"
        assert args.comparators is None
        assert args.excluded_dirs == []
        assert not (args.prompt or args.keep_one or args.force or args.permanent)
        assert args.log_level is None

    def test_short_flags(self):
        args = CLIApplication.parse_args(["/tmp", "-n", "-0", "-m", "1K", "-S", "-p", "-q", "-v"])

        assert args.non_recursive and args.include_empty and args.show_sizes
        assert args.prompt and args.quiet and args.verbose
        assert args.min_size == "1K"

    def test_comparator_is_repeatable(self):
        args = CLIApplication.parse_args(["/tmp", "-c", "exact", "--comparator", "json"])

        assert args.comparators == ["exact", "json"]

    def test_log_level_is_case_insensitive(self):
        assert CLIApplication.parse_args(["/tmp", "--log-level", "debug"]).log_level == "DEBUG"


class TestCreateParams:

    def test_relative_roots_resolved(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        (temp_dir / "sub").mkdir()
        app = CLIApplication()

        params = app.create_params(app.parse_args(["sub", "."]))

        assert params.roots == [str((temp_dir / "sub").resolve()), str(temp_dir.resolve())]

    def test_flags_reach_params(self, temp_dir):
        app = CLIApplication()

        params = app.create_params(app.parse_args([str(temp_dir), "-n", "-0", "-m", "2KB", "-c", "json"]))

        assert params.recursive is False
        assert params.include_empty is True
        assert params.min_size_bytes == 2048
        assert params.comparators == ["json"]

    def test_default_comparator(self, temp_dir):
        app = CLIApplication()

        assert app.create_params(app.parse_args([str(temp_dir)])).comparators == ["exact"]


class TestValidateArgs:

    def test_file_as_root(self, temp_dir, capsys):
        regular = temp_dir / "file.txt"
        regular.write_text("x")
        app = CLIApplication()

        with pytest.raises(SystemExit):
            app.validate_args(app.parse_args([str(regular)]))
        assert "not a directory" in capsys.readouterr().err

    def test_one_bad_root_among_good_ones(self, temp_dir):
        app = CLIApplication()

        with pytest.raises(SystemExit):
            app.validate_args(app.parse_args([str(temp_dir), str(temp_dir / "missing")]))

    def test_valid_arguments_pass(self, temp_dir):
        app = CLIApplication()

        app.validate_args(app.parse_args([str(temp_dir), "-p", "--permanent"]))
