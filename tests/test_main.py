"""Tests for the command-line entry point."""

from filetail.main import build_cli_parser, main


class TestCliParser:
    def test_defaults(self):
        args = build_cli_parser().parse_args(["/var/log/app.log"])
        assert args.path == "/var/log/app.log"
        assert args.from_beginning is False
        assert args.emit_async is False
        assert args.separator is None
        assert args.chunk_size is None
        assert args.polling is False
        assert args.config is None

    def test_flags(self):
        args = build_cli_parser().parse_args([
            "app.log", "--from-beginning", "--async", "--separator", "\\t",
            "--chunk-size", "128", "--polling", "--poll-interval", "0.2",
        ])
        assert args.from_beginning is True
        assert args.emit_async is True
        assert args.separator == "\\t"
        assert args.chunk_size == 128
        assert args.polling is True
        assert args.poll_interval == 0.2


class TestMainErrors:
    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "missing.log")]) == 1

    def test_invalid_separator(self, log_file):
        assert main([str(log_file), "--separator", "ab"]) == 2
