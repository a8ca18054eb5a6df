# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for the genro-urltool command line."""

import io
import json

import pytest

from genro_urltool.__main__ import build_parser, main


class TestOutput:
    """Successful runs."""

    def test_trim(self, capsys) -> None:
        assert main(["https://example.com/?utm_source=x&a=1", "--trim", "query=utm_*"]) == 0
        assert capsys.readouterr().out == "https://example.com/?a=1\n"

    def test_set_port(self, capsys) -> None:
        assert main(["https://example.com/", "--set", "port=8080"]) == 0
        assert capsys.readouterr().out == "https://example.com:8080/\n"

    def test_build_from_sets(self, capsys) -> None:
        argv = ["-s", "host=example.com", "-s", "scheme=ftp", "-g", "{scheme} {host}"]
        assert main(argv) == 0
        assert capsys.readouterr().out == "ftp example.com\n"

    def test_iterate(self, capsys) -> None:
        assert main(["https://example.com/x", "--iterate", "hosts=a.com b.com"]) == 0
        assert capsys.readouterr().out == "https://a.com/x\nhttps://b.com/x\n"

    def test_url_option_before_positional(self, capsys) -> None:
        assert main(["https://b.com/", "--url", "https://a.com/"]) == 0
        assert capsys.readouterr().out == "https://a.com/\nhttps://b.com/\n"

    def test_json(self, capsys) -> None:
        assert main(["https://a.com/x", "https://b.com/y?q=1", "--json"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("[\n") and out.endswith("\n]\n")
        data = json.loads(out)
        assert data[0] == {
            "url": "https://a.com/x",
            "scheme": "https",
            "host": "a.com",
            "port": "443",
            "path": "/x",
        }
        assert data[1]["query"] == "q=1"

    def test_bad_url_warns(self, capsys) -> None:
        assert main(["http://exa mple.com/", "https://ok.com/"]) == 0
        captured = capsys.readouterr()
        assert captured.out == "https://ok.com/\n"
        assert "genro-urltool note:" in captured.err

    def test_undecodable_url_skipped(self, capsys) -> None:
        assert main(["--json", "https://example.com/\udcff", "https://ok.com/"]) == 0
        captured = capsys.readouterr()
        assert [d["host"] for d in json.loads(captured.out)] == ["ok.com"]
        assert "genro-urltool note:" in captured.err

    def test_relative_redirect(self, capsys) -> None:
        assert main(["https://a.com/old/x", "--redirect", "/new/path"]) == 0
        assert capsys.readouterr().out == "https://a.com/new/path\n"

    def test_dash_value_joined_to_option(self, capsys) -> None:
        """A value starting with '-' is given as --get=VALUE."""
        assert main(["https://a.com/", "--get=-{host}"]) == 0
        assert capsys.readouterr().out == "-a.com\n"

    def test_version(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "genro-urltool 0.1.0" in capsys.readouterr().out


class TestUrlFile:
    """URLs read from a file or stdin."""

    def test_lines(self, tmp_path, capsys) -> None:
        path = tmp_path / "urls.txt"
        path.write_bytes(b"https://a.com/\r\n\r\nhttps://b.com/\n\nhttps://c.com/")
        assert main(["--url-file", str(path)]) == 0
        assert capsys.readouterr().out == "https://a.com/\nhttps://b.com/\nhttps://c.com/\n"

    def test_stdin(self, monkeypatch, capsys) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("https://a.com/p\n"))
        assert main(["-f", "-", "-a", "path=q"]) == 0
        assert capsys.readouterr().out == "https://a.com/p/q\n"

    def test_undecodable_line_skipped(self, tmp_path, capsys) -> None:
        path = tmp_path / "urls.txt"
        path.write_bytes(b"https://a.com/\xff\nhttps://b.com/\n")
        assert main(["--url-file", str(path)]) == 0
        assert capsys.readouterr().out == "https://b.com/\n"

    def test_missing_file(self, tmp_path, capsys) -> None:
        assert main(["--url-file", str(tmp_path / "nope.txt")]) == 1
        err = capsys.readouterr().err
        assert "genro-urltool error:" in err
        assert "not found" in err


class TestExitCodes:
    """Each error class maps to its exit code."""

    @pytest.mark.parametrize(
        "argv, code",
        [
            (["https://a.com/", "--append", "host=b.com"], 2),
            (["https://a.com/", "--set"], 3),
            (["https://a.com/", "--bogus"], 4),
            (["https://a.com/", "--get", "{host}", "--get", "{port}"], 4),
            (["https://a.com/", "--set", "colour=red"], 5),
            (["https://a.com/", "--set", "port=1", "--set", "port=2"], 5),
            (["https://a.com/", "--set", "path=\udcff"], 5),
            (["https://a.com/", "--get", "{host}\udcff"], 4),
            (["https://a.com/", "--get", "-{host}"], 3),
            (["--set", "host=example.com"], 7),
            (["https://a.com/", "--trim", "path=x"], 8),
            (["--verify", "http://exa mple.com/"], 9),
            (["https://a.com/", "--iterate", "hosts="], 10),
            (["https://a.com/", "--iterate", "hosts=a", "--iterate", "ports=1"], 10),
        ],
    )
    def test_exit_code(self, argv, code, capsys) -> None:
        assert main(argv) == code

    def test_config_error_before_output(self, capsys) -> None:
        assert main(["https://a.com/", "--set", "colour=red"]) == 5
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Try genro-urltool -h for help" in captured.err

    def test_unbuildable_reported(self, capsys) -> None:
        assert main(["--set", "host=example.com"]) == 7
        assert "not enough input for a URL" in capsys.readouterr().err


class TestParser:
    """Tests for build_parser."""

    def test_repeatable_options(self) -> None:
        args = build_parser().parse_intermixed_args(["u1", "-s", "host=a", "-s", "port=1", "u2"])
        assert args.urls == ["u1", "u2"]
        assert args.set == ["host=a", "port=1"]

    def test_flags_default_none(self) -> None:
        args = build_parser().parse_intermixed_args([])
        assert args.json is None
        assert args.verify is None
        assert args.accept_space is None
