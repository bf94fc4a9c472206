"""Tests for burrow.cli — CLI entrypoint and the routes command."""

from pathlib import Path

import pytest

from burrow.cli import main
from burrow.cli._routes import parse_mount
from burrow.errors import ConfigurationError
from burrow.routing.types import TrailingSlash


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_routes_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "--help"])
        assert exc_info.value.code == 0


class TestCLIMissingArgs:
    def test_routes_missing_mount(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes"])
        assert exc_info.value.code == 2

    def test_bad_trailing_slash_choice(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", ".", "--trailing-slash", "sometimes"])
        assert exc_info.value.code == 2


class TestCLINoCommand:
    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "routes" in capsys.readouterr().out


class TestParseMount:
    def test_directory_only(self) -> None:
        mount = parse_mount("app/pages")
        assert mount.root_directory == "app/pages"
        assert mount.prefix == "/"

    def test_with_prefix(self) -> None:
        mount = parse_mount("libs/admin=admin/", trailing_slash=TrailingSlash.REDIRECT)
        assert mount.prefix == "/admin"
        assert mount.trailing_slash is TrailingSlash.REDIRECT

    def test_missing_directory(self) -> None:
        with pytest.raises(ConfigurationError):
            parse_mount("=/admin")


class TestRoutesCommand:
    def test_prints_table(
        self, tmp_path: Path, make_tree, capsys: pytest.CaptureFixture[str]
    ) -> None:
        app = make_tree(
            tmp_path / "app",
            {
                "index.py": "def get(request, response):\n    pass\n",
                "users/[id].py": "def get(request, response):\n    pass\n",
            },
        )
        admin = make_tree(
            tmp_path / "admin",
            {"index.py": "def post(request, response):\n    pass\n"},
        )
        main(["routes", str(app), f"{admin}=/admin"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "SOURCE"]
        rows = [line.split()[:2] for line in lines[2:]]
        assert rows == [["GET", "/"], ["POST", "/admin"], ["GET", "/users/:id"]]

    def test_empty_mount(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", str(tmp_path)])
        assert "No routes discovered." in capsys.readouterr().out

    def test_build_error_exits_one(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", str(tmp_path / "missing")])
        assert exc_info.value.code == 1
        assert "Error: Mount directory does not exist" in capsys.readouterr().err

    def test_conflict_exits_one(
        self, tmp_path: Path, make_tree, capsys: pytest.CaptureFixture[str]
    ) -> None:
        handler = "def get(request, response):\n    pass\n"
        app = make_tree(tmp_path / "app", {"users.py": handler})
        lib = make_tree(tmp_path / "lib", {"users.py": handler})
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", str(app), str(lib)])
        assert exc_info.value.code == 1
        assert "Route conflict detected" in capsys.readouterr().err
