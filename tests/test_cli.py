"""Tests for the command-line interface."""

import json

import pytest

from shortlink.cli import build_parser, run


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DB_TYPE", "DATABASE_URL", "BASE_URL", "SHORT_CODE_LENGTH"):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.asyncio
class TestCLI:
    """Test CLI commands against the in-memory backend."""

    async def test_shorten(self, capsys):
        exit_code = await run(["--base-url", "https://sho.rt", "--length", "9",
                               "shorten", "user1", "https://example.com/long"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["success"] is True
        assert len(output["short_code"]) == 9
        assert output["short_url"] == f"https://sho.rt/{output['short_code']}"
        assert output["original_url"] == "https://example.com/long"

    async def test_resolve_unknown(self, capsys):
        exit_code = await run(["resolve", "abc123"])

        assert exit_code == 1
        error = json.loads(capsys.readouterr().err)
        assert error == {"success": False, "error": "code not found"}

    async def test_list_empty(self, capsys):
        exit_code = await run(["list", "user1"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["count"] == 0
        assert output["urls"] == []

    async def test_delete_unknown(self, capsys):
        exit_code = await run(["delete", "abc123"])

        assert exit_code == 1
        assert "no URL mapping found" in capsys.readouterr().err

    async def test_cleanup(self, capsys):
        exit_code = await run(["cleanup"])

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out)["removed"] == 0

    async def test_unknown_backend(self, capsys):
        exit_code = await run(["--db-type", "redis", "list", "user1"])

        assert exit_code == 1
        assert "redis storage not yet implemented" in capsys.readouterr().err

    async def test_migrate_requires_database_url(self, capsys):
        exit_code = await run(["migrate"])

        assert exit_code == 1
        assert "DATABASE_URL is required" in capsys.readouterr().err

    async def test_no_command(self, capsys):
        assert await run([]) == 1

    async def test_backend_from_environment(self, monkeypatch, capsys):
        monkeypatch.setenv("DB_TYPE", "postgres")

        exit_code = await run(["list", "user1"])

        assert exit_code == 1
        assert "DATABASE_URL is required" in capsys.readouterr().err


class TestParser:
    """Test argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args(["list", "user1"])

        assert args.db_type == "memory"
        assert args.database_url is None
        assert args.length == 6
        assert args.command == "list"
        assert args.user_id == "user1"
