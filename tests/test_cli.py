"""
Tests for the command line tool

The Redis backend is replaced by a shared MemoryBackend so commands can
be chained without a server.

Run with: python -m pytest tests/test_cli.py -v
"""

import json

import pytest

from kvcollections import cli
from kvcollections.backends.memory import MemoryBackend


@pytest.fixture
def cli_backend(monkeypatch) -> MemoryBackend:
    """Route every CLI invocation to one in-memory backend."""
    backend = MemoryBackend(max_keys=10, key_prefix="")
    monkeypatch.setattr(cli, "build_backend", lambda args: backend)
    return backend


def run(capsys, *argv):
    code = cli.main(list(argv))
    out, err = capsys.readouterr()
    return code, out.strip(), err


class TestParseArgs:
    """Test argument parsing."""

    def test_find_defaults(self):
        args = cli.parse_args(["find", "users"])
        assert args.command == "find"
        assert args.where == {}
        assert args.operator == "AND"

    def test_json_arguments(self):
        args = cli.parse_args(["find-one", "users", "--id", "1"])
        assert args.id == 1
        args = cli.parse_args(["find-one", "users", "--id", '"abc"'])
        assert args.id == "abc"

    def test_id_absent_when_where_given(self):
        args = cli.parse_args(["delete", "users", "--where", "{}"])
        assert "id" not in args

    def test_null_id_is_kept(self):
        args = cli.parse_args(["find-one", "users", "--id", "null"])
        assert "id" in args
        assert args.id is None

    def test_invalid_json_is_usage_error(self):
        with pytest.raises(SystemExit) as info:
            cli.parse_args(["find", "users", "--where", "{oops"])
        assert info.value.code == 2

    def test_delete_requires_id_or_where(self):
        with pytest.raises(SystemExit):
            cli.parse_args(["delete", "users"])

    def test_invalid_operator(self):
        with pytest.raises(SystemExit):
            cli.parse_args(["find", "users", "--operator", "XOR"])


class TestCommands:
    """Test end-to-end command execution."""

    def test_save_find_delete(self, cli_backend, capsys):
        assert run(capsys, "save", "users", '{"id": 1, "username": "A"}')[:2] == (0, "true")
        assert run(capsys, "save", "users", '{"id": 2, "username": "B"}')[:2] == (0, "true")

        code, out, _ = run(capsys, "find", "users", "--where", '{"id": 1}', "--operator", "NOT")
        assert code == 0
        assert json.loads(out) == [{"id": 2, "username": "B"}]

        assert run(capsys, "delete", "users", "--id", "2")[:2] == (0, "true")

        code, out, _ = run(capsys, "dump", "users")
        assert json.loads(out) == [{"id": 1, "username": "A"}]

    def test_save_updates_by_record_id(self, cli_backend, capsys):
        run(capsys, "save", "users", '{"id": 1, "username": "A"}')
        run(capsys, "save", "users", '{"id": 1, "username": "C"}')

        code, out, _ = run(capsys, "dump", "users")
        assert json.loads(out) == [{"id": 1, "username": "C"}]

    def test_find_one(self, cli_backend, capsys):
        run(capsys, "save", "users", '{"id": 1, "username": "A"}')

        code, out, _ = run(capsys, "find-one", "users", "--where", '{"username": "A"}')
        assert json.loads(out) == {"id": 1, "username": "A"}

        code, out, _ = run(capsys, "find-one", "users", "--id", "5")
        assert code == 0
        assert out == "null"

    def test_delete_by_where(self, cli_backend, capsys):
        run(capsys, "save", "users", '{"id": 1, "username": "A"}')
        run(capsys, "save", "users", '{"id": 2, "username": "B"}')
        run(capsys, "delete", "users", "--where", '{"username": "A"}')

        code, out, _ = run(capsys, "dump", "users")
        assert json.loads(out) == [{"id": 2, "username": "B"}]

    def test_dump_absent_key(self, cli_backend, capsys):
        assert run(capsys, "dump", "missing")[:2] == (0, "[]")

    def test_collection_error_exit_code(self, cli_backend, capsys):
        code, out, err = run(capsys, "save", "users", "[1, 2]")
        assert code == 1
        assert out == ""
        assert "record must be a JSON object" in err

    def test_malformed_stored_value(self, cli_backend, capsys):
        cli_backend._store["users"] = ("{broken", 0)
        code, _, err = run(capsys, "find", "users")
        assert code == 1
        assert "error:" in err

    def test_find_one_null_id(self, cli_backend, capsys):
        run(capsys, "save", "users", '{"id": 1, "username": "A"}')

        code, out, _ = run(capsys, "find-one", "users", "--id", "null")
        assert code == 0
        assert out == "null"

    def test_delete_null_id_keeps_records(self, cli_backend, capsys):
        run(capsys, "save", "users", '{"id": 1, "username": "A"}')
        assert run(capsys, "delete", "users", "--id", "null")[:2] == (0, "true")

        code, out, _ = run(capsys, "dump", "users")
        assert json.loads(out) == [{"id": 1, "username": "A"}]


class TestBackendErrors:
    """Test failures while building the store client."""

    def test_malformed_url_exit_code(self, capsys):
        code, out, err = run(capsys, "--url", "bogus://nowhere", "dump", "users")
        assert code == 1
        assert out == ""
        assert "cannot create store client" in err

    def test_backend_factory_failure(self, monkeypatch, capsys):
        def broken(args):
            raise ValueError("bad options")

        monkeypatch.setattr(cli, "build_backend", broken)
        code, _, err = run(capsys, "find", "users")
        assert code == 1
        assert "bad options" in err
