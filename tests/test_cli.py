import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from client.cli import app

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "client.yaml"
    with open(path, "w") as f:
        yaml.dump({"backend": "sqlite", "db_path": str(tmp_path / "store.db")}, f)
    return path


def _invoke(config_file: Path, *args: str):
    return runner.invoke(app, [*args, "--config", str(config_file)])


def test_insert_then_select(config_file: Path) -> None:
    result = _invoke(config_file, "insert", "vehicles", '{"plate": "BGM-1001", "type": "Caminhão"}')
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"plate": "BGM-1001", "type": "Caminhão"}

    _ = _invoke(config_file, "insert", "vehicles", '{"plate": "CHN-1002", "type": "Carreta"}')

    result = _invoke(config_file, "select", "vehicles", "--order", "plate", "--asc", "--limit", "1")
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [{"plate": "BGM-1001", "type": "Caminhão"}]


def test_update_and_delete_with_filters(config_file: Path) -> None:
    _ = _invoke(config_file, "insert", "inventory", '{"sku": "A", "qty": 10, "status": "x"}')
    _ = _invoke(config_file, "insert", "inventory", '{"sku": "B", "qty": 5, "status": "y"}')

    result = _invoke(config_file, "update", "inventory", '{"qty": 99}', "--eq", "status=x")
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"qty": 99}

    result = _invoke(config_file, "select", "inventory", "--eq", "sku=A", "--eq", "qty=99")
    assert json.loads(result.output) == [{"sku": "A", "qty": 99, "status": "x"}]

    result = _invoke(config_file, "delete", "inventory", "--eq", "sku=B")
    assert result.exit_code == 0, result.output
    result = _invoke(config_file, "select", "inventory")
    assert [r["sku"] for r in json.loads(result.output)] == ["A"]


def test_delete_without_filters_keeps_records(config_file: Path) -> None:
    _ = _invoke(config_file, "insert", "movements", '{"id": 1}')
    result = _invoke(config_file, "delete", "movements")
    assert result.exit_code == 0
    assert json.loads(_invoke(config_file, "select", "movements").output) == [{"id": 1}]


def test_collections_and_clear(config_file: Path) -> None:
    _ = _invoke(config_file, "insert", "users", '{"id": "admin"}')

    result = _invoke(config_file, "collections")
    assert result.output.split() == ["users"]

    result = _invoke(config_file, "collections", "--known")
    assert "purchase_orders" in result.output.split()

    result = _invoke(config_file, "clear", "users")
    assert result.exit_code == 0
    assert _invoke(config_file, "collections").output.split() == []


def test_token_lifecycle(config_file: Path) -> None:
    assert _invoke(config_file, "token").exit_code == 1

    assert _invoke(config_file, "token", "--set", "tok-1").exit_code == 0
    result = _invoke(config_file, "token")
    assert result.exit_code == 0
    assert result.output.strip() == "tok-1"

    assert _invoke(config_file, "token", "--clear").exit_code == 0
    assert _invoke(config_file, "token").exit_code == 1


def test_rejects_bad_input(config_file: Path) -> None:
    assert _invoke(config_file, "insert", "users", "[1, 2]").exit_code != 0
    assert _invoke(config_file, "insert", "users", "{oops").exit_code != 0
    assert _invoke(config_file, "select", "users", "--eq", "no-separator").exit_code != 0


def test_missing_config_exits(tmp_path: Path) -> None:
    result = runner.invoke(app, ["collections", "--config", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 1


def test_unknown_log_level_exits_cleanly(tmp_path: Path) -> None:
    path = tmp_path / "client.yaml"
    with open(path, "w") as f:
        yaml.dump({"db_path": str(tmp_path / "store.db"), "log_level": "verbose"}, f)

    result = runner.invoke(app, ["collections", "--config", str(path)])

    assert result.exit_code == 1
    assert not isinstance(result.exception, ValueError)
