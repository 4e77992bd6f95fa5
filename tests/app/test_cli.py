from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from orderdesk.ui import cli

if TYPE_CHECKING:
    from pathlib import Path


def _run(argv: list[str]) -> int | str | None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    return excinfo.value.code


@pytest.fixture
def offline_env(monkeypatch: pytest.MonkeyPatch, historical_csv_path: Path) -> None:
    monkeypatch.setenv("ORDERDESK_HISTORICAL_SOURCE", str(historical_csv_path))


@pytest.mark.usefixtures("offline_env")
def test_list_prints_merged_timeline(capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["list"]) == 0

    out = capsys.readouterr().out
    assert "KDR-1714644000000-1" in out
    assert "2 item(s): Almond Basbousa, Cashew Basbousa" in out
    assert "4 of 4 order(s) (offline mode)" in out
    assert "3 historical line(s) skipped" in out


@pytest.mark.usefixtures("offline_env")
def test_list_limit(capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["list", "--limit", "1"]) == 0

    out = capsys.readouterr().out
    assert "1 of 4 order(s)" in out
    assert "Leela Nair" in out
    assert "Asha Rao" not in out


def test_negative_limit_is_a_usage_error() -> None:
    assert _run(["list", "--limit", "-1"]) == 2


def test_missing_command_is_a_usage_error() -> None:
    assert _run([]) == 2


@pytest.mark.usefixtures("offline_env")
def test_check_import_lists_skipped_lines(capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["check-import"]) == 0

    out = capsys.readouterr().out
    assert "4 order(s) parsed, 3 line(s) skipped" in out
    assert "line 5: no known menu items" in out


def test_check_import_missing_source_fails(tmp_path: Path) -> None:
    assert _run(["check-import", "--source", str(tmp_path / "absent.csv")]) == 1


@pytest.mark.usefixtures("offline_env")
def test_create_offline(capsys: pytest.CaptureFixture[str]) -> None:
    code = _run(
        [
            "create",
            "--name",
            "Asha Rao",
            "--mobile",
            "9990001111",
            "--item",
            "almond basbousa:2",
            "--item",
            "Kunafa Chocolate",
            "--payment",
            "upi",
            "--discount",
            "save50",
            "--outlet",
            "Kompally",
        ]
    )

    assert code == 0
    out = capsys.readouterr().out
    # (598 + 349 - 50) * 1.1
    assert "total 986.70" in out
    assert "Created order KPL-" in out


@pytest.mark.usefixtures("offline_env")
def test_create_with_unknown_item_is_a_usage_error() -> None:
    code = _run(
        [
            "create",
            "--name",
            "Asha Rao",
            "--mobile",
            "9990001111",
            "--item",
            "Mystery Cake",
            "--payment",
            "cash",
        ]
    )

    assert code == 2


@pytest.mark.usefixtures("offline_env")
def test_create_with_bad_percentage_is_a_usage_error() -> None:
    code = _run(
        [
            "create",
            "--name",
            "Asha Rao",
            "--mobile",
            "9990001111",
            "--item",
            "Almond Basbousa",
            "--payment",
            "card",
            "--discount-percent",
            "150",
        ]
    )

    assert code == 2


@pytest.mark.usefixtures("offline_env")
def test_delete_unknown_order_fails() -> None:
    assert _run(["delete", "local-404"]) == 1


@pytest.mark.usefixtures("offline_env")
def test_delete_bulk_order_succeeds() -> None:
    assert _run(["delete", "bulk-order-1"]) == 0


def test_create_then_list_with_database(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    historical_csv_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("ORDERDESK_DATABASE_URI", f"sqlite+pysqlite:///{tmp_path / 'orders.db'}")
    monkeypatch.setenv("ORDERDESK_HISTORICAL_SOURCE", str(historical_csv_path))

    assert (
        _run(
            [
                "create",
                "--name",
                "Vikram Shah",
                "--mobile",
                "9990002222",
                "--item",
                "Triangle Baklava",
                "--payment",
                "cash",
                "--discount-percent",
                "10",
            ]
        )
        == 0
    )
    capsys.readouterr()

    assert _run(["list"]) == 0

    out = capsys.readouterr().out
    assert "5 of 5 order(s) (live mode)" in out
    assert "[live]" in out


def test_list_with_unreachable_database_shows_bulk_orders(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    historical_csv_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    uri = f"sqlite+pysqlite:///{tmp_path / 'missing-dir' / 'orders.db'}"
    monkeypatch.setenv("ORDERDESK_DATABASE_URI", uri)
    monkeypatch.setenv("ORDERDESK_HISTORICAL_SOURCE", str(historical_csv_path))

    assert _run(["list"]) == 0

    out = capsys.readouterr().out
    assert "4 of 4 order(s) (live mode)" in out
