from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

from argumerge.domain.model import EntityType
from argumerge.domain.reconciliation import ImportOrchestrator, ImportPhase
from argumerge.ui import cli as cli_module
from tests.helpers.debate import FakeCollection, make_claim

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def seeded(monkeypatch: pytest.MonkeyPatch) -> FakeCollection:
    collection = FakeCollection().seed(make_claim("Solar panels pay off", entity_id="local"))

    def fake_build_orchestrator(**_: object) -> ImportOrchestrator:
        return ImportOrchestrator(collection.unit_of_work)

    monkeypatch.setattr(cli_module, "build_orchestrator", fake_build_orchestrator)
    monkeypatch.setattr(cli_module, "configure_logging", lambda: None)
    monkeypatch.delenv("ARGUMERGE_SIMILARITY_THRESHOLD", raising=False)
    return collection


def _snapshot_file(tmp_path: Path) -> Path:
    payload: dict[str, Any] = {
        "schemaVersion": "1.0",
        "claims": [
            {"id": "near", "text": "Solar panels pays off"},
            {"id": "fresh", "text": "Public transport should be free"},
        ],
    }
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_import_skips_review_items_by_default(seeded: FakeCollection, tmp_path: Path) -> None:
    cli_module.main(["import", str(_snapshot_file(tmp_path))])

    assert seeded.get(EntityType.CLAIM, "fresh") is not None
    assert seeded.get(EntityType.CLAIM, "near") is None


def test_import_can_reject_all_review_items(seeded: FakeCollection, tmp_path: Path) -> None:
    cli_module.main(["import", str(_snapshot_file(tmp_path)), "--on-review", "reject"])

    assert seeded.get(EntityType.CLAIM, "near") is not None
    assert len(seeded.all(EntityType.CLAIM)) == 3


def test_import_can_confirm_all_review_items(seeded: FakeCollection, tmp_path: Path) -> None:
    cli_module.main(
        ["import", str(_snapshot_file(tmp_path)), "--on-review", "confirm", "--page-size", "1"]
    )

    assert seeded.get(EntityType.CLAIM, "near") is None
    assert len(seeded.all(EntityType.CLAIM)) == 2


def test_import_threshold_flag_reaches_the_engine(
    seeded: FakeCollection, tmp_path: Path
) -> None:
    cli_module.main(["import", str(_snapshot_file(tmp_path)), "--threshold", "0.99"])

    assert seeded.get(EntityType.CLAIM, "near") is not None


def test_unreadable_snapshot_exits_with_error(seeded: FakeCollection, tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import", str(tmp_path / "missing.json")])

    assert excinfo.value.code == 1
    assert seeded.total == 1


@pytest.mark.parametrize("threshold", ["1.5", "abc"])
def test_invalid_threshold_is_a_usage_error(threshold: str, tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import", str(tmp_path / "x.json"), "--threshold", threshold])

    assert excinfo.value.code == 2


def test_export_writes_to_path(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    captured: list[Path] = []

    def fake_export(path: Path) -> None:
        captured.append(path)

    monkeypatch.setattr(cli_module, "export_snapshot_file", fake_export)
    monkeypatch.setattr(cli_module, "configure_logging", lambda: None)

    cli_module.main(["export", str(tmp_path / "out.json")])

    assert captured == [tmp_path / "out.json"]


def test_failed_import_state_exits_with_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    def fake_run_import(_: object) -> object:
        class _Summary:
            state = ImportPhase.FAILED

        return _Summary()

    monkeypatch.setattr(cli_module, "run_import", fake_run_import)
    monkeypatch.setattr(cli_module, "configure_logging", lambda: None)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import", str(tmp_path / "x.json")])

    assert excinfo.value.code == 1
