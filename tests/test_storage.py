from __future__ import annotations

import json
from pathlib import Path

from star_catcher.storage import HighScoreStore


def test_missing_file_reads_as_zero(tmp_path: Path) -> None:
    assert HighScoreStore(tmp_path / "nope.json").load() == 0


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "best.json"
    store = HighScoreStore(path)
    store.save(250)

    assert store.load() == 250
    assert json.loads(path.read_text(encoding="utf-8")) == {"high_score": 250}
    assert not path.with_suffix(".json.tmp").exists()


def test_corrupt_file_reads_as_zero(tmp_path: Path) -> None:
    path = tmp_path / "best.json"
    path.write_text("{not json", encoding="utf-8")
    assert HighScoreStore(path).load() == 0

    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert HighScoreStore(path).load() == 0


def test_save_keeps_other_keys(tmp_path: Path) -> None:
    path = tmp_path / "best.json"
    path.write_text(json.dumps({"other": "x", "high_score": 5}), encoding="utf-8")

    HighScoreStore(path).save(90)

    assert json.loads(path.read_text(encoding="utf-8")) == {"other": "x", "high_score": 90}
