"""Tests for the persisted top-N score list."""

import json
import logging

from wafe.models import Element
from wafe.scores import HighScore, HighScoreBoard, JsonFileStore, MemoryStore


def _entry(name, score, element=Element.FIRE):
    return HighScore(name=name, element=element, score=score, size=score / 500.0, timestamp=1_700_000_000_000)


class BrokenStore:
    def get(self, key):
        raise OSError("disk gone")

    def set(self, key, value):
        raise OSError("disk gone")


def test_keeps_top_ten_sorted_by_score():
    board = HighScoreBoard(MemoryStore())

    for i in range(12):
        board.record(_entry(f"p{i}", (i * 37) % 12 * 100))

    scores = [entry.score for entry in board.top()]
    assert len(scores) == 10
    assert scores == sorted(scores, reverse=True)
    assert scores[0] == 1100
    assert 0 not in scores
    assert 100 not in scores


def test_record_returns_updated_list():
    board = HighScoreBoard(MemoryStore())

    result = board.record(_entry("Ash", 750, Element.WATER))

    assert result == [_entry("Ash", 750, Element.WATER)]


def test_records_are_stored_as_json_under_fixed_key():
    store = MemoryStore()
    HighScoreBoard(store).record(_entry("Ash", 600))

    records = json.loads(store.get("wafeHighScores"))

    assert records == [
        {"name": "Ash", "element": "fire", "score": 600, "size": 1.2, "timestamp": 1_700_000_000_000}
    ]


def test_json_file_store_survives_reopen(tmp_path):
    path = tmp_path / "nested" / "scores.json"
    HighScoreBoard(JsonFileStore(path)).record(_entry("Ash", 900))

    reopened = HighScoreBoard(JsonFileStore(path)).top()

    assert [entry.name for entry in reopened] == ["Ash"]
    assert "wafeHighScores" in json.loads(path.read_text(encoding="utf-8"))
    assert list(path.parent.glob("*.tmp")) == []


def test_corrupt_file_reads_as_empty_and_is_replaced(tmp_path, caplog):
    path = tmp_path / "scores.json"
    path.write_text("{not json", encoding="utf-8")
    board = HighScoreBoard(JsonFileStore(path))

    with caplog.at_level(logging.WARNING, logger="wafe.scores"):
        assert board.top() == []
    assert "treating as empty" in caplog.text

    board.record(_entry("Ash", 500))
    assert [entry.score for entry in board.top()] == [500]


def test_malformed_records_are_skipped():
    store = MemoryStore()
    store.set(
        "wafeHighScores",
        json.dumps(
            [
                {"name": "x"},
                "junk",
                _entry("Ash", 500).to_record(),
                {**_entry("B", 1).to_record(), "element": "ice"},
            ]
        ),
    )

    assert [entry.name for entry in HighScoreBoard(store).top()] == ["Ash"]


def test_non_list_payload_reads_as_empty():
    store = MemoryStore()
    store.set("wafeHighScores", json.dumps({"name": "Ash"}))

    assert HighScoreBoard(store).top() == []


def test_unavailable_store_degrades_quietly(caplog):
    board = HighScoreBoard(BrokenStore())

    with caplog.at_level(logging.WARNING, logger="wafe.scores"):
        assert board.top() == []
        result = board.record(_entry("Ash", 500))

    assert [entry.name for entry in result] == ["Ash"]
    assert "Could not save high scores" in caplog.text


def test_non_finite_scores_are_skipped(tmp_path):
    path = tmp_path / "scores.json"
    overflowing = '{"name": "Big", "element": "fire", "score": 1e400, "size": 1.0, "timestamp": 1}'
    records = f"[{overflowing}, {json.dumps(_entry('Ash', 500).to_record())}]"
    path.write_text(json.dumps({"wafeHighScores": records}), encoding="utf-8")
    board = HighScoreBoard(JsonFileStore(path))

    assert [entry.name for entry in board.top()] == ["Ash"]

    board.record(_entry("Cy", 700))
    assert [entry.name for entry in board.top()] == ["Cy", "Ash"]
