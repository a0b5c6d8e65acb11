"""Unit tests for the score ledger and score stores."""

import json

from snake_server.scores import JsonScoreStore, MemoryScoreStore, ScoreLedger


def full_board():
    return [{"name": f"p{i}", "score": 20 - i} for i in range(10)]


def test_new_score_evicts_lowest_entry():
    store = MemoryScoreStore(full_board())
    ledger = ScoreLedger(store, size=10)
    ledger.load()

    assert ledger.record("newcomer", 12)

    board = ledger.leaderboard()
    assert len(board) == 10
    assert {"name": "newcomer", "score": 12} in board
    assert {"name": "p9", "score": 11} not in board
    assert store.entries == board


def test_score_below_the_board_changes_nothing():
    store = MemoryScoreStore(full_board())
    ledger = ScoreLedger(store, size=10)
    ledger.load()

    assert not ledger.record("newcomer", 5)
    assert store.saves == 0
    assert ledger.best("newcomer") == 5


def test_only_improvements_replace_the_best():
    ledger = ScoreLedger(MemoryScoreStore(), size=10)
    ledger.record("alice", 3)
    assert not ledger.record("alice", 2)
    assert not ledger.record("alice", 3)
    assert ledger.record("alice", 4)
    assert ledger.leaderboard() == [{"name": "alice", "score": 4}]


def test_ties_favour_whoever_got_there_first():
    ledger = ScoreLedger(MemoryScoreStore(), size=2)
    ledger.record("alice", 5)
    ledger.record("bob", 5)
    ledger.record("carol", 5)
    assert ledger.leaderboard() == [
        {"name": "alice", "score": 5},
        {"name": "bob", "score": 5},
    ]


def test_loaded_order_breaks_ties():
    store = MemoryScoreStore([{"name": "old", "score": 7}])
    ledger = ScoreLedger(store, size=10)
    ledger.load()
    ledger.record("new", 7)
    assert [entry["name"] for entry in ledger.leaderboard()] == ["old", "new"]


def test_failed_save_is_not_fatal(tmp_path):
    store = JsonScoreStore(tmp_path / "missing-dir" / "scores.json")
    ledger = ScoreLedger(store, size=10)
    assert ledger.record("alice", 1)
    assert ledger.leaderboard() == [{"name": "alice", "score": 1}]


def test_json_store_round_trip(tmp_path):
    path = tmp_path / "highscores.json"
    store = JsonScoreStore(path)
    assert store.load() == []

    store.save([{"name": "alice", "score": 3}])
    assert json.loads(path.read_text()) == [{"name": "alice", "score": 3}]
    assert store.load() == [{"name": "alice", "score": 3}]


def test_json_store_ignores_corrupt_files_and_rows(tmp_path):
    path = tmp_path / "highscores.json"
    path.write_text("{not json")
    assert JsonScoreStore(path).load() == []

    path.write_text(json.dumps([{"name": "ok", "score": 2}, {"name": 3, "score": 1}, {"name": "x", "score": True}, "junk"]))
    assert JsonScoreStore(path).load() == [{"name": "ok", "score": 2}]
