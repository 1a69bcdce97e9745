import pytest

from termreader.progress import Progress, ProgressKind, ProgressSnapshot


def test_progress_dict_forms():
    assert Progress.location(3, 7).to_dict() == {"kind": "location", "line": 3, "char": 7}
    assert Progress.word(10, 42).to_dict() == {"kind": "word", "start": 10, "end": 42}
    assert Progress.finished().to_dict() == {"kind": "finished"}
    assert Progress.from_dict({"kind": "word", "start": 10, "end": 42}) == Progress.word(10, 42)


@pytest.mark.parametrize("data", [
    {"kind": "location"},
    {"kind": "bogus"},
    {"kind": "word", "start": None, "end": 3},
])
def test_progress_from_invalid_dict(data):
    with pytest.raises(ValueError):
        Progress.from_dict(data)


def test_snapshot_percent():
    assert ProgressSnapshot(200, Progress.location(50, 0)).percent == 25.0
    assert ProgressSnapshot(10, Progress.word(2, 5)).percent == 50.0
    assert ProgressSnapshot(10, Progress.finished()).percent == 100.0
    assert ProgressSnapshot(0, Progress.location(0, 0)).percent == 0.0


def test_snapshot_reopen_line():
    assert ProgressSnapshot(100, Progress.location(42, 3)).line == 42
    assert ProgressSnapshot(100, Progress.finished()).line == 99
    assert ProgressSnapshot(100, Progress.word(5, 9)).line == 0


def test_snapshot_dict_round_trip():
    snapshot = ProgressSnapshot(120, Progress.location(12, 4))
    restored = ProgressSnapshot.from_dict(snapshot.to_dict())
    assert restored == snapshot
    assert restored.progress.kind == ProgressKind.LOCATION

    with pytest.raises(ValueError):
        ProgressSnapshot.from_dict({"progress": {"kind": "finished"}})
