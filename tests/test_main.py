"""Tests for the command line entry point."""

import pytest
from unittest.mock import patch

from termreader.__main__ import main
from termreader.progress_store import ProgressStore


def test_version(capsys):
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.startswith("termreader")


def test_file_is_required():
    with pytest.raises(SystemExit):
        main([])


def test_missing_file_reports_error(tmp_path, capsys):
    store = ProgressStore(data_dir=tmp_path / "data")
    with patch('termreader.reader.get_store', return_value=store):
        assert main([str(tmp_path / "missing.txt")]) == 1
    assert "missing.txt" in capsys.readouterr().err


def test_runs_reader(tmp_path):
    path = tmp_path / "book.txt"
    path.write_text("hello\n", encoding="utf-8")
    store = ProgressStore(data_dir=tmp_path / "data")
    with patch('termreader.reader.get_store', return_value=store):
        with patch('termreader.reader.Reader.run') as run:
            assert main([str(path), "--words", "--log-file", str(tmp_path / "reader.log")]) == 0
            run.assert_called_once()
