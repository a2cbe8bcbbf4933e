import gzip
from datetime import datetime

import pytest

from aptshelf.history import History, HistoryItem, parse_history

STANZA = (
    "Start-Date: 2020-01-02  03:04:05\n"
    "Commandline: apt-get install foo\n"
    "Install: foo:amd64 (1.0), bar:amd64 (2.0, automatic)\n"
    "Upgrade: baz:amd64 (1.0, 1.1)\n"
    "End-Date: 2020-01-02  03:04:09\n"
)


def test_parse_start_date():
    item = HistoryItem.parse(STANZA)
    assert item.start_date == datetime(2020, 1, 2, 3, 4, 5)


def test_parse_installed_strips_arch():
    item = HistoryItem.parse(STANZA)
    assert item.installed_packages == ["foo (1.0)", "bar (2.0, automatic)"]
    assert item.upgraded_packages == ["baz (1.0, 1.1)"]
    assert item.is_valid


@pytest.mark.parametrize(
    "key,attribute",
    [
        ("Install", "installed_packages"),
        ("Upgrade", "upgraded_packages"),
        ("Downgrade", "downgraded_packages"),
        ("Remove", "removed_packages"),
        ("Purge", "purged_packages"),
    ],
)
def test_each_action_fills_its_list(key, attribute):
    item = HistoryItem.parse(f"{key}: pkg:i386 (3.0)")
    assert getattr(item, attribute) == ["pkg (3.0)"]


def test_error_recorded():
    item = HistoryItem.parse("Start-Date: 2020-01-02  03:04:05\nError: Sub-process failed")
    assert item.error == "Sub-process failed"


def test_line_without_separator_is_invalid():
    item = HistoryItem.parse("Start-Date: 2020-01-02  03:04:05\ngarbage line")
    assert item.is_valid is False


def test_comment_and_empty_lines_skipped():
    item = HistoryItem.parse("# comment\n\nRemove: x:amd64 (1)")
    assert item.is_valid
    assert item.removed_packages == ["x (1)"]


def test_bad_date_gives_none():
    item = HistoryItem.parse("Start-Date: not a date")
    assert item.start_date is None


def test_parse_history_drops_invalid_stanzas():
    data = STANZA + "\n" + "broken\n\n" + "Remove: old:amd64 (0.1)\n"
    items = parse_history(data)
    assert len(items) == 2
    assert items[1].removed_packages == ["old (0.1)"]


def test_history_reads_plain_and_gz(tmp_path):
    (tmp_path / "history.log").write_text("Install: new:amd64 (2.0)\n")
    with gzip.open(tmp_path / "history.log.1.gz", "wb") as handle:
        handle.write(b"Purge: gone:amd64 (1.0)\n\n")
    (tmp_path / "term.log").write_text("Install: ignored:amd64 (9)\n")

    history = History(tmp_path / "history.log")
    items = history.items()
    assert [item.installed_packages for item in items] == [["new (2.0)"], []]
    assert items[1].purged_packages == ["gone (1.0)"]
    assert all("ignored (9)" not in item.installed_packages for item in items)


def test_history_reload_picks_up_changes(tmp_path):
    log = tmp_path / "history.log"
    log.write_text("Install: a:amd64 (1)\n")
    history = History(log)
    assert history.items()[0].installed_packages == ["a (1)"]

    log.write_text("Install: a:amd64 (1)\n\nRemove: b:amd64 (2)\n")
    history.reload()
    assert len(history.items()) == 2
    assert history.items()[1].removed_packages == ["b (2)"]


def test_history_items_is_a_copy(tmp_path):
    (tmp_path / "history.log").write_text("Install: a:amd64 (1)\n")
    history = History(tmp_path / "history.log")
    history.items().clear()
    assert len(history.items()) == 1