from datetime import date

import pytest
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError

from snooker.exceptions import PersistenceError
from snooker.models import MatchResult
from snooker.match_session import MatchSession
from snooker.repository import BreakRecord, MatchRepository


@pytest.fixture
def repo(tmp_path):
    repository = MatchRepository(f"sqlite:///{tmp_path / 'history.db'}")
    repository.init_db()
    return repository


# ---------------------------------------------------------
# Match results
# ---------------------------------------------------------

def test_save_match_result_returns_id(repo):
    match_id = repo.save_match_result("Ronnie", "Judd", 72, 40)

    matches = repo.list_matches()

    assert len(matches) == 1
    assert matches[0].id == match_id
    assert matches[0].score_line == "72 : 40"
    assert matches[0].match_date == date.today()


def test_list_matches_newest_first(repo):
    first = repo.save_match_result("A", "B", 10, 20)
    second = repo.save_match_result("C", "D", 30, 5)

    assert [m.id for m in repo.list_matches()] == [second, first]


def test_list_matches_empty(repo):
    assert repo.list_matches() == []


# ---------------------------------------------------------
# Breaks
# ---------------------------------------------------------

def test_record_result_stores_highest_break(repo):
    result = MatchResult(score_1=35, score_2=60, highest_break=41, highest_break_player=2)

    match_id = repo.record_result("Mark", "Neil", result)

    breaks = repo.breaks_for(match_id)

    assert len(breaks) == 1
    assert breaks[0].player_name == "Neil"
    assert breaks[0].break_score == 41


def test_record_result_without_break(repo):
    result = MatchResult(score_1=4, score_2=0, highest_break=0, highest_break_player=None)

    match_id = repo.record_result("Mark", "Neil", result)

    assert repo.breaks_for(match_id) == []


def test_break_for_unknown_match(repo):
    with pytest.raises(PersistenceError):
        repo.save_highest_break(999, "Nobody", 10)


# ---------------------------------------------------------
# Delete
# ---------------------------------------------------------

def test_delete_match_removes_breaks(repo):
    result = MatchResult(score_1=50, score_2=10, highest_break=50, highest_break_player=1)
    match_id = repo.record_result("Shaun", "John", result)
    other_id = repo.record_result("Kyren", "Mark", result)

    assert repo.delete_match(match_id) is True

    assert [m.id for m in repo.list_matches()] == [other_id]
    assert repo.breaks_for(match_id) == []
    assert len(repo.breaks_for(other_id)) == 1


def test_delete_unknown_match(repo):
    assert repo.delete_match(12345) is False


# ---------------------------------------------------------
# Atomic result recording
# ---------------------------------------------------------

@pytest.fixture
def failing_break_insert():
    def fail(mapper, connection, target):
        raise SQLAlchemyError("break insert failed")

    event.listen(BreakRecord, "before_insert", fail)
    yield
    event.remove(BreakRecord, "before_insert", fail)


def test_failed_break_insert_leaves_no_match_row(repo, failing_break_insert):
    result = MatchResult(score_1=28, score_2=0, highest_break=28, highest_break_player=1)

    with pytest.raises(PersistenceError):
        repo.record_result("Ali", "Ding", result)

    assert repo.list_matches() == []


def test_finish_retry_after_failed_write_saves_once(repo):
    session = MatchSession(starting_reds=1)
    session.load_moves([{"kind": "pot", "value": v} for v in (1, 2, 3, 4, 5, 6, 7)])

    def fail(mapper, connection, target):
        raise SQLAlchemyError("break insert failed")

    event.listen(BreakRecord, "before_insert", fail)
    try:
        with pytest.raises(PersistenceError):
            session.finish(lambda result: repo.record_result("Ali", "Ding", result))
    finally:
        event.remove(BreakRecord, "before_insert", fail)

    match_id = session.finish(lambda result: repo.record_result("Ali", "Ding", result))

    matches = repo.list_matches()
    assert [m.id for m in matches] == [match_id]
    assert matches[0].score_line == "28 : 0"
    assert len(repo.breaks_for(match_id)) == 1


# ---------------------------------------------------------
# Connection errors
# ---------------------------------------------------------

@pytest.mark.parametrize("url", ["bogus", "nosuchdialect://host/db"])
def test_invalid_database_url(url):
    with pytest.raises(PersistenceError):
        MatchRepository(url)
