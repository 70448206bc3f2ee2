import math

import pytest

from app.database import InMemoryStore


def test_create_user_indexes_by_id_and_username(store):
    user = store.create_user("alice", "hash")

    assert len(user.id) == 32
    int(user.id, 16)
    assert store.get_user_by_id(user.id) == user
    assert store.get_user_by_username("alice") == user
    assert store.get_total_users() == 1


def test_missing_lookups_return_none(store):
    assert store.get_user_by_id("nope") is None
    assert store.get_user_by_username("nobody") is None
    assert store.get_game_session_by_id("nope") is None


def test_duplicate_username_rejected(store):
    store.create_user("alice", "hash")
    with pytest.raises(ValueError):
        store.create_user("alice", "other")


def test_new_session_is_active(store):
    user = store.create_user("alice", "hash")
    session = store.create_game_session(user.id, 1000)

    assert session.is_completed is False
    assert session.end_time is None
    assert session.deviation is None
    assert store.get_active_user_sessions(user.id) == [session]
    assert store.get_completed_user_sessions(user.id) == []


def test_update_merges_fields(store):
    user = store.create_user("alice", "hash")
    session = store.create_game_session(user.id, 1000)

    updated = store.update_game_session(session.id, end_time=11000, deviation=0, is_completed=True)

    assert updated.start_time == 1000
    assert updated.end_time == 11000
    assert updated.is_completed is True
    assert store.get_game_session_by_id(session.id) == updated
    assert store.get_total_completed_sessions() == 1


def test_update_unknown_session_is_noop(store):
    assert store.update_game_session("missing", is_completed=True) is None
    assert store.get_total_sessions() == 0


def test_user_sessions_keep_start_order(store):
    user = store.create_user("alice", "hash")
    ids = [store.create_game_session(user.id, t).id for t in (3000, 1000, 2000)]

    assert [s.id for s in store.get_user_sessions(user.id)] == ids
    assert store.get_user_sessions("someone-else") == []


def _complete(store, user_id, deviation):
    session = store.create_game_session(user_id, 0)
    store.update_game_session(session.id, end_time=10000, deviation=deviation, is_completed=True)


def test_leaderboard_orders_by_average_deviation(store):
    alice = store.create_user("alice", "hash")
    bob = store.create_user("bob", "hash")
    _complete(store, bob.id, 300)
    _complete(store, alice.id, 50)
    _complete(store, alice.id, 150)

    board = store.generate_leaderboard()

    assert [e.username for e in board] == ["alice", "bob"]
    assert board[0].average_deviation == 100
    assert board[0].best_deviation == 50
    assert board[0].total_games == 2


def test_leaderboard_skips_users_without_completed_games(store):
    alice = store.create_user("alice", "hash")
    store.create_user("bob", "hash")
    store.create_game_session(alice.id, 0)

    assert store.generate_leaderboard() == []


def test_leaderboard_ignores_nan_deviation(store):
    alice = store.create_user("alice", "hash")
    _complete(store, alice.id, math.nan)
    _complete(store, alice.id, 200)

    entry = store.generate_leaderboard()[0]
    assert entry.total_games == 2
    assert entry.average_deviation == 200


def test_leaderboard_rounds_half_up(store):
    alice = store.create_user("alice", "hash")
    _complete(store, alice.id, 1)
    _complete(store, alice.id, 2)
    _complete(store, alice.id, 2)

    # 5 / 3 = 1.6666...
    assert store.generate_leaderboard()[0].average_deviation == 1.67


def test_leaderboard_ties_keep_registration_order(store):
    for name in ("carol", "alice", "bob"):
        user = store.create_user(name, "hash")
        _complete(store, user.id, 100)

    assert [e.username for e in store.generate_leaderboard()] == ["carol", "alice", "bob"]


def test_leaderboard_limit(store):
    for i in range(5):
        user = store.create_user(f"user{i}", "hash")
        _complete(store, user.id, i)

    assert len(store.generate_leaderboard(3)) == 3
    assert len(store.generate_leaderboard(0)) == 0


def test_clear_all_data():
    store = InMemoryStore()
    user = store.create_user("alice", "hash")
    store.create_game_session(user.id, 0)

    store.clear_all_data()

    assert store.get_total_users() == 0
    assert store.get_total_sessions() == 0
    assert store.get_user_by_username("alice") is None
    assert store.get_user_sessions(user.id) == []


def test_get_all_users_in_registration_order(store):
    names = ["carol", "alice", "bob"]
    for name in names:
        store.create_user(name, "hash")

    assert [u.username for u in store.get_all_users()] == names
