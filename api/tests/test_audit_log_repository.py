"""
Tests for audit log data access: insertion, filters, ordering, history.
"""

from __future__ import annotations

from uuid import UUID


def test_insert_entry_returns_row(repository):
    row = repository.insert_entry(
        actor_email="alice@example.com",
        entity_type="Experience",
        entity_id="3",
        action="UPDATE",
        diff={"before": {"a": 1}, "after": {"a": 2}, "changes": {"a": {"before": 1, "after": 2}}},
    )

    assert isinstance(row["id"], UUID)
    assert row["entity_type"] == "Experience"
    assert row["entity_id"] == "3"
    assert row["diff"]["changes"] == {"a": {"before": 1, "after": 2}}
    assert row["created_at"] is not None


def test_list_entries_newest_first(repository, seeded_entries):
    rows = repository.list_entries()

    assert [r["id"] for r in rows] == [e["id"] for e in reversed(seeded_entries)]


def test_list_entries_limit(repository, seeded_entries):
    rows = repository.list_entries(limit=2)

    assert [r["id"] for r in rows] == [seeded_entries[4]["id"], seeded_entries[3]["id"]]


def test_filter_by_action_and_entity_type(repository, seeded_entries):
    rows = repository.list_entries(action="CREATE", entity_type="Post")

    assert {(r["entity_type"], r["entity_id"]) for r in rows} == {("Post", "1"), ("Post", "2")}


def test_query_matches_case_insensitively_across_columns(repository, seeded_entries):
    by_actor = repository.list_entries(query="BOB@")
    by_entity = repository.list_entries(query="worksample")
    by_action = repository.list_entries(query="delete")
    by_id = repository.list_entries(query="12")

    assert {r["actor_email"] for r in by_actor} == {"bob@example.com"}
    assert len(by_actor) == 2
    assert [r["entity_type"] for r in by_entity] == ["WorkSample"]
    assert [r["action"] for r in by_action] == ["DELETE"]
    assert [r["entity_id"] for r in by_id] == ["12"]


def test_list_entity_types_distinct_sorted(repository, seeded_entries):
    assert repository.list_entity_types() == ["Post", "Tool", "WorkSample"]


def test_entity_history_oldest_first(repository, seeded_entries):
    rows = repository.get_entries_for_entity("Post", "1")

    assert [r["action"] for r in rows] == ["CREATE", "UPDATE"]


def test_entity_history_unknown_entity_is_empty(repository, seeded_entries):
    assert repository.get_entries_for_entity("Post", "999") == []


def _insert(repository, entity_id: str, actor_email: str = "carol@example.com"):
    return repository.insert_entry(
        actor_email=actor_email,
        entity_type="Tool",
        entity_id=entity_id,
        action="CREATE",
        diff={"before": None, "after": {"id": entity_id}, "changes": {}},
    )


def test_query_wildcards_match_literally(repository):
    for entity_id in ("a_b", "axb", "50%", "500", "c\\d", "cxd"):
        _insert(repository, entity_id)

    assert [r["entity_id"] for r in repository.list_entries(query="a_b")] == ["a_b"]
    assert [r["entity_id"] for r in repository.list_entries(query="50%")] == ["50%"]
    assert [r["entity_id"] for r in repository.list_entries(query="c\\d")] == ["c\\d"]


def test_query_of_only_wildcards_matches_nothing_else(repository, seeded_entries):
    assert repository.list_entries(query="%") == []
    assert repository.list_entries(query="_") == []
