from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from kinship.models.family import RelationshipTypeEnum
from kinship.services.builder import RelationshipBuilder
from kinship.services.relationships import RelationshipStore


def _edges(store, member_id):
    return {
        (edge.from_member_id, edge.to_member_id, edge.relationship_type)
        for edge in store.get_by_member_id(member_id)
    }


def test_parent_child_creates_mirrored_pair(make_member, db_session):
    parent = make_member("Jean")
    child = make_member("Awa")

    pair = RelationshipBuilder(db_session).add_parent_child(parent.id, child.id, "biological")
    store = RelationshipStore(db_session)

    assert (pair.forward.from_member_id, pair.forward.to_member_id) == (parent.id, child.id)
    assert pair.forward.relationship_type is RelationshipTypeEnum.child
    assert pair.reverse.relationship_type is RelationshipTypeEnum.parent
    assert pair.reverse.relationship_details == "biological"

    expected = {
        (parent.id, child.id, RelationshipTypeEnum.child),
        (child.id, parent.id, RelationshipTypeEnum.parent),
    }
    assert _edges(store, parent.id) == expected
    assert _edges(store, child.id) == expected
    assert len(store.get_all()) == 2


def test_sibling_pair(make_member, db_session):
    a = make_member("Awa")
    b = make_member("Paul")

    RelationshipBuilder(db_session).add_sibling(a.id, b.id)

    assert _edges(RelationshipStore(db_session), a.id) == {
        (a.id, b.id, RelationshipTypeEnum.sibling),
        (b.id, a.id, RelationshipTypeEnum.sibling),
    }


def test_spouse_pair_carries_dates_on_both_edges(make_member, db_session):
    a = make_member("Jean")
    b = make_member("Marie")

    pair = RelationshipBuilder(db_session).add_spouse(a.id, b.id, start_date=date(2010, 5, 1), details="civil")

    for edge in (pair.forward, pair.reverse):
        assert edge.relationship_type is RelationshipTypeEnum.spouse
        assert edge.start_date == date(2010, 5, 1)
        assert edge.end_date is None
        assert edge.relationship_details == "civil"


def test_missing_endpoint_leaves_no_edges(make_member, db_session):
    parent = make_member("Jean")

    with pytest.raises(IntegrityError):
        RelationshipBuilder(db_session).add_parent_child(parent.id, "ghost")

    assert RelationshipStore(db_session).get_by_member_id(parent.id) == []


def test_second_insert_failure_rolls_back_first(make_member, db_session, monkeypatch):
    a = make_member("Awa")
    b = make_member("Paul")
    a_id, b_id = a.id, b.id

    real_flush = db_session.flush
    calls = {"count": 0}

    def flaky_flush(*args, **kwargs):
        calls["count"] += 1
        if calls["count"] == 2:
            raise IntegrityError("INSERT INTO family_relationships", {}, Exception("forced failure"))
        return real_flush(*args, **kwargs)

    monkeypatch.setattr(db_session, "flush", flaky_flush)

    with pytest.raises(IntegrityError):
        RelationshipBuilder(db_session).add_sibling(a_id, b_id)

    monkeypatch.undo()
    store = RelationshipStore(db_session)
    assert store.get_by_member_id(a_id) == []
    assert store.get_by_member_id(b_id) == []
