from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from kinship.models.family import GenderEnum
from kinship.services.builder import RelationshipBuilder
from kinship.services.members import MemberStore
from kinship.services.relationships import RelationshipStore


def test_create_assigns_id_and_timestamps(db_session):
    member = MemberStore(db_session).create(
        {
            "first_name": "Jean",
            "last_name": "Koum",
            "gender": "male",
            "birth_date": date(1950, 3, 14),
            "birth_place": "Douala",
        }
    )

    assert member.id
    assert member.gender is GenderEnum.male
    assert member.is_alive is True
    assert member.created_at is not None
    assert member.updated_at is not None
    assert member.birth_date == date(1950, 3, 14)


def test_get_all_orders_by_last_then_first_name(make_member, db_session):
    make_member("Paul", "Zeh")
    make_member("Awa", "Koum")
    make_member("Jean", "Koum")

    names = [(m.last_name, m.first_name) for m in MemberStore(db_session).get_all()]
    assert names == [("Koum", "Awa"), ("Koum", "Jean"), ("Zeh", "Paul")]


def test_get_by_id_missing_returns_none(db_session):
    assert MemberStore(db_session).get_by_id("does-not-exist") is None


def test_get_by_profile_id(make_member, db_session):
    linked = make_member("Awa", profile_id="profile-1")
    make_member("Jean", profile_id="profile-2")

    found = MemberStore(db_session).get_by_profile_id("profile-1")
    assert [m.id for m in found] == [linked.id]


def test_search_is_case_insensitive_across_text_columns(make_member, db_session):
    by_place = make_member("Jean", birth_place="Douala")
    by_bio = make_member("Awa", bio="Moved to DOUALA in 1980")
    by_maiden = make_member("Marie", "Ngo", maiden_name="Doualambe")
    make_member("Paul", "Zeh", birth_place="Yaounde")

    found = MemberStore(db_session).search("douala")
    assert {m.id for m in found} == {by_place.id, by_bio.id, by_maiden.id}


def test_search_treats_wildcards_literally(make_member, db_session):
    make_member("Jean")
    assert MemberStore(db_session).search("%") == []


def test_update_changes_only_supplied_fields(make_member, db_session):
    member = make_member("Awa", bio="original bio", birth_place="Douala")
    created_at = member.created_at
    before = member.updated_at

    updated = MemberStore(db_session).update(member.id, {"first_name": "Awa Marie", "death_place": None})

    assert updated.first_name == "Awa Marie"
    assert updated.bio == "original bio"
    assert updated.birth_place == "Douala"
    assert updated.created_at == created_at
    assert updated.updated_at >= before


def test_update_can_clear_optional_field(make_member, db_session):
    member = make_member("Awa", bio="to be removed")
    updated = MemberStore(db_session).update(member.id, {"bio": None})
    assert updated.bio is None


def test_update_with_empty_payload_keeps_record_and_timestamp(make_member, db_session):
    member = make_member("Awa")
    before = member.updated_at
    store = MemberStore(db_session)

    updated = store.update(member.id, {})
    assert updated.updated_at == before

    db_session.expire_all()
    assert store.get_by_id(member.id).updated_at == before


def test_update_ignores_store_managed_fields(make_member, db_session):
    member = make_member("Awa")
    updated = MemberStore(db_session).update(member.id, {"id": "hijack", "last_name": "Mbappe"})
    assert updated.id == member.id
    assert updated.last_name == "Mbappe"


def test_update_rejects_unknown_fields(make_member, db_session):
    member = make_member("Awa")
    with pytest.raises(ValueError):
        MemberStore(db_session).update(member.id, {"nickname": "Awi"})


def test_update_missing_returns_none(db_session):
    assert MemberStore(db_session).update("missing", {"first_name": "X"}) is None


def test_alive_flag_and_death_date_are_not_cross_validated(make_member, db_session):
    member = make_member("Jean", is_alive=True, death_date=date(2001, 1, 1))
    assert member.is_alive is True
    assert member.death_date == date(2001, 1, 1)


def test_delete_cascades_to_every_edge(make_member, db_session):
    a = make_member("Jean")
    b = make_member("Awa")
    c = make_member("Paul")
    builder = RelationshipBuilder(db_session)
    builder.add_parent_child(a.id, b.id)
    builder.add_spouse(a.id, c.id)
    builder.add_sibling(b.id, c.id)
    a_id = a.id

    members = MemberStore(db_session)
    relationships = RelationshipStore(db_session)
    assert members.delete(a_id) is True

    assert members.get_by_id(a_id) is None
    assert relationships.get_by_member_id(a_id) == []
    remaining = relationships.get_by_member_id(b.id)
    assert len(remaining) == 2
    assert all(a_id not in (edge.from_member_id, edge.to_member_id) for edge in remaining)


def test_delete_missing_returns_false(db_session):
    assert MemberStore(db_session).delete("missing") is False


def test_failed_member_delete_keeps_member_and_edges(make_member, db_session, monkeypatch):
    a = make_member("Jean")
    b = make_member("Awa")
    RelationshipBuilder(db_session).add_parent_child(a.id, b.id)
    a_id, b_id = a.id, b.id

    real_execute = db_session.execute
    calls = {"count": 0}

    def flaky_execute(*args, **kwargs):
        calls["count"] += 1
        if calls["count"] == 2:
            raise OperationalError("DELETE FROM family_members", {}, Exception("forced failure"))
        return real_execute(*args, **kwargs)

    monkeypatch.setattr(db_session, "execute", flaky_execute)

    with pytest.raises(OperationalError):
        MemberStore(db_session).delete(a_id)

    monkeypatch.undo()
    assert MemberStore(db_session).get_by_id(a_id) is not None
    relationships = RelationshipStore(db_session)
    assert len(relationships.get_by_member_id(a_id)) == 2
    assert len(relationships.get_by_member_id(b_id)) == 2
