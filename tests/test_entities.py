"""Tests for domain entities."""

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from milkledger.domain.entities import (
    AppData,
    Category,
    Collection,
    Payment,
    PaymentType,
    Person,
    new_id,
    payment_type_for,
)
from milkledger.domain.sync import Operation, apply_mutation


def _person(person_id="p1", name="Ramesh"):
    return Person(id=person_id, name=name, value=50.0, category=Category.VILLAGE)


class TestPerson:
    def test_person_immutability(self):
        """Test that Person entities are immutable."""
        person = _person()
        with pytest.raises(FrozenInstanceError):
            person.name = "Other"


def test_new_id_is_unique():
    assert new_id() != new_id()


def test_payment_type_for_category():
    """Village payments are given out, the others are received."""
    assert payment_type_for(Category.VILLAGE) is PaymentType.GIVEN
    assert payment_type_for(Category.CITY) is PaymentType.RECEIVED
    assert payment_type_for(Category.DAIRY) is PaymentType.RECEIVED


class TestAppData:
    """Tests for the AppData aggregate."""

    def test_empty(self):
        data = AppData.empty()
        assert data.is_empty()
        assert data.counts() == {c.value: 0 for c in Collection}

    def test_with_collection_replaces_one_collection(self):
        payment = Payment(
            id="pay1",
            person_id="p1",
            person_name="Ramesh",
            date=date(2024, 1, 15),
            amount=500.0,
            comment="",
            type=PaymentType.GIVEN,
            category=Category.VILLAGE,
        )
        data = AppData(payments=(payment,))
        updated = data.with_collection(Collection.PEOPLE, [_person()])
        assert updated.people == (_person(),)
        assert updated.payments == (payment,)
        assert data.people == ()


class TestApplyMutation:
    """Tests for the pure mutation step."""

    def test_add(self):
        data = apply_mutation(AppData.empty(), Collection.PEOPLE, Operation.ADD, "p1", _person())
        assert data.people == (_person(),)

    def test_update_merges_fields(self):
        data = AppData(people=(_person(), _person("p2", "Suresh")))
        data = apply_mutation(data, Collection.PEOPLE, Operation.UPDATE, "p2", {"value": 55.0, "id": "x"})
        assert data.people[0] == _person()
        assert data.people[1].value == 55.0
        assert data.people[1].id == "p2"

    def test_delete(self):
        data = AppData(people=(_person(), _person("p2", "Suresh")))
        data = apply_mutation(data, Collection.PEOPLE, Operation.DELETE, "p1")
        assert [p.id for p in data.people] == ["p2"]

    def test_unknown_id_is_noop(self):
        data = AppData(people=(_person(),))
        assert apply_mutation(data, Collection.PEOPLE, Operation.UPDATE, "nope", {"name": "X"}) == data
        assert apply_mutation(data, Collection.PEOPLE, Operation.DELETE, "nope") == data
