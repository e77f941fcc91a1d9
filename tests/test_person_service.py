"""Tests for PersonService."""

import pytest

from ledger_api.app.core.errors import ConflictError, ValidationError
from ledger_api.app.repositories.account_repository import AccountRepository
from ledger_api.app.repositories.person_repository import PersonRepository
from ledger_api.app.schemas.account import AccountCreate
from ledger_api.app.schemas.person import PersonCreate, PersonUpdate

from .conftest import run


class TestCreate:
    def test_assigns_code(self, person_service):
        created = run(person_service.create(PersonCreate(id_number="123", name="Ann", surname="Lee")))

        assert created.code > 0
        assert created.id_number == "123"
        stored = run(person_service.get_by_code(created.code))
        assert stored.name == "Ann"
        assert stored.accounts == []

    def test_duplicate_id_number_rejected(self, person_service, person):
        with pytest.raises(ConflictError, match="same ID number"):
            run(person_service.create(PersonCreate(id_number=person.id_number)))

        assert len(run(person_service.get_all())) == 1

    def test_duplicate_id_number_ignores_case(self, person_service):
        run(person_service.create(PersonCreate(id_number="ab-1")))

        with pytest.raises(ConflictError):
            run(person_service.create(PersonCreate(id_number="AB-1")))

    def test_storage_constraint_backs_up_precheck(self, person):
        with pytest.raises(ConflictError):
            run(PersonRepository().add(PersonCreate(id_number=person.id_number)))


class TestUpdate:
    def test_missing_person_returns_none(self, person_service):
        assert run(person_service.update(PersonUpdate(code=999, id_number="x"))) is None

    def test_updates_fields(self, person_service, person):
        updated = run(
            person_service.update(PersonUpdate(code=person.code, id_number="NEW-1", name="T", surname="Dube"))
        )

        assert updated.id_number == "NEW-1"
        stored = run(person_service.get_by_code(person.code))
        assert (stored.id_number, stored.name, stored.surname) == ("NEW-1", "T", "Dube")

    def test_changing_to_taken_id_number_rejected(self, person_service, person):
        other = run(person_service.create(PersonCreate(id_number="OTHER")))

        with pytest.raises(ConflictError):
            run(person_service.update(PersonUpdate(code=other.code, id_number=person.id_number.lower())))

        assert run(person_service.get_by_code(other.code)).id_number == "OTHER"

    def test_case_only_change_keeps_stored_id_number(self, person_service):
        created = run(person_service.create(PersonCreate(id_number="abc")))

        updated = run(person_service.update(PersonUpdate(code=created.code, id_number="ABC", name="Renamed")))

        assert updated.id_number == "abc"
        assert updated.name == "Renamed"


class TestDelete:
    def test_missing_person_returns_false(self, person_service):
        assert run(person_service.delete(999)) is False

    def test_person_without_accounts_is_deleted(self, person_service, person):
        assert run(person_service.delete(person.code)) is True
        assert run(person_service.get_by_code(person.code)) is None

    def test_person_with_open_account_is_kept(self, person_service, person, account):
        with pytest.raises(ConflictError, match="open accounts"):
            run(person_service.delete(person.code))

        assert run(person_service.get_by_code(person.code)) is not None

    def test_person_with_only_closed_accounts_is_deleted(self, person_service, account_service, person, account):
        run(account_service.close(account.code))

        assert run(person_service.delete(person.code)) is True
        assert run(AccountRepository().get_by_code(account.code)) is None

    def test_one_open_account_among_closed_blocks_deletion(self, person_service, account_service, person, account):
        run(account_service.close(account.code))
        run(account_service.create(AccountCreate(person_code=person.code, account_number="ACC-0002")))

        with pytest.raises(ConflictError):
            run(person_service.delete(person.code))


class TestSearch:
    @pytest.fixture
    def many_persons(self, person_service):
        for i in range(25):
            run(person_service.create(PersonCreate(id_number=f"ID{i:03d}", name="P", surname=f"Smith{i:02d}")))

    def test_page_number_below_one_rejected(self, person_service):
        with pytest.raises(ValidationError):
            run(person_service.search(page_number=0, page_size=10))

    def test_page_number_beyond_storage_range_rejected(self, person_service, many_persons):
        with pytest.raises(ValidationError, match="too large"):
            run(person_service.search(page_number=10**18, page_size=10))

    def test_last_addressable_page_is_empty(self, person_service, many_persons):
        result = run(person_service.search(page_number=10**17, page_size=10))

        assert result.items == []
        assert result.total_count == 25

    def test_page_size_clamped_to_ten(self, person_service, many_persons):
        result = run(person_service.search(page_number=1, page_size=50))

        assert result.page_size == 10
        assert result.total_count == 25
        assert result.total_pages == 3
        assert len(result.items) == 10

    @pytest.mark.parametrize("page_size", [0, -5])
    def test_non_positive_page_size_becomes_ten(self, person_service, many_persons, page_size):
        result = run(person_service.search(page_number=1, page_size=page_size))

        assert result.page_size == 10

    def test_last_page_holds_remainder(self, person_service, many_persons):
        result = run(person_service.search(page_number=3, page_size=10))

        assert [p.surname for p in result.items] == [f"Smith{i}" for i in range(20, 25)]

    def test_no_matches_gives_zero_pages(self, person_service):
        result = run(person_service.search(surname="nobody", page_number=1, page_size=10))

        assert result.total_count == 0
        assert result.total_pages == 0
        assert result.items == []

    def test_filters_are_combined(self, person_service, account_service, many_persons):
        target = run(person_service.search(id_number="ID007")).items[0]
        run(account_service.create(AccountCreate(person_code=target.code, account_number="ZX-9")))

        assert run(person_service.search(surname="mith0")).total_count == 10
        assert run(person_service.search(account_number="zx-9")).items[0].code == target.code
        assert run(person_service.search(surname="Smith07", account_number="ZX-9")).total_count == 1
        assert run(person_service.search(surname="Smith08", account_number="ZX-9")).total_count == 0

    def test_surname_wildcards_are_literal(self, person_service, many_persons):
        assert run(person_service.search(surname="%")).total_count == 0
