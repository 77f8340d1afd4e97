import pytest

from ledger_book.domain.entities import (
    Account,
    BookSnapshot,
    Collection,
    Group,
    first_property,
)
from ledger_book.domain.value_objects import AccountType, DecimalSeparator, Permission
from ledger_book.exceptions import (
    GroupNotFoundError,
    InvalidAccountTypeError,
    UnboundEntityError,
)


class TestFirstProperty:
    def test_returns_first_non_blank(self):
        properties = {"a": "", "b": "  ", "c": "value", "d": "other"}

        assert first_property(properties, ("a", "b", "c", "d")) == "value"

    def test_missing_keys(self):
        assert first_property({"a": "x"}, ("b",)) is None
        assert first_property(None, ("a",)) is None
        assert first_property({}, ()) is None


class TestBookSnapshot:
    def test_defaults_for_missing_fields(self):
        snapshot = BookSnapshot.from_payload({"id": "b-1"})

        assert snapshot.name == ""
        assert snapshot.fraction_digits == 2
        assert snapshot.permission == Permission.NONE
        assert snapshot.date_pattern == "dd/MM/yyyy"
        assert snapshot.decimal_separator == DecimalSeparator.DOT
        assert snapshot.time_zone == "UTC"
        assert snapshot.time_zone_offset == 0
        assert snapshot.last_update_ms is None
        assert snapshot.collection is None

    def test_long_values_sent_as_strings(self):
        snapshot = BookSnapshot.from_payload(
            {"id": "b-1", "lastUpdateMs": "1700000000000", "fractionDigits": "4"}
        )

        assert snapshot.last_update_ms == 1700000000000
        assert snapshot.fraction_digits == 4

    def test_null_fields_use_defaults(self):
        snapshot = BookSnapshot.from_payload(
            {
                "id": "b-1",
                "name": None,
                "fractionDigits": None,
                "permission": None,
                "decimalSeparator": None,
                "timeZone": None,
                "timeZoneOffset": None,
                "lastUpdateMs": None,
                "collection": None,
            }
        )

        assert snapshot.name == ""
        assert snapshot.fraction_digits == 2
        assert snapshot.permission == Permission.NONE
        assert snapshot.decimal_separator == DecimalSeparator.DOT
        assert snapshot.time_zone == "UTC"
        assert snapshot.time_zone_offset == 0
        assert snapshot.last_update_ms is None

    def test_zero_fraction_digits_kept(self):
        snapshot = BookSnapshot.from_payload({"id": "b-1", "fractionDigits": 0})

        assert snapshot.fraction_digits == 0

    def test_snapshot_is_immutable(self):
        snapshot = BookSnapshot.from_payload({"id": "b-1", "name": "Acme"})

        with pytest.raises(AttributeError):
            snapshot.name = "Other"


class TestCollection:
    def test_from_payload(self):
        collection = Collection.from_payload(
            {"id": "c-1", "name": "Family", "books": [{"id": "b-1"}, {"id": "b-2"}]}
        )

        assert collection.name == "Family"
        assert collection.book_ids == ["b-1", "b-2"]


class TestAccount:
    def test_type_flags(self):
        assert Account(name="Bank", type=AccountType.ASSET).permanent is True
        assert Account(name="Bank", type=AccountType.ASSET).credit is False
        assert Account(name="Card", type=AccountType.LIABILITY).credit is True
        assert Account(name="Salary", type=AccountType.INCOMING).permanent is False
        assert Account(name="Salary", type=AccountType.INCOMING).credit is True
        assert Account(name="Gas", type=AccountType.OUTGOING).credit is False

    def test_normalized_name(self):
        assert Account(name="  Conta  Córrente").normalized_name == "conta corrente"

    def test_set_property_is_fluent(self):
        account = Account(name="Bank").set_property("code", "1000")

        assert account.get_property("code") == "1000"
        assert account.get_property("missing", "code") == "1000"

    def test_to_payload(self):
        account = Account(
            name="Bank",
            type=AccountType.LIABILITY,
            group_ids=["grp-1"],
            properties={"code": "1000"},
        )

        assert account.to_payload() == {
            "name": "Bank",
            "type": "LIABILITY",
            "groups": [{"id": "grp-1"}],
            "properties": {"code": "1000"},
            "archived": False,
        }

    def test_to_payload_includes_id_when_known(self):
        assert Account(name="Bank", id="acc-1").to_payload()["id"] == "acc-1"

    def test_from_payload(self):
        account = Account.from_payload(
            {
                "id": "acc-1",
                "name": "Bank",
                "type": "liability",
                "groups": [{"id": "grp-1"}, "grp-2"],
                "archived": True,
                "hasTransactionPosted": True,
            }
        )

        assert account.type == AccountType.LIABILITY
        assert account.group_ids == ["grp-1", "grp-2"]
        assert account.archived is True
        assert account.has_transaction_posted is True
        assert account.book is None

    def test_from_payload_null_fields(self):
        account = Account.from_payload(
            {"id": "acc-1", "name": None, "type": None, "groups": None, "properties": None}
        )

        assert account.name == ""
        assert account.type == AccountType.ASSET
        assert account.group_ids == []
        assert account.properties == {}

    def test_from_payload_rejects_unknown_type(self):
        with pytest.raises(InvalidAccountTypeError):
            Account.from_payload({"id": "acc-1", "name": "Bank", "type": "EQUITY"})

    def test_groups_resolve_through_book(self, book):
        account = book.get_account("Bank Account")

        assert [g.name for g in account.groups] == ["Assets"]

    def test_add_group_by_name_and_instance(self, book):
        account = book.new_account()
        account.add_group("assets")
        account.add_group(book.get_group("grp-2"))
        account.add_group("grp-1")

        assert account.group_ids == ["grp-1", "grp-2"]

    def test_add_unknown_group_raises(self, book):
        account = book.new_account()

        with pytest.raises(GroupNotFoundError):
            account.add_group("Nope")

    def test_unbound_account_cannot_create(self):
        with pytest.raises(UnboundEntityError, match="Account is not bound"):
            Account(name="Bank").create()

    def test_unbound_account_cannot_resolve_groups(self):
        with pytest.raises(UnboundEntityError):
            Account(name="Bank", group_ids=["grp-1"]).groups


class TestGroup:
    def test_parent_and_accounts(self, book):
        child = book.get_group("Despesas Gerais")
        parent = book.get_group("Assets")

        assert child.parent is parent
        assert parent.parent is None
        assert [a.name for a in parent.accounts] == ["Bank Account"]
        assert child.accounts == []

    def test_to_payload(self):
        group = Group(name="Fuel", parent_id="grp-1", hidden=True)

        assert group.to_payload() == {
            "name": "Fuel",
            "hidden": True,
            "properties": {},
            "parent": {"id": "grp-1"},
        }

    def test_from_payload_accepts_parent_id(self):
        assert Group.from_payload({"id": "g", "name": "G", "parentId": "p"}).parent_id == "p"
        assert Group.from_payload({"id": "g", "name": "G", "parent": {"id": "p"}}).parent_id == "p"

    def test_from_payload_null_name(self):
        group = Group.from_payload({"id": "g", "name": None, "parent": None})

        assert group.name == ""
        assert group.parent_id is None

    def test_unbound_group_cannot_create(self):
        with pytest.raises(UnboundEntityError, match="Group is not bound"):
            Group(name="Fuel").create()
