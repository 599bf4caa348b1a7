import pytest

from shoplists.core.errors import AccessDeniedError, NotFoundError
from shoplists.modules.shopping.services.lists_service import (
    AddItem,
    CreateShoppingList,
    DeleteShoppingList,
    GetItemEntries,
    GetShoppingList,
    ListShoppingLists,
    RemoveItem,
    RenameShoppingList,
    SetItemAcquired,
    WithItemAcquired,
    WithItemAdded,
    WithItemRemoved,
)
from shoplists.modules.shopping.utils.item_codec import ItemEntry


def test_with_item_added_appends_plain_entry():
    values, changed = WithItemAdded(["Banana"], "Apple")
    assert values == ["Banana", "Apple"]
    assert changed


def test_with_item_added_skips_acquired_duplicate():
    values, changed = WithItemAdded(["__ACQUIRED__Apple"], "Apple")
    assert values == ["__ACQUIRED__Apple"]
    assert not changed


def test_with_item_removed_drops_every_form():
    values, changed = WithItemRemoved(["Apple", "Banana", "__ACQUIRED__Apple"], "Apple")
    assert values == ["Banana"]
    assert changed


def test_with_item_acquired_keeps_position():
    values, changed = WithItemAcquired(["Banana", "Apple", "Carrot"], "Apple", True)
    assert values == ["Banana", "__ACQUIRED__Apple", "Carrot"]
    assert changed


def test_with_item_acquired_collapses_duplicates():
    values, changed = WithItemAcquired(["Apple", "Banana", "__ACQUIRED__Apple"], "Apple", False)
    assert values == ["Apple", "Banana"]
    assert changed


def test_with_item_acquired_does_not_create_missing_item():
    values, changed = WithItemAcquired(["Banana"], "Apple", True)
    assert values == ["Banana"]
    assert not changed


def test_add_item_is_idempotent(db, alice, catalog, make_list, stored_items):
    list_id = make_list("alice", [])
    AddItem(db, alice, list_id, "Apple")
    AddItem(db, alice, list_id, "Apple")
    assert stored_items(list_id) == ["Apple"]


def test_add_item_uses_catalog_spelling(db, alice, catalog, make_list, stored_items):
    list_id = make_list("alice", ["Banana"])
    AddItem(db, alice, list_id, "  apple ")
    assert stored_items(list_id) == ["Banana", "Apple"]


def test_add_item_when_acquired_copy_exists_is_noop(db, alice, catalog, make_list, stored_items):
    list_id = make_list("alice", ["__ACQUIRED__Apple"])
    AddItem(db, alice, list_id, "Apple")
    assert stored_items(list_id) == ["__ACQUIRED__Apple"]


def test_add_item_rejects_unknown_product(db, alice, catalog, make_list, stored_items):
    list_id = make_list("alice", [])
    with pytest.raises(NotFoundError):
        AddItem(db, alice, list_id, "Dragonfruit")
    assert stored_items(list_id) == []


def test_add_item_rejects_marker_prefixed_name(db, alice, catalog, make_list):
    list_id = make_list("alice", [])
    with pytest.raises(ValueError):
        AddItem(db, alice, list_id, "__ACQUIRED__Apple")


def test_add_item_missing_list(db, alice, catalog):
    with pytest.raises(NotFoundError):
        AddItem(db, alice, 999, "Apple")


def test_remove_item_removes_plain_and_acquired(db, alice, catalog, make_list, stored_items):
    list_id = make_list("alice", ["Apple", "Banana", "__ACQUIRED__Apple"])
    RemoveItem(db, alice, list_id, "Apple")
    assert stored_items(list_id) == ["Banana"]


def test_remove_missing_item_is_noop(db, alice, catalog, make_list, stored_items):
    list_id = make_list("alice", ["Banana"])
    RemoveItem(db, alice, list_id, "Apple")
    assert stored_items(list_id) == ["Banana"]


def test_set_acquired_toggles_both_ways(db, alice, catalog, make_list, stored_items):
    list_id = make_list("alice", ["Apple", "Banana"])
    SetItemAcquired(db, alice, list_id, "Apple", True)
    assert stored_items(list_id) == ["__ACQUIRED__Apple", "Banana"]
    SetItemAcquired(db, alice, list_id, "Apple", False)
    assert stored_items(list_id) == ["Apple", "Banana"]


def test_set_acquired_on_missing_item_does_not_create(db, alice, catalog, make_list, stored_items):
    list_id = make_list("alice", ["Banana"])
    SetItemAcquired(db, alice, list_id, "Apple", True)
    assert stored_items(list_id) == ["Banana"]


@pytest.mark.parametrize(
    "mutate",
    [
        lambda db, user, list_id: AddItem(db, user, list_id, "Carrot"),
        lambda db, user, list_id: RemoveItem(db, user, list_id, "Apple"),
        lambda db, user, list_id: SetItemAcquired(db, user, list_id, "Apple", True),
        lambda db, user, list_id: RenameShoppingList(db, user, list_id, "Stolen"),
        lambda db, user, list_id: DeleteShoppingList(db, user, list_id),
    ],
)
def test_non_owner_is_denied_without_side_effects(db, alice, bob, catalog, make_list, stored_items, mutate):
    list_id = make_list("alice", ["Apple", "Banana"])
    with pytest.raises(AccessDeniedError):
        mutate(db, bob, list_id)
    assert stored_items(list_id) == ["Apple", "Banana"]
    assert GetShoppingList(db, alice, list_id).Name == "Weekly"


def test_admin_cannot_read_other_users_list(db, admin, alice, make_list):
    list_id = make_list("alice", [])
    with pytest.raises(AccessDeniedError):
        GetShoppingList(db, admin, list_id)


def test_create_list_resolves_selected_products(db, alice, catalog):
    record = CreateShoppingList(
        db,
        alice,
        "  Party  ",
        [catalog["Carrot"], catalog["Apple"], catalog["Apple"], 12345],
    )
    assert record.OwnerUserName == "alice"
    assert record.Name == "Party"
    assert GetItemEntries(record) == [ItemEntry(ProductName="Apple"), ItemEntry(ProductName="Carrot")]


def test_create_list_requires_name(db, alice):
    with pytest.raises(ValueError):
        CreateShoppingList(db, alice, "   ", [])


def test_list_shopping_lists_only_returns_own_lists(db, alice, bob, make_list):
    make_list("alice", [], name="Mine")
    make_list("bob", [], name="Theirs")
    names = [record.Name for record in ListShoppingLists(db, alice)]
    assert names == ["Mine"]


def test_rename_list_keeps_items(db, alice, make_list, stored_items):
    list_id = make_list("alice", ["__ACQUIRED__Apple"])
    record = RenameShoppingList(db, alice, list_id, "Monthly")
    assert record.Name == "Monthly"
    assert stored_items(list_id) == ["__ACQUIRED__Apple"]


def test_delete_list(db, alice, make_list):
    list_id = make_list("alice", [])
    DeleteShoppingList(db, alice, list_id)
    with pytest.raises(NotFoundError):
        GetShoppingList(db, alice, list_id)


def test_item_requests_match_catalog_spelling(db, alice, catalog, make_list, stored_items):
    list_id = make_list("alice", ["Banana"])
    AddItem(db, alice, list_id, "apple")
    assert stored_items(list_id) == ["Banana", "Apple"]

    SetItemAcquired(db, alice, list_id, "apple", True)
    assert stored_items(list_id) == ["Banana", "__ACQUIRED__Apple"]

    SetItemAcquired(db, alice, list_id, "APPLE", False)
    assert stored_items(list_id) == ["Banana", "Apple"]

    RemoveItem(db, alice, list_id, " apple ")
    assert stored_items(list_id) == ["Banana"]


def test_item_requests_still_reach_orphaned_entries(db, alice, catalog, make_list, stored_items):
    list_id = make_list("alice", ["Basil", "__ACQUIRED__Apple"])
    SetItemAcquired(db, alice, list_id, "Basil", True)
    assert stored_items(list_id) == ["__ACQUIRED__Basil", "__ACQUIRED__Apple"]

    RemoveItem(db, alice, list_id, "Basil")
    assert stored_items(list_id) == ["__ACQUIRED__Apple"]
