"""Unit tests for CategoryService against an in-memory database."""

import sqlite3
from typing import Optional

import pytest

from venue_menu.core.exceptions import (
    CircularReferenceError,
    InvalidOrderError,
    LastCategoryError,
    NotFoundError,
    TargetRequiredError,
)
from venue_menu.models.venue import Venue
from venue_menu.repositories.category_repository import CategoryRepository
from venue_menu.schemas.category import CategoryCreate, CategoryUpdate, DeleteStrategy
from venue_menu.schemas.item import ItemCreate
from venue_menu.services.category_service import CategoryService
from venue_menu.services.item_service import ItemService
from venue_menu.services.menu_service import MenuService


def _orders(conn: sqlite3.Connection, venue_id: int, parent_id: Optional[int]) -> list:
    """(id, display_order) pairs of one sibling group, in display order."""
    repo = CategoryRepository(conn)
    return [
        (cid, repo.get_by_id(cid).display_order)
        for cid in repo.list_sibling_ids(venue_id, parent_id)
    ]


@pytest.mark.unit
class TestCreateCategory:
    """Tests for CategoryService.create_category."""

    @pytest.fixture
    def service(self, conn: sqlite3.Connection) -> CategoryService:
        return CategoryService(conn)

    def test_first_category_gets_order_zero(self, service: CategoryService, venue: Venue) -> None:
        category = service.create_category(venue.id, CategoryCreate(name="Drinks"))

        assert category.display_order == 0
        assert category.parent_id is None
        assert category.venue_id == venue.id

    def test_appends_at_end_of_sibling_group(self, service: CategoryService, venue: Venue) -> None:
        """Test that each new sibling gets exactly the current sibling count."""
        orders = [
            service.create_category(venue.id, CategoryCreate(name=f"C{i}")).display_order
            for i in range(4)
        ]

        assert orders == [0, 1, 2, 3]

    def test_sibling_groups_are_numbered_independently(
        self, service: CategoryService, venue: Venue
    ) -> None:
        root = service.create_category(venue.id, CategoryCreate(name="Food"))
        service.create_category(venue.id, CategoryCreate(name="Drinks"))

        child = service.create_category(
            venue.id, CategoryCreate(name="Starters", parent_id=root.id)
        )

        assert child.display_order == 0
        assert child.parent_id == root.id

    def test_unknown_venue_raises_not_found(self, service: CategoryService) -> None:
        with pytest.raises(NotFoundError):
            service.create_category(999, CategoryCreate(name="Ghost"))

    def test_unknown_parent_raises_not_found(self, service: CategoryService, venue: Venue) -> None:
        with pytest.raises(NotFoundError):
            service.create_category(venue.id, CategoryCreate(name="Orphan", parent_id=999))

    def test_parent_from_other_venue_raises_not_found(
        self, service: CategoryService, venue: Venue, make_venue
    ) -> None:
        """Test that a parent must live in the same venue."""
        other = make_venue("Other Venue")
        foreign = service.create_category(other.id, CategoryCreate(name="Foreign"))

        with pytest.raises(NotFoundError):
            service.create_category(venue.id, CategoryCreate(name="X", parent_id=foreign.id))


@pytest.mark.unit
class TestUpdateCategory:
    """Tests for CategoryService.update_category."""

    @pytest.fixture
    def service(self, conn: sqlite3.Connection) -> CategoryService:
        return CategoryService(conn)

    @pytest.fixture
    def chain(self, service: CategoryService, venue: Venue) -> list:
        """Create A > B > C plus a root D."""
        a = service.create_category(venue.id, CategoryCreate(name="A"))
        b = service.create_category(venue.id, CategoryCreate(name="B", parent_id=a.id))
        c = service.create_category(venue.id, CategoryCreate(name="C", parent_id=b.id))
        d = service.create_category(venue.id, CategoryCreate(name="D"))
        return [a, b, c, d]

    def test_updates_name_only(self, service: CategoryService, chain: list) -> None:
        a = chain[0]

        updated = service.update_category(a.id, CategoryUpdate(name="Renamed"))

        assert updated.name == "Renamed"
        assert updated.parent_id is None
        assert updated.display_order == a.display_order

    def test_omitted_parent_keeps_parent(self, service: CategoryService, chain: list) -> None:
        b = chain[1]

        updated = service.update_category(b.id, CategoryUpdate(description="new"))

        assert updated.parent_id == chain[0].id
        assert updated.description == "new"

    def test_self_parent_raises_circular(self, service: CategoryService, chain: list) -> None:
        a = chain[0]

        with pytest.raises(CircularReferenceError):
            service.update_category(a.id, CategoryUpdate(parent_id=a.id))

    def test_direct_child_as_parent_raises_circular(
        self, service: CategoryService, chain: list
    ) -> None:
        a, b = chain[0], chain[1]

        with pytest.raises(CircularReferenceError):
            service.update_category(a.id, CategoryUpdate(parent_id=b.id))

    def test_transitive_child_as_parent_raises_circular(
        self, service: CategoryService, chain: list
    ) -> None:
        a, c = chain[0], chain[2]

        with pytest.raises(CircularReferenceError):
            service.update_category(a.id, CategoryUpdate(parent_id=c.id))

    def test_non_descendant_parent_is_accepted(
        self, conn: sqlite3.Connection, service: CategoryService, chain: list, venue: Venue
    ) -> None:
        """Test that moving under an unrelated category appends there and closes the gap."""
        a, b, c, d = chain

        moved = service.update_category(a.id, CategoryUpdate(parent_id=d.id))

        assert moved.parent_id == d.id
        assert moved.display_order == 0
        assert _orders(conn, venue.id, None) == [(d.id, 0)]
        assert CategoryRepository(conn).get_by_id(c.id).parent_id == b.id

    def test_explicit_null_parent_moves_to_root(
        self, conn: sqlite3.Connection, service: CategoryService, chain: list, venue: Venue
    ) -> None:
        a, b, c, d = chain

        moved = service.update_category(c.id, CategoryUpdate(parent_id=None))

        assert moved.parent_id is None
        assert moved.display_order == 2
        assert [cid for cid, _ in _orders(conn, venue.id, None)] == [a.id, d.id, c.id]
        assert _orders(conn, venue.id, b.id) == []

    def test_moving_out_closes_gap_in_old_group(
        self, conn: sqlite3.Connection, service: CategoryService, venue: Venue
    ) -> None:
        first = service.create_category(venue.id, CategoryCreate(name="First"))
        second = service.create_category(venue.id, CategoryCreate(name="Second"))
        third = service.create_category(venue.id, CategoryCreate(name="Third"))

        service.update_category(first.id, CategoryUpdate(parent_id=third.id))

        assert _orders(conn, venue.id, None) == [(second.id, 0), (third.id, 1)]

    def test_unknown_parent_raises_not_found(self, service: CategoryService, chain: list) -> None:
        with pytest.raises(NotFoundError):
            service.update_category(chain[0].id, CategoryUpdate(parent_id=999))

    def test_unknown_category_raises_not_found(self, service: CategoryService) -> None:
        with pytest.raises(NotFoundError):
            service.update_category(999, CategoryUpdate(name="x"))

    def test_null_name_is_rejected_by_schema(self) -> None:
        with pytest.raises(ValueError):
            CategoryUpdate(name=None)


@pytest.mark.unit
class TestDeleteCategory:
    """Tests for CategoryService.delete_category."""

    @pytest.fixture
    def service(self, conn: sqlite3.Connection) -> CategoryService:
        return CategoryService(conn)

    def test_cascade_delete_closes_gap(
        self, conn: sqlite3.Connection, service: CategoryService, venue: Venue
    ) -> None:
        """Test deleting the middle of A, B, C leaves A at 0 and C at 1."""
        a = service.create_category(venue.id, CategoryCreate(name="A"))
        b = service.create_category(venue.id, CategoryCreate(name="B"))
        c = service.create_category(venue.id, CategoryCreate(name="C"))

        service.delete_category(b.id, DeleteStrategy.CASCADE)

        assert _orders(conn, venue.id, None) == [(a.id, 0), (c.id, 1)]
        assert CategoryRepository(conn).count_by_venue(venue.id) == 2

    def test_cascade_delete_removes_subtree_and_items(
        self, conn: sqlite3.Connection, service: CategoryService, venue: Venue
    ) -> None:
        keep = service.create_category(venue.id, CategoryCreate(name="Keep"))
        parent = service.create_category(venue.id, CategoryCreate(name="Parent"))
        child = service.create_category(venue.id, CategoryCreate(name="Child", parent_id=parent.id))
        item = ItemService(conn).create_item(child.id, ItemCreate(name="Tea"))

        service.delete_category(parent.id)

        repo = CategoryRepository(conn)
        assert repo.get_by_id(child.id) is None
        assert repo.count_by_venue(venue.id) == 1
        assert repo.get_by_id(keep.id).display_order == 0
        with pytest.raises(NotFoundError):
            ItemService(conn).get_item(item.id)

    def test_density_after_mixed_creates_and_deletes(
        self, conn: sqlite3.Connection, service: CategoryService, venue: Venue
    ) -> None:
        created = [service.create_category(venue.id, CategoryCreate(name=f"C{i}")) for i in range(5)]
        service.delete_category(created[0].id)
        service.delete_category(created[3].id)
        service.create_category(venue.id, CategoryCreate(name="Late"))
        service.delete_category(created[2].id)

        orders = [order for _, order in _orders(conn, venue.id, None)]

        assert orders == list(range(len(orders)))
        assert len(orders) == 3

    def test_deleting_last_category_raises(
        self, conn: sqlite3.Connection, service: CategoryService, venue: Venue
    ) -> None:
        only = service.create_category(venue.id, CategoryCreate(name="Only"))

        with pytest.raises(LastCategoryError):
            service.delete_category(only.id)

        assert CategoryRepository(conn).get_by_id(only.id) is not None

    def test_last_category_guard_counts_per_venue(
        self, service: CategoryService, venue: Venue, make_venue
    ) -> None:
        other = make_venue("Other Venue")
        service.create_category(other.id, CategoryCreate(name="Elsewhere"))
        only = service.create_category(venue.id, CategoryCreate(name="Only"))

        with pytest.raises(LastCategoryError):
            service.delete_category(only.id)

    def test_move_without_target_raises_and_changes_nothing(
        self, conn: sqlite3.Connection, service: CategoryService, venue: Venue
    ) -> None:
        victim = service.create_category(venue.id, CategoryCreate(name="Victim"))
        service.create_category(venue.id, CategoryCreate(name="Other"))
        item = ItemService(conn).create_item(victim.id, ItemCreate(name="Soup"))

        with pytest.raises(TargetRequiredError):
            service.delete_category(victim.id, DeleteStrategy.MOVE)

        assert CategoryRepository(conn).get_by_id(victim.id) is not None
        assert ItemService(conn).get_item(item.id).category_id == victim.id

    def test_move_of_empty_category_needs_no_target(
        self, conn: sqlite3.Connection, service: CategoryService, venue: Venue
    ) -> None:
        empty = service.create_category(venue.id, CategoryCreate(name="Empty"))
        service.create_category(venue.id, CategoryCreate(name="Other"))

        service.delete_category(empty.id, DeleteStrategy.MOVE)

        assert CategoryRepository(conn).get_by_id(empty.id) is None

    def test_move_rehomes_items_and_children(
        self, conn: sqlite3.Connection, service: CategoryService, venue: Venue
    ) -> None:
        """Test that contents are appended to the target in their former order."""
        items = ItemService(conn)
        target = service.create_category(venue.id, CategoryCreate(name="Target"))
        existing_item = items.create_item(target.id, ItemCreate(name="Existing"))
        existing_child = service.create_category(
            venue.id, CategoryCreate(name="Existing child", parent_id=target.id)
        )
        victim = service.create_category(venue.id, CategoryCreate(name="Victim"))
        i1 = items.create_item(victim.id, ItemCreate(name="i1"))
        i2 = items.create_item(victim.id, ItemCreate(name="i2"))
        sub = service.create_category(venue.id, CategoryCreate(name="Sub", parent_id=victim.id))

        service.delete_category(victim.id, DeleteStrategy.MOVE, target.id)

        moved_items = [(i.id, i.display_order) for i in items.list_items(venue.id, target.id)]
        assert moved_items == [(existing_item.id, 0), (i1.id, 1), (i2.id, 2)]
        assert _orders(conn, venue.id, target.id) == [(existing_child.id, 0), (sub.id, 1)]
        assert _orders(conn, venue.id, None) == [(target.id, 0)]

    def test_move_into_own_descendant_raises_circular(
        self, conn: sqlite3.Connection, service: CategoryService, venue: Venue
    ) -> None:
        service.create_category(venue.id, CategoryCreate(name="Other"))
        victim = service.create_category(venue.id, CategoryCreate(name="Victim"))
        sub = service.create_category(venue.id, CategoryCreate(name="Sub", parent_id=victim.id))

        with pytest.raises(CircularReferenceError):
            service.delete_category(victim.id, DeleteStrategy.MOVE, sub.id)

    def test_move_to_unknown_target_raises_not_found(
        self, conn: sqlite3.Connection, service: CategoryService, venue: Venue
    ) -> None:
        service.create_category(venue.id, CategoryCreate(name="Other"))
        victim = service.create_category(venue.id, CategoryCreate(name="Victim"))
        ItemService(conn).create_item(victim.id, ItemCreate(name="Soup"))

        with pytest.raises(NotFoundError):
            service.delete_category(victim.id, DeleteStrategy.MOVE, 999)

    def test_unknown_category_raises_not_found(self, service: CategoryService) -> None:
        with pytest.raises(NotFoundError):
            service.delete_category(999)


@pytest.mark.unit
class TestReorderCategories:
    """Tests for CategoryService.reorder_categories."""

    @pytest.fixture
    def roots(self, conn: sqlite3.Connection, venue: Venue) -> list:
        service = CategoryService(conn)
        return [service.create_category(venue.id, CategoryCreate(name=n)) for n in "ABC"]

    def test_assigns_list_index_as_order(
        self, conn: sqlite3.Connection, venue: Venue, roots: list
    ) -> None:
        a, b, c = roots

        CategoryService(conn).reorder_categories(venue.id, [c.id, a.id, b.id])

        assert _orders(conn, venue.id, None) == [(c.id, 0), (a.id, 1), (b.id, 2)]

    def test_reorder_is_idempotent(
        self, conn: sqlite3.Connection, venue: Venue, roots: list
    ) -> None:
        a, b, c = roots
        service = CategoryService(conn)

        service.reorder_categories(venue.id, [b.id, c.id, a.id])
        service.reorder_categories(venue.id, [b.id, c.id, a.id])

        assert _orders(conn, venue.id, None) == [(b.id, 0), (c.id, 1), (a.id, 2)]

    def test_tree_reflects_new_order(
        self, conn: sqlite3.Connection, venue: Venue, roots: list
    ) -> None:
        a, b, c = roots

        CategoryService(conn).reorder_categories(venue.id, [c.id, b.id, a.id])

        tree = MenuService(conn).get_categories_tree(venue.id)
        assert [node["id"] for node in tree] == [c.id, b.id, a.id]

    def test_unknown_id_raises_not_found(
        self, conn: sqlite3.Connection, venue: Venue, roots: list
    ) -> None:
        with pytest.raises(NotFoundError):
            CategoryService(conn).reorder_categories(venue.id, [roots[0].id, 999])

    def test_id_from_other_venue_raises_not_found(
        self, conn: sqlite3.Connection, venue: Venue, roots: list, make_venue
    ) -> None:
        service = CategoryService(conn)
        other = make_venue("Other Venue")
        foreign = service.create_category(other.id, CategoryCreate(name="Foreign"))

        with pytest.raises(NotFoundError):
            service.reorder_categories(venue.id, [foreign.id])

    def test_repeated_id_in_full_list_raises_invalid_order(
        self, conn: sqlite3.Connection, venue: Venue, roots: list
    ) -> None:
        a, b, c = roots

        with pytest.raises(InvalidOrderError):
            CategoryService(conn).reorder_categories(venue.id, [a.id, b.id, c.id, a.id])

        assert _orders(conn, venue.id, None) == [(a.id, 0), (b.id, 1), (c.id, 2)]

    def test_failed_batch_leaves_orders_untouched(
        self, conn: sqlite3.Connection, venue: Venue, roots: list
    ) -> None:
        """A partial list collides with the omitted sibling and changes nothing."""
        a, b, c = roots

        with pytest.raises(InvalidOrderError):
            CategoryService(conn).reorder_categories(venue.id, [c.id, a.id])

        assert _orders(conn, venue.id, None) == [(a.id, 0), (b.id, 1), (c.id, 2)]

    def test_strict_mode_rejects_partial_list(
        self, conn: sqlite3.Connection, venue: Venue, roots: list
    ) -> None:
        a, b, c = roots
        service = CategoryService(conn, strict_reorder=True)

        with pytest.raises(InvalidOrderError):
            service.reorder_categories(venue.id, [b.id, a.id])

        assert _orders(conn, venue.id, None) == [(a.id, 0), (b.id, 1), (c.id, 2)]

    def test_strict_mode_accepts_full_sibling_set(
        self, conn: sqlite3.Connection, venue: Venue, roots: list
    ) -> None:
        a, b, c = roots

        CategoryService(conn, strict_reorder=True).reorder_categories(
            venue.id, [c.id, b.id, a.id]
        )

        assert _orders(conn, venue.id, None) == [(c.id, 0), (b.id, 1), (a.id, 2)]


@pytest.mark.unit
class TestGetCategoryById:
    """Tests for CategoryService.get_category_by_id."""

    def test_attaches_items_in_display_order(self, conn: sqlite3.Connection, venue: Venue) -> None:
        category = CategoryService(conn).create_category(venue.id, CategoryCreate(name="Food"))
        items = ItemService(conn)
        first = items.create_item(category.id, ItemCreate(name="Soup"))
        second = items.create_item(category.id, ItemCreate(name="Salad"))
        items.reorder_items(category.id, [second.id, first.id])

        loaded = CategoryService(conn).get_category_by_id(category.id)

        assert [i.id for i in loaded.items] == [second.id, first.id]

    def test_unknown_id_raises_not_found(self, conn: sqlite3.Connection) -> None:
        with pytest.raises(NotFoundError):
            CategoryService(conn).get_category_by_id(999)
