# schooldesk/services/inventory.py - Stores, stock items and item issues
from datetime import date
from typing import Any
import logging
import uuid

from sqlalchemy import Select, update

from schooldesk.core.errors import ConflictError, ValidationFailed
from schooldesk.models.inventory import Item, ItemIssue, ItemStore
from schooldesk.services.crud import Dependent, Reference, RelatedCount, TenantCRUDService, unique

logger = logging.getLogger(__name__)


class StoreService(TenantCRUDService[ItemStore]):
    model = ItemStore
    resource_name = "Store"
    unique_rules = (unique("name"), unique("code"))
    dependents = (Dependent(Item, "store_id", "{count} item(s) are kept in it"),)
    related_counts = (RelatedCount("item_count", Item, "store_id"),)
    search_fields = ("name", "code")

    def ordering(self):
        return [ItemStore.name, ItemStore.id]


class ItemService(TenantCRUDService[Item]):
    model = Item
    resource_name = "Item"
    unique_rules = (unique("name"),)
    references = {"store_id": Reference(ItemStore, "Store")}
    dependents = (Dependent(ItemIssue, "item_id", "{count} issue record(s) refer to it"),)
    search_fields = ("name", "category")
    filter_fields = ("store_id", "category")

    def ordering(self):
        return [Item.name, Item.id]


class ItemIssueService(TenantCRUDService[ItemIssue]):
    model = ItemIssue
    resource_name = "Item issue"
    references = {"item_id": Reference(Item, "Item")}
    search_fields = ("issue_to",)
    filter_fields = ("item_id",)

    statuses = ("issued", "returned")

    def ordering(self):
        return [ItemIssue.issue_date.desc(), ItemIssue.created_at.desc(), ItemIssue.id]

    def apply_status(self, stmt: Select, status: Any) -> Select:
        if not status:
            return stmt
        if status not in self.statuses:
            raise ValidationFailed(f"status: Unsupported status filter '{status}'", field="status")
        return stmt.where(ItemIssue.status == status)

    def _move_stock(self, item_id: uuid.UUID, delta: int) -> bool:
        """Adjust stock in one statement; a withdrawal never takes it below zero"""
        stmt = update(Item).where(Item.id == item_id, Item.school_id == self.ctx.school_id)
        if delta < 0:
            stmt = stmt.where(Item.quantity >= -delta)
        result = self.db.execute(stmt.values(quantity=Item.quantity + delta))
        return result.rowcount == 1

    def prepare_create(self, values, extra):
        values["issue_date"] = values.get("issue_date") or date.today()
        values["status"] = "issued"
        values["issued_by"] = self.ctx.user_id

    def after_create(self, obj, extra):
        if not self._move_stock(obj.item_id, -obj.quantity):
            item = self.require(Item, obj.item_id, "Item")
            raise ValidationFailed(
                f"quantity: Only {item.quantity} unit(s) of {item.name} in stock", field="quantity"
            )

    def return_issue(self, issue_id: uuid.UUID) -> ItemIssue:
        obj = self.get_object(issue_id)
        if obj.status == "returned":
            raise ConflictError("Item has already been returned")
        with self.atomic():
            obj.status = "returned"
            obj.return_date = date.today()
            self._move_stock(obj.item_id, obj.quantity)
        logger.info(f"Item issue returned: {obj.id} by {self.ctx.username}")
        return self.get(obj.id)

    def before_delete(self, obj):
        if obj.status == "issued":
            self._move_stock(obj.item_id, obj.quantity)
