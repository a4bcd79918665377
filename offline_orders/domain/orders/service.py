"""Order service - intake, listing and the order state machine"""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...database import db_operation
from ...exceptions import InvalidFilter, InvalidTransition, NotFound
from ...models import UNASSIGNED, Order
from ...shared.validators import coerce_amount, coerce_quantity, parse_date, require_valid_id
from .repository import VIEWS, OrderRepository
from .schemas import ContentSyncOutcome, OrderCreate, OrderUpdate, SyncOutcome

logger = logging.getLogger(__name__)

SYNC_SUCCESS = "SUCCESS"
STORE_FILTER_ALL = {"all", "전체", "null", ""}

AMOUNT_FIELDS = {"total_amount", "shipping_cost", "price"}


def normalize_item(raw: dict) -> dict:
    unit_price = raw.get("unit_price")
    if unit_price is None:
        unit_price = raw.get("price")
    return {
        "product_no": raw.get("product_no"),
        "product_name": raw.get("product_name") or "",
        "option_name": raw.get("option_name") or "",
        "unit_price": coerce_amount(unit_price),
        "quantity": coerce_quantity(raw.get("quantity")),
    }


def normalize_items(raw_items: Optional[list], legacy: dict) -> list[dict]:
    """
    Normalize line items. Orders written by the old single-product form have
    no items; for those a single line is built from the flat fields so every
    stored order has at least one item.
    """
    items = [normalize_item(item) for item in (raw_items or []) if isinstance(item, dict)]
    if items:
        return items
    return [
        normalize_item(
            {
                "product_no": None,
                "product_name": legacy.get("product_name"),
                "option_name": legacy.get("option_name"),
                "unit_price": legacy.get("price"),
                "quantity": legacy.get("quantity"),
            }
        )
    ]


def summarize_product_names(items: list[dict]) -> Optional[str]:
    names = []
    for item in items:
        name = item.get("product_name")
        if name and name not in names:
            names.append(name)
    return " / ".join(names) or None


class OrderService:
    """Service layer for offline order business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepository()

    def get_order(self, order_id: str) -> Order:
        require_valid_id(order_id)
        with db_operation(self.db, "Order lookup"):
            order = self.repo.get_order(self.db, order_id)
        if not order:
            raise NotFound("Order not found")
        return order

    def create_order(self, data: OrderCreate) -> Order:
        payload = data.model_dump()
        raw_items = [item.model_dump() for item in data.items] if data.items else []
        items = normalize_items(raw_items, payload)
        first = items[0]

        order_data = {
            "store_name": data.store_name or UNASSIGNED,
            "manager_name": data.manager_name or UNASSIGNED,
            "customer_name": data.customer_name,
            "customer_phone": data.customer_phone,
            "address": data.address or "",
            "memo": data.memo,
            "items": items,
            "product_name": summarize_product_names(items),
            "option_name": data.option_name or first["option_name"],
            "quantity": coerce_quantity(data.quantity) if data.quantity is not None else first["quantity"],
            "price": coerce_amount(data.price) if data.price is not None else first["unit_price"],
            "total_amount": coerce_amount(data.total_amount),
            "shipping_cost": coerce_amount(data.shipping_cost),
            "is_synced": False,
            "is_deleted": False,
            "created_at": datetime.utcnow(),
        }

        with db_operation(self.db, "Order save"):
            order = self.repo.create_order(self.db, **order_data)
        logger.info(f"📥 Order saved: {order.id} ({order.store_name}, {len(items)} item(s))")
        return order

    def list_orders(
        self,
        view: Optional[str] = None,
        store_name: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> list[Order]:
        view = (view or "active").strip().lower()
        if view not in VIEWS:
            raise InvalidFilter(f"Unknown view: {view}")

        if store_name is not None and store_name.strip().lower() in STORE_FILTER_ALL:
            store_name = None

        start = parse_date(start_date, "startDate")
        end = parse_date(end_date, "endDate")
        if start and end and start > end:
            raise InvalidFilter("startDate is after endDate")

        with db_operation(self.db, "Order list"):
            return self.repo.search_orders(
                self.db,
                view=view,
                store_name=store_name,
                start_date=start,
                end_date=end,
                keyword=(keyword or "").strip() or None,
            )

    def update_order(self, order_id: str, patch: OrderUpdate) -> Order:
        """Partial update of the fields sent; identity and status fields are never patched"""
        order = self.get_order(order_id)

        updates = {key: value for key, value in patch.model_dump(exclude_unset=True).items() if value is not None}
        for key in AMOUNT_FIELDS & updates.keys():
            updates[key] = coerce_amount(updates[key])
        if "quantity" in updates:
            updates["quantity"] = coerce_quantity(updates["quantity"])

        if "items" in updates:
            legacy = {
                "product_name": updates.get("product_name", order.product_name),
                "option_name": updates.get("option_name", order.option_name),
                "price": updates.get("price", order.price),
                "quantity": updates.get("quantity", order.quantity),
            }
            updates["items"] = normalize_items(updates["items"], legacy)
            updates["product_name"] = summarize_product_names(updates["items"])

        updates["updated_at"] = datetime.utcnow()

        with db_operation(self.db, "Order update"):
            order = self.repo.update_order(self.db, order, **updates)
        logger.info(f"✏️ Order updated: {order.id} ({', '.join(sorted(updates))})")
        return order

    # State transitions

    def soft_delete(self, order_id: str) -> Order:
        order = self.get_order(order_id)
        if order.is_deleted:
            raise InvalidTransition("Order is already in trash")

        with db_operation(self.db, "Order soft delete"):
            order = self.repo.update_order(
                self.db, order, is_deleted=True, deleted_at=datetime.utcnow()
            )
        logger.info(f"🗑️ Order moved to trash: {order.id}")
        return order

    def restore(self, order_id: str) -> Order:
        """Trash -> active. Sync bookkeeping is cleared so the order is re-sent."""
        order = self.get_order(order_id)
        if not order.is_deleted:
            raise InvalidTransition("Only trashed orders can be restored")

        with db_operation(self.db, "Order restore"):
            order = self.repo.update_order(
                self.db,
                order,
                is_deleted=False,
                deleted_at=None,
                is_synced=False,
                synced_at=None,
                external_sync_success=None,
                external_sync_message=None,
                updated_at=datetime.utcnow(),
            )
        logger.info(f"♻️ Order restored: {order.id}")
        return order

    def hard_delete(self, order_id: str, force: bool = False) -> None:
        """
        Permanently remove a trashed order. `force` skips the trash requirement
        and must only be passed after the caller has checked admin access.
        """
        order = self.get_order(order_id)
        was_trashed = order.is_deleted
        if not was_trashed and not force:
            raise InvalidTransition("Move the order to trash before deleting it permanently")

        with db_operation(self.db, "Order delete"):
            self.repo.delete_order(self.db, order)
        if not was_trashed:
            logger.warning(f"⚠️ Order {order_id} permanently deleted without passing through trash")
        else:
            logger.info(f"Order permanently deleted: {order_id}")

    def sync_batch(self, outcomes: list[SyncOutcome]) -> int:
        """Apply per-id ERP sync results in one commit; returns the number of orders updated"""
        for outcome in outcomes:
            require_valid_id(outcome.id)

        grouped: dict[tuple[bool, Optional[str]], list[str]] = defaultdict(list)
        for outcome in outcomes:
            grouped[(outcome.status == SYNC_SUCCESS, outcome.message)].append(outcome.id)

        synced_at = datetime.utcnow()
        updated = 0
        with db_operation(self.db, "Order sync"):
            for (success, message), order_ids in grouped.items():
                updated += self.repo.mark_synced_by_ids(self.db, order_ids, success, message, synced_at)
            self.db.commit()

        logger.info(f"✅ Synced {updated} order(s) from {len(outcomes)} outcome(s)")
        return updated

    def sync_ids(self, order_ids: list[str]) -> int:
        return self.sync_batch([SyncOutcome(id=order_id) for order_id in order_ids])

    def sync_by_content(self, outcomes: list[ContentSyncOutcome]) -> int:
        """
        Match orders on (customer_name, total_amount) when the caller has no ids.
        Every order sharing the tuple is marked; this is a best-effort match.
        """
        amounts = [coerce_amount(outcome.total_amount) for outcome in outcomes]

        synced_at = datetime.utcnow()
        updated = 0
        with db_operation(self.db, "Order content sync"):
            for outcome, total_amount in zip(outcomes, amounts):
                matched = self.repo.mark_synced_by_content(
                    self.db,
                    customer_name=outcome.customer_name,
                    total_amount=total_amount,
                    success=outcome.status == SYNC_SUCCESS,
                    message=outcome.message,
                    synced_at=synced_at,
                )
                if matched > 1:
                    logger.warning(
                        f"⚠️ Content sync matched {matched} orders for "
                        f"({outcome.customer_name}, {outcome.total_amount})"
                    )
                updated += matched
            self.db.commit()

        logger.info(f"✅ Content sync updated {updated} order(s) from {len(outcomes)} outcome(s)")
        return updated
