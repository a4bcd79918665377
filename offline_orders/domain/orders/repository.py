"""Order repository - Database operations for offline orders"""

from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Order

VIEWS = ("active", "completed", "trash")


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class OrderRepository:
    """Repository for order database operations"""

    @staticmethod
    def get_order(db: Session, order_id: str) -> Optional[Order]:
        return db.query(Order).filter(Order.id == order_id).first()

    @staticmethod
    def create_order(db: Session, **order_data) -> Order:
        order = Order(**order_data)
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    @staticmethod
    def update_order(db: Session, order: Order, **updates) -> Order:
        for key, value in updates.items():
            setattr(order, key, value)
        db.commit()
        db.refresh(order)
        return order

    @staticmethod
    def delete_order(db: Session, order: Order) -> None:
        db.delete(order)
        db.commit()

    @staticmethod
    def search_orders(
        db: Session,
        view: str = "active",
        store_name: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        keyword: Optional[str] = None,
    ) -> list[Order]:
        """All filters are optional and combined with AND; newest first"""
        query = db.query(Order)

        if view == "trash":
            query = query.filter(Order.is_deleted.is_(True))
        elif view == "completed":
            query = query.filter(Order.is_deleted.is_(False), Order.is_synced.is_(True))
        else:
            query = query.filter(Order.is_deleted.is_(False), Order.is_synced.is_(False))

        if store_name:
            query = query.filter(Order.store_name == store_name)

        if start_date:
            query = query.filter(Order.created_at >= datetime.combine(start_date, time.min))

        if end_date:
            query = query.filter(Order.created_at <= datetime.combine(end_date, time.max))

        if keyword:
            search_term = f"%{_escape_like(keyword)}%"
            query = query.filter(
                or_(
                    Order.customer_name.ilike(search_term, escape="\\"),
                    Order.customer_phone.ilike(search_term, escape="\\"),
                    Order.product_name.ilike(search_term, escape="\\"),
                )
            )

        return query.order_by(Order.created_at.desc()).all()

    @staticmethod
    def mark_synced_by_ids(
        db: Session, order_ids: list[str], success: bool, message: Optional[str], synced_at: datetime
    ) -> int:
        """Stamp sync results on every non-trashed order in `order_ids`. Caller commits."""
        if not order_ids:
            return 0
        return (
            db.query(Order)
            .filter(Order.id.in_(order_ids), Order.is_deleted.is_(False))
            .update(
                {
                    Order.is_synced: True,
                    Order.synced_at: synced_at,
                    Order.external_sync_success: success,
                    Order.external_sync_message: message,
                },
                synchronize_session=False,
            )
        )

    @staticmethod
    def mark_synced_by_content(
        db: Session,
        customer_name: str,
        total_amount: int,
        success: bool,
        message: Optional[str],
        synced_at: datetime,
    ) -> int:
        """Stamp sync results on every non-trashed order matching the tuple. Caller commits."""
        return (
            db.query(Order)
            .filter(
                Order.customer_name == customer_name,
                Order.total_amount == total_amount,
                Order.is_deleted.is_(False),
            )
            .update(
                {
                    Order.is_synced: True,
                    Order.synced_at: synced_at,
                    Order.external_sync_success: success,
                    Order.external_sync_message: message,
                },
                synchronize_session=False,
            )
        )
