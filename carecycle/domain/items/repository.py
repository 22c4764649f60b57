"""Item repository - Database operations for schedulable items"""

from sqlalchemy.orm import Session

from ...models import Item


class ItemRepository:
    """Repository for item database operations"""

    @staticmethod
    def get_active_items(db: Session) -> list[Item]:
        """Active items ordered by type, then name"""
        return (
            db.query(Item)
            .filter(Item.is_active.is_(True))
            .order_by(Item.type, Item.name)
            .all()
        )

    @staticmethod
    def get_items_by_ids(db: Session, item_ids: list[str]) -> dict[str, Item]:
        if not item_ids:
            return {}
        items = db.query(Item).filter(Item.id.in_(item_ids)).all()
        return {item.id: item for item in items}

