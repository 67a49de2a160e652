"""Row-to-entity converters shared by the SQLite stores."""

import json

import aiosqlite

from stockroom.core.clock import from_db, utc_now
from stockroom.core.entities.inventory import (
    MovementDetails,
    MovementType,
    StockItem,
    StockMovement,
    StockReorder,
)
from stockroom.core.entities.notification import Notification
from stockroom.core.entities.reference import Supplier


def _optional(row: aiosqlite.Row, column: str):
    """Value of ``column`` if the query selected it, else None."""
    return row[column] if column in row.keys() else None


def row_to_item(row: aiosqlite.Row) -> StockItem:
    """Convert a stock_items row (optionally joined) to a StockItem."""
    return StockItem(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        sku=row["sku"],
        barcode=row["barcode"],
        unit_price=float(row["unit_price"] or 0),
        quantity=int(row["quantity"]),
        min_quantity=row["min_quantity"],
        max_quantity=row["max_quantity"],
        is_active=bool(row["is_active"]),
        category_id=row["category_id"],
        location_id=row["location_id"],
        created_by=row["created_by"],
        created_at=from_db(row["created_at"]) or utc_now(),
        updated_at=from_db(row["updated_at"]) or utc_now(),
        category=_optional(row, "category"),
        location=_optional(row, "location"),
    )


def _movement_fields(row: aiosqlite.Row) -> dict:
    return {
        "id": row["id"],
        "item_id": row["item_id"],
        "movement_type": MovementType(row["movement_type"]),
        "quantity": int(row["quantity"]),
        "unit_price": row["unit_price"],
        "total_value": row["total_value"],
        "notes": row["notes"],
        "reference_number": row["reference_number"],
        "location_id": row["location_id"],
        "supplier_id": row["supplier_id"],
        "customer_id": row["customer_id"],
        "movement_date": from_db(row["movement_date"]) or utc_now(),
        "created_by": row["created_by"],
        "created_at": from_db(row["created_at"]) or utc_now(),
        "updated_at": from_db(row["updated_at"]),
    }


def row_to_movement(row: aiosqlite.Row) -> StockMovement:
    """Convert a bare stock_movements row."""
    return StockMovement(**_movement_fields(row))


def row_to_movement_details(row: aiosqlite.Row) -> MovementDetails:
    """Convert a stock_movements row joined with its display names."""
    return MovementDetails(
        **_movement_fields(row),
        item_name=_optional(row, "item_name"),
        location=_optional(row, "location"),
        supplier=_optional(row, "supplier"),
        customer=_optional(row, "customer"),
        user_name=_optional(row, "user_name"),
    )


def row_to_supplier(row: aiosqlite.Row) -> Supplier:
    return Supplier(
        id=row["id"],
        name=row["name"],
        code=row["code"],
        created_at=from_db(row["created_at"]),
    )


def row_to_reorder(row: aiosqlite.Row) -> StockReorder:
    return StockReorder(
        id=row["id"],
        item_id=row["item_id"],
        item_name=_optional(row, "item_name"),
        requested_qty=int(row["requested_qty"]),
        status=row["status"],
        created_at=from_db(row["created_at"]),
    )


def row_to_notification(row: aiosqlite.Row) -> Notification:
    meta = None
    if row["meta_json"]:
        try:
            meta = json.loads(row["meta_json"])
        except json.JSONDecodeError:
            meta = {"raw": row["meta_json"]}

    return Notification(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        message=row["message"] or "",
        type=row["type"] or "info",
        meta=meta,
        created_at=from_db(row["created_at"]) or utc_now(),
        read_at=from_db(row["read_at"]),
    )
