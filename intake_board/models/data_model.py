"""
Reference description of the document store behind the intake desk.
Rendered by the Data Model page; nothing here is enforced at runtime.
"""
from typing import Dict, List
from pydantic import BaseModel, Field


class CollectionDefinition(BaseModel):
    """A collection, its field schema and any nested subcollections"""
    name: str
    description: str
    schema_fields: Dict[str, str]  # field name -> type expression
    subcollections: List["CollectionDefinition"] = Field(default_factory=list)


class IndexDefinition(BaseModel):
    """Composite or single-field index suggested for a dashboard query"""
    collection: str
    fields: List[str]
    description: str


DEVICE_CATEGORY = "'computer'|'phone'|'tablet'|'other'"

ORDER_STATUS = (
    "'Intake'|'Diagnosis'|'Quote'|'Approved'|'Repairing'|'QA'|'Ready'|'Delivered'|'Not Repaired'"
)


COLLECTIONS: List[CollectionDefinition] = [
    CollectionDefinition(
        name="users",
        description="Shop staff with roles and skills.",
        schema_fields={
            "uid": "string",
            "name": "string",
            "email": "string",
            "role": "'admin'|'technician'|'reception'",
            "active": "boolean",
            "skills": "string[]",
            "created_at": "timestamp",
            "updated_at": "timestamp",
        },
    ),
    CollectionDefinition(
        name="customers",
        description="End customers who bring devices in for service.",
        schema_fields={
            "customer_id": "string",
            "name": "string",
            "phone": "string",
            "email": "string?",
            "tax_id": "string?",
            "address": "string?",
            "notes": "string?",
            "created_at": "timestamp",
            "updated_at": "timestamp",
        },
    ),
    CollectionDefinition(
        name="devices",
        description="Optional catalog of supported models.",
        schema_fields={
            "device_id": "string",
            "category": DEVICE_CATEGORY,
            "brand": "string",
            "model": "string",
            "variants": "string[]",
            "technical_notes": "string?",
            "created_at": "timestamp",
            "updated_at": "timestamp",
        },
    ),
    CollectionDefinition(
        name="orders",
        description="Service orders with a controlled lifecycle.",
        schema_fields={
            "order_id": "string",
            "customer_id": "string",
            "customer_name": "string?",
            "received_by": "string",
            "intake_date": "timestamp",
            "device": "OrderDeviceInfo",
            "reported_fault": "string",
            "status": ORDER_STATUS,
            "priority": "'low'|'medium'|'high'",
            "channel": "'Counter'|'Email'|'WhatsApp'|'Referred'",
            "assigned_to": "string?",
            "assigned_to_name": "string?",
            "dates": "OrderDates",
            "quote": "OrderQuote?",
            "warranty": "OrderWarranty?",
            "photos": "string[]",
            "tags": "string[]",
            "origin_order": "string?",
            "created_at": "timestamp",
            "updated_at": "timestamp",
        },
        subcollections=[
            CollectionDefinition(
                name="logs",
                description="Events, notes and part usage recorded against the order.",
                schema_fields={
                    "log_id": "string",
                    "timestamp": "timestamp",
                    "actor_uid": "string",
                    "type": "'status'|'note'|'attachment'|'part_usage'",
                    "message": "string?",
                    "attachments": "string[]",
                    "part_id": "string?",
                    "quantity": "number?",
                },
            )
        ],
    ),
    CollectionDefinition(
        name="parts",
        description="Spare parts inventory managed by the shop.",
        schema_fields={
            "part_id": "string",
            "sku": "string",
            "category": "string",
            "description": "string",
            "compatibility": "string[]",
            "stock": "number",
            "min_stock": "number",
            "cost": "number",
            "price": "number",
            "location": "string?",
            "supplier": "string?",
            "created_at": "timestamp",
            "updated_at": "timestamp",
        },
    ),
    CollectionDefinition(
        name="inventory_movements",
        description="Inventory movements with full traceability.",
        schema_fields={
            "movement_id": "string",
            "part_id": "string",
            "type": "'in'|'out'|'adjustment'|'repair_usage'",
            "quantity": "number",
            "actor_uid": "string",
            "date": "timestamp",
            "order_ref_id": "string?",
            "note": "string?",
            "created_at": "timestamp",
        },
    ),
    CollectionDefinition(
        name="devices_for_sale",
        description="Devices the shop has ready to sell.",
        schema_fields={
            "item_id": "string",
            "type": DEVICE_CATEGORY,
            "brand": "string",
            "model": "string",
            "condition": "'new'|'used'|'refurb'",
            "price": "number",
            "stock": "number",
            "photos": "string[]",
            "notes": "string?",
            "created_at": "timestamp",
            "updated_at": "timestamp",
        },
    ),
    CollectionDefinition(
        name="shop_equipment",
        description="Internal shop assets and their maintenance.",
        schema_fields={
            "asset_id": "string",
            "type": DEVICE_CATEGORY,
            "brand": "string",
            "model": "string",
            "identifier": "string",
            "status": "string",
            "notes": "string?",
            "maintenance": "{ next?: timestamp; history?: string[] }",
            "created_at": "timestamp",
            "updated_at": "timestamp",
        },
    ),
]


SUGGESTED_INDEXES: List[IndexDefinition] = [
    IndexDefinition(
        collection="orders",
        fields=["status"],
        description="List orders by status for kanban boards.",
    ),
    IndexDefinition(
        collection="orders",
        fields=["assigned_to", "status"],
        description="Active orders per technician and status.",
    ),
    IndexDefinition(
        collection="orders",
        fields=["customer_id", "intake_date"],
        description="A customer's history ordered by date.",
    ),
    IndexDefinition(
        collection="orders",
        fields=["device.brand", "device.model"],
        description="Reports by device model.",
    ),
    IndexDefinition(
        collection="parts",
        fields=["sku"],
        description="Exact SKU lookup.",
    ),
    IndexDefinition(
        collection="parts",
        fields=["description"],
        description="Search by description.",
    ),
    IndexDefinition(
        collection="inventory_movements",
        fields=["part_id", "date"],
        description="Movement history per part.",
    ),
]


def indexes_for(collection: str) -> List[IndexDefinition]:
    return [index for index in SUGGESTED_INDEXES if index.collection == collection]
