"""Plain-dict renderings of inventory records."""

from beautycatalog.core.money import money


def serialize_record(record):
    product = record.product
    return {
        "id": record.pk,
        "product_id": record.product_id,
        "product_name": product.name,
        "product_brand": product.brand,
        "purchase_price": money(record.purchase_price),
        "purchase_quantity": record.purchase_quantity,
        "purchase_date": record.purchase_date.isoformat() if record.purchase_date else None,
        "supplier_name": record.supplier_name,
        "supplier_contact": record.supplier_contact,
        "notes": record.notes,
        "selling_price": money(product.price),
        "current_stock": product.stock_quantity,
        "cost_price": money(product.cost_price),
        "profit_per_unit": money(record.profit_per_unit),
        "profit_margin_percent": money(record.profit_margin_percent),
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "updated_at": record.updated_at.isoformat() if record.updated_at else None,
    }
