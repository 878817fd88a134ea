"""Plain-dict renderings of catalog models for JSON and broadcast payloads."""

from beautycatalog.core.money import money


def serialize_currency(currency):
    return {
        "code": currency.code,
        "name": currency.name,
        "symbol": currency.symbol,
        "flag_emoji": currency.flag_emoji,
    }


def serialize_product(product, admin=False):
    """Render a product.

    Shoppers never see cost data; ``admin=True`` adds cost, margin and
    currency decoration for the back office.
    """
    data = {
        "id": product.pk,
        "name": product.name,
        "description": product.description,
        "price": money(product.price),
        "currency_code": product.currency_id,
        "category": product.category,
        "brand": product.brand,
        "image_url": product.image_url,
        "sku": product.sku,
        "stock_quantity": max(0, product.stock_quantity or 0),
        "is_active": bool(product.is_active),
        "created_at": product.created_at.isoformat() if product.created_at else None,
        "updated_at": product.updated_at.isoformat() if product.updated_at else None,
    }
    if admin:
        currency = product.currency
        data.update({
            "cost_price": money(product.cost_price),
            "min_stock_level": product.min_stock_level,
            "profit_per_unit": money(product.profit_per_unit),
            "profit_margin": money(product.profit_margin),
            "currency_symbol": currency.symbol if currency else None,
            "currency_flag": currency.flag_emoji if currency else None,
        })
    return data
