"""Order placement errors.

Each error carries a stable ``code`` that the API returns alongside the
message, so the storefront can react without parsing text.
"""


class OrderError(Exception):
    """Base class for errors that abort an order."""

    code = "ORDER_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class EmptyOrderError(OrderError):
    """Raised when an order has no items."""

    code = "EMPTY_ORDER"

    def __init__(self):
        super().__init__("Order must contain at least one item")


class ProductNotFoundError(OrderError):
    """Raised when an order references a product that does not exist."""

    code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")

    def as_dict(self) -> dict:
        return {**super().as_dict(), "product_id": self.product_id}


class ProductInactiveError(OrderError):
    """Raised when an order references a product hidden from the catalog."""

    code = "PRODUCT_INACTIVE"

    def __init__(self, product):
        self.product_id = product.pk
        self.product_name = product.name
        super().__init__(f"Product not available: {product.name}")

    def as_dict(self) -> dict:
        return {**super().as_dict(), "product_id": self.product_id, "product_name": self.product_name}


class InsufficientStockError(OrderError):
    """Raised when a product has fewer units than requested."""

    code = "INSUFFICIENT_STOCK"

    def __init__(self, product, requested_quantity: int):
        self.product_id = product.pk
        self.product_name = product.name
        self.available_stock = product.stock_quantity
        self.requested_quantity = requested_quantity
        super().__init__(
            f"Insufficient stock for {product.name}. "
            f"Available: {self.available_stock}, requested: {requested_quantity}"
        )

    def as_dict(self) -> dict:
        return {
            **super().as_dict(),
            "product_id": self.product_id,
            "product_name": self.product_name,
            "available_stock": self.available_stock,
            "requested_quantity": self.requested_quantity,
        }


class OrderTooLargeError(OrderError):
    """Raised when an order total exceeds what the order record can store."""

    code = "ORDER_TOO_LARGE"

    def __init__(self, total):
        self.total = total
        super().__init__("Order total is too large")
