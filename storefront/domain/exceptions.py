# storefront/domain/exceptions.py
"""
Business errors raised by the services.
status_code is only a hint for the HTTP layer (see main.create_app).
"""


class StorefrontError(Exception):
    status_code = 400

    def __init__(self, message: str = "Request could not be processed"):
        self.message = message
        super().__init__(self.message)


class CartNotFound(StorefrontError):
    status_code = 404

    def __init__(self, user_id: int):
        super().__init__(f"Cart not found for user: {user_id}")


class CartItemNotFound(StorefrontError):
    status_code = 404

    def __init__(self, item_id: int):
        super().__init__(f"Cart item not found: {item_id}")


class EmptyCart(StorefrontError):
    status_code = 422

    def __init__(self):
        super().__init__("Cannot create order from empty cart")


class ProductValidationFailed(StorefrontError):
    status_code = 422

    def __init__(self, reason: str, product_name: str | None = None):
        self.reason = reason
        self.product_name = product_name
        super().__init__(reason)


class OrderNotFound(StorefrontError):
    status_code = 404

    def __init__(self, order_id: int):
        super().__init__(f"Order not found: {order_id}")


class InvalidTransition(StorefrontError):
    status_code = 409

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change order status from {current} to {target}")


class AddressNotFound(StorefrontError):
    status_code = 404

    def __init__(self, address_id: int | str):
        super().__init__(f"Address not found: {address_id}")


class MissingCheckoutAddress(StorefrontError):
    status_code = 422

    def __init__(self):
        super().__init__("Shipping and billing addresses must be set before checkout")


class UserNotFound(StorefrontError):
    status_code = 404

    def __init__(self, user_id: int):
        super().__init__(f"User not found: {user_id}")


class PaymentNotFound(StorefrontError):
    status_code = 404

    def __init__(self, payment_id: int | str):
        super().__init__(f"Payment not found: {payment_id}")


class PaymentRejected(StorefrontError):
    status_code = 409


class ConcurrentModification(StorefrontError):
    status_code = 409


class CatalogUnavailable(StorefrontError):
    status_code = 503

    def __init__(self, product_id: int):
        super().__init__(f"Catalog service unavailable while fetching product {product_id}")
