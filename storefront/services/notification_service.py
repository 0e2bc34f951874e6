# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order notifications, processed asynchronously by Celery.
    A broker outage must not undo an order that is already committed,
    so enqueue errors are only logged.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, status: str):
        try:
            send_order_notification_task.delay(user_id, order_id, status)
        except Exception:
            logger.exception(f"Could not enqueue notification for order {order_id}")


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, status: str):
    """
    Only logs for now; an email/SMS/push gateway would be called from here.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} is {status}")

    return {"user_id": user_id, "order_id": order_id, "status": status, "delivery": "sent"}
