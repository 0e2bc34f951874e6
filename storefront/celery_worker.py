# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
    include=["storefront.services.notification_service"],
)

celery_app.conf.update(
    task_default_queue="notifications",
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    # results are only kept for debugging
    result_expires=3600,
    task_acks_late=True,
    timezone="UTC",
)
