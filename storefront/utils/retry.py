# storefront/utils/retry.py
import logging

from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential
import requests
import redis

from storefront.utils.logging import get_logger
from storefront.utils.settings import HTTP_RETRY_ATTEMPTS, REDIS_RETRY_ATTEMPTS

logger = get_logger(__name__)


def http_retry(attempts: int = HTTP_RETRY_ATTEMPTS):
    """Catalog calls: connection errors and timeouts are retried, HTTP status codes are not."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )


def redis_retry(attempts: int = REDIS_RETRY_ATTEMPTS):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type((redis.ConnectionError, redis.TimeoutError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
