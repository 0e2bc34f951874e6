# storefront/services/product_client.py
import requests
from requests import RequestException

from storefront.domain.exceptions import CatalogUnavailable
from storefront.utils.retry import http_retry
from storefront.utils.settings import PRODUCT_SERVICE_URL, PRODUCT_SERVICE_TIMEOUT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    def __init__(self, base_url: str | None = None, timeout: float = PRODUCT_SERVICE_TIMEOUT):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    def fetch_product(self, product_id: int) -> dict | None:
        """Returns the catalog document, or None when the catalog answers 404."""
        try:
            return self._get_product(product_id)
        except RequestException as e:
            logger.error(f"ProductClient failed for product {product_id}: {e}")
            raise CatalogUnavailable(product_id) from e

    @http_retry()
    def _get_product(self, product_id: int) -> dict | None:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"ProductClient GET {url}")

        resp = self.session.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()
