# storefront/services/search_client.py
import json
from typing import List

import requests

from storefront.utils.settings import (
    SEARCH_API_KEY,
    SEARCH_INDEX_URL,
    SEARCH_NAMESPACE,
    SEARCH_TIMEOUT,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

API_VERSION = "2025-01"


class SearchClient:
    """
    HTTP client for the external vector index (integrated-embedding records API).
    The index embeds the product text itself, we only send ids and text.
    An empty base url means search is not configured.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        namespace: str | None = None,
        timeout: int | None = None,
    ):
        self.base_url = (base_url if base_url is not None else SEARCH_INDEX_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else SEARCH_API_KEY
        self.namespace = namespace or SEARCH_NAMESPACE
        self.timeout = timeout or SEARCH_TIMEOUT

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    def _headers(self, content_type: str = "application/json") -> dict:
        return {
            "Api-Key": self.api_key,
            "X-Pinecone-API-Version": API_VERSION,
            "Content-Type": content_type,
        }

    def search(self, text: str, top_k: int) -> List[int]:
        url = f"{self.base_url}/records/namespaces/{self.namespace}/search"
        logger.info(f"SearchClient POST {url} top_k={top_k}")

        resp = requests.post(
            url,
            json={"query": {"inputs": {"text": text}, "top_k": top_k}},
            headers=self._headers(),
            timeout=self.timeout,
        )
        resp.raise_for_status()

        hits = resp.json().get("result", {}).get("hits", [])
        product_ids = []
        for hit in hits:
            try:
                product_ids.append(int(hit["_id"]))
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Skipping search hit with unexpected id: {hit!r}")
        return product_ids

    def upsert_product(self, product_id: int, text: str) -> None:
        url = f"{self.base_url}/records/namespaces/{self.namespace}/upsert"
        logger.info(f"SearchClient upsert product {product_id}")

        #records endpoint takes newline-delimited JSON
        body = json.dumps({"_id": str(product_id), "text": text}) + "\n"
        resp = requests.post(
            url,
            data=body.encode(),
            headers=self._headers("application/x-ndjson"),
            timeout=self.timeout,
        )
        resp.raise_for_status()

    def delete_product(self, product_id: int) -> None:
        url = f"{self.base_url}/vectors/delete"
        logger.info(f"SearchClient delete product {product_id}")

        resp = requests.post(
            url,
            json={"ids": [str(product_id)], "namespace": self.namespace},
            headers=self._headers(),
            timeout=self.timeout,
        )
        resp.raise_for_status()
