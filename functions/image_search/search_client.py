# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

import logging
from dataclasses import dataclass
from typing import List

import requests

from shared.types import ImageSearchResult

logger = logging.getLogger(__name__)

CUSTOM_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
REQUEST_TIMEOUT = 30  # seconds
# The Custom Search API serves at most 10 results per request.
MAX_RESULTS_PER_REQUEST = 10


class ImageSearchError(Exception):
    pass


@dataclass
class GoogleImageSearchClient:
    """Image search through the Google Programmable Search JSON API."""

    api_key: str | None
    engine_id: str | None
    timeout: int = REQUEST_TIMEOUT

    def search(self, query: str, max_results: int = 10) -> List[ImageSearchResult]:
        """
        Searches images for `query`.

        Args:
            query (str): The search query.
            max_results (int): Number of results to request (1-10).

        Returns:
            List[ImageSearchResult]: Results in the order the API ranked them;
                empty when nothing matched.

        Raises:
            ImageSearchError: Credentials are missing or the request failed.
        """
        if not self.api_key or not self.engine_id:
            raise ImageSearchError("Image search credentials are not configured.")

        params = {
            "key": self.api_key,
            "cx": self.engine_id,
            "q": query,
            "searchType": "image",
            "num": max(1, min(max_results, MAX_RESULTS_PER_REQUEST)),
        }
        try:
            response = requests.get(CUSTOM_SEARCH_URL, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ImageSearchError(f"Image search request failed: {e}") from e

        if not response.ok:
            logger.error(
                "Image search for '%s' failed with status %s", query, response.status_code
            )
            raise ImageSearchError(
                f"Image search request failed with status {response.status_code}"
            )

        results = []
        for item in response.json().get("items") or []:
            link = item.get("link")
            if not link:
                continue
            results.append(
                ImageSearchResult(
                    url=link,
                    page_url=(item.get("image") or {}).get("contextLink"),
                    display_domain=item.get("displayLink"),
                )
            )
        return results
