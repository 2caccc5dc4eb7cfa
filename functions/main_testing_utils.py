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
"""Fixtures shared by the callable function tests."""

from types import SimpleNamespace
from typing import List, Optional, Tuple

from data_store.document_store import InMemoryDocumentStore
from data_store.regions import region_path
from shared.types import RegionInfo

DATA_DIR = "data"


def create_spot(
    name: str, area: str = "Shibuya", image: Optional[str] = "https://example.com/old.jpg"
) -> dict:
    return {
        "prefecture": "Tokyo",
        "name": name,
        "area": area,
        "category": "Food",
        "subCategory": "Cafe",
        "description": f"{name} description",
        "image": image,
        "imageSource": "example.com",
        "imageSourceUrl": image,
        "tags": ["Cafe"],
    }


def create_region_document(name: str = "Tokyo", spots: Optional[List[dict]] = None) -> dict:
    return {
        "name": name,
        "spots": spots if spots is not None else [create_spot("Example Cafe")],
        "areaPositions": [
            {"name": "Shibuya", "top": "40%", "left": "35%"},
            {"name": "Shinjuku", "top": "30%", "left": "30%"},
        ],
        "transitData": {"Shibuya": {"Shinjuku": "10min"}, "Shinjuku": {"Shibuya": "10min"}},
    }


def create_store_with_regions(
    documents: Optional[dict] = None,
) -> Tuple[InMemoryDocumentStore, List[RegionInfo]]:
    """
    Builds an in-memory store holding one document per region id.

    Args:
        documents (Optional[dict]): region id -> region document. Defaults to
            a single Tokyo document.
    """
    documents = documents or {"tokyo": create_region_document()}
    store = InMemoryDocumentStore()
    regions = []
    for region_id, document in documents.items():
        store.put(region_path(DATA_DIR, region_id), document)
        regions.append(RegionInfo(id=region_id, name=document["name"]))
    return store, sorted(regions, key=lambda region: region.id)


def create_request(data: dict, uid: Optional[str] = "user-1", admin: bool = False):
    """A stand-in for https_fn.CallableRequest; uid=None means anonymous."""
    auth = None
    if uid:
        auth = SimpleNamespace(uid=uid, token={"admin": True} if admin else {})
    return SimpleNamespace(data=data, auth=auth)
