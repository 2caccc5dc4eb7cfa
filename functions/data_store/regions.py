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

"""Discovery of region documents in the data directory."""

import logging
from typing import List

from data_store.document_store import DocumentStore
from shared.task_group import run_bounded
from shared.types import RegionInfo

logger = logging.getLogger(__name__)

REGION_FILE_SUFFIX = ".json"


class RegionNotFoundError(LookupError):
    pass


def region_path(data_dir: str, region_id: str) -> str:
    return f"{data_dir.rstrip('/')}/{region_id}{REGION_FILE_SUFFIX}"


def list_regions(
    store: DocumentStore,
    data_dir: str,
    exclude: str | None = None,
    max_workers: int = 8,
) -> List[RegionInfo]:
    """
    Lists every region document in `data_dir`, sorted by id.

    Each document is fetched to read its display name. A document that fails
    to load is logged and left out; a failure to list the directory itself
    propagates.

    Args:
        store (DocumentStore): The region document store.
        data_dir (str): Directory holding one JSON file per region.
        exclude (str | None): A file name in that directory that is not a region.
        max_workers (int): Concurrent fetches.

    Returns:
        List[RegionInfo]: The regions, sorted by id.
    """
    file_names = [
        name
        for name in store.list_files(data_dir)
        if name.endswith(REGION_FILE_SUFFIX) and name != exclude
    ]

    def _load(file_name: str) -> RegionInfo:
        region_id = file_name[: -len(REGION_FILE_SUFFIX)]
        document = store.fetch(region_path(data_dir, region_id))
        return RegionInfo(id=region_id, name=document.content.get("name", ""))

    regions = []
    for outcome in run_bounded(_load, file_names, max_workers):
        if not outcome.ok:
            logger.error("Skipping region file %s: %s", outcome.item, outcome.error)
            continue
        if outcome.value.name:
            regions.append(outcome.value)
    regions.sort(key=lambda region: region.id)
    return regions


def resolve_region_id(regions: List[RegionInfo], name: str) -> str:
    """Maps a region display name to its document id."""
    for region in regions:
        if region.name == name:
            return region.id
    raise RegionNotFoundError(f"Unsupported region: {name}")
