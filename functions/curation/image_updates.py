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

"""Finds spots whose images need replacing, proposes new ones, and commits
the proposals an admin confirmed.

Work is isolated per unit: one region, spot or document failing is logged and
reported as skipped without aborting the rest of the batch.
"""

import logging
from typing import Dict, List, Optional, Tuple

from curation import spot_edits
from curation.image_checks import is_image_appropriate, should_update_image
from data_store.document_store import DocumentStore
from data_store.regions import RegionNotFoundError, region_path
from image_search.search_client import GoogleImageSearchClient
from models.gemini import GeminiClient
from shared import constants
from shared.task_group import run_bounded
from shared.types import (
    ConfirmImageUpdatesResult,
    ImageSearchResult,
    ImageUpdateProposals,
    ProposedImageUpdate,
    RegionInfo,
    UpdateCountReport,
)

logger = logging.getLogger(__name__)

# Regions are walked a few at a time; spots inside a region get the full width.
REGION_WORKERS = 2


def fetch_image_candidates(
    spot_name: str,
    search: GoogleImageSearchClient,
    gemini: GeminiClient,
    reported_image_url: Optional[str] = None,
    max_candidates: int = constants.MAX_IMAGE_CANDIDATES,
) -> List[ImageSearchResult]:
    """
    Searches replacement images for a spot and ranks them.

    Results keep the search engine's order. Up to `max_candidates` results that
    pass the relevance filter come first; if fewer pass, the remaining slots
    are filled with unfiltered results. The reported image and duplicate URLs
    never appear.

    Args:
        spot_name (str): The spot to search images for.
        search (GoogleImageSearchClient): The image search client.
        gemini (GeminiClient): The model used by the relevance filter.
        reported_image_url (Optional[str]): An image known to be wrong.
        max_candidates (int): How many candidates to return at most.

    Returns:
        List[ImageSearchResult]: The candidates; the first is the primary pick.
    """
    results = search.search(
        f"{spot_name} {constants.IMAGE_SEARCH_QUERY_SUFFIX}",
        constants.IMAGE_SEARCH_RESULT_COUNT,
    )

    unique_results: List[ImageSearchResult] = []
    seen_urls = set()
    for result in results:
        if result.url == reported_image_url or result.url in seen_urls:
            continue
        seen_urls.add(result.url)
        unique_results.append(result)

    candidates: List[ImageSearchResult] = []
    for result in unique_results:
        if len(candidates) >= max_candidates:
            break
        if is_image_appropriate(result.url, spot_name, gemini):
            candidates.append(result)

    accepted_urls = {candidate.url for candidate in candidates}
    for result in unique_results:
        if len(candidates) >= max_candidates:
            break
        if result.url not in accepted_urls:
            candidates.append(result)
            accepted_urls.add(result.url)
    return candidates


def _flag_spots(spots: List[dict], gemini: GeminiClient, max_workers: int) -> List[dict]:
    outcomes = run_bounded(lambda spot: should_update_image(spot, gemini), spots, max_workers)
    return [outcome.item for outcome in outcomes if outcome.ok and outcome.value]


def count_update_candidates(
    store: DocumentStore,
    gemini: GeminiClient,
    regions: List[RegionInfo],
    data_dir: str,
    max_workers: int = 8,
) -> UpdateCountReport:
    """
    Counts, per region, the spots whose image should be replaced.

    Only regions with at least one flagged spot appear in the counts. Regions
    whose document cannot be read are logged and listed as skipped.
    """

    def _count(region: RegionInfo) -> int:
        document = store.fetch(region_path(data_dir, region.id))
        spots = document.content.get("spots", [])
        return len(_flag_spots(spots, gemini, max_workers))

    report = UpdateCountReport()
    for outcome in run_bounded(_count, regions, REGION_WORKERS):
        if not outcome.ok:
            logger.error("Counting image updates for %s failed: %s", outcome.item.name, outcome.error)
            report.skipped_regions.append(outcome.item.id)
        elif outcome.value > 0:
            report.counts[outcome.item.id] = outcome.value
    return report


def select_regions(regions: List[RegionInfo], region_id: Optional[str]) -> List[RegionInfo]:
    """Returns every region for None or "all", otherwise the one named."""
    if not region_id or region_id == "all":
        return list(regions)
    selected = [region for region in regions if region.id == region_id]
    if not selected:
        raise RegionNotFoundError(f"Region {region_id} was not found.")
    return selected


def find_image_updates(
    store: DocumentStore,
    search: GoogleImageSearchClient,
    gemini: GeminiClient,
    regions: List[RegionInfo],
    data_dir: str,
    region_id: Optional[str] = None,
    max_workers: int = 8,
) -> ImageUpdateProposals:
    """
    Proposes a replacement image for every spot that needs one.

    Args:
        store (DocumentStore): The region document store.
        search (GoogleImageSearchClient): The image search client.
        gemini (GeminiClient): The model behind both classifiers.
        regions (List[RegionInfo]): Known regions.
        data_dir (str): Directory of the region documents.
        region_id (Optional[str]): A single region id, or None / "all".
        max_workers (int): Concurrent model and search calls per region.

    Returns:
        ImageUpdateProposals: The proposals plus the regions and spots that
            were skipped because of errors.

    Raises:
        RegionNotFoundError: `region_id` names no known region.
    """
    selected = select_regions(regions, region_id)

    def _propose(spot: dict, region: RegionInfo) -> Optional[ProposedImageUpdate]:
        candidates = fetch_image_candidates(
            spot.get("name", ""), search, gemini, reported_image_url=spot.get("image") or None
        )
        if not candidates:
            return None
        primary = candidates[0]
        return ProposedImageUpdate(
            spot_name=spot.get("name", ""),
            prefecture=region.name,
            area=spot.get("area"),
            old_image_url=spot.get("image"),
            new_image_url=primary.url,
            new_image_source=primary.display_domain,
            new_image_source_url=primary.page_url,
        )

    def _process_region(region: RegionInfo) -> Tuple[List[ProposedImageUpdate], List[str]]:
        document = store.fetch(region_path(data_dir, region.id))
        flagged = _flag_spots(document.content.get("spots", []), gemini, max_workers)
        proposals, skipped = [], []
        for outcome in run_bounded(lambda spot: _propose(spot, region), flagged, max_workers):
            spot_name = outcome.item.get("name", "")
            if not outcome.ok:
                logger.error("Fetching an image for %s failed: %s", spot_name, outcome.error)
                skipped.append(spot_name)
            elif outcome.value:
                proposals.append(outcome.value)
        return proposals, skipped

    result = ImageUpdateProposals()
    for outcome in run_bounded(_process_region, selected, REGION_WORKERS):
        if not outcome.ok:
            logger.error("Finding image updates for %s failed: %s", outcome.item.name, outcome.error)
            result.skipped_regions.append(outcome.item.id)
            continue
        proposals, skipped = outcome.value
        result.updates.extend(proposals)
        result.skipped_spots.extend(skipped)
    return result


def confirm_image_updates(
    store: DocumentStore,
    regions: List[RegionInfo],
    updates: List[ProposedImageUpdate],
    data_dir: str,
    max_workers: int = 8,
) -> ConfirmImageUpdatesResult:
    """
    Writes confirmed image updates back to the region documents.

    Updates are grouped by document so that each document is fetched, changed
    and written exactly once. A failed write drops only that document's
    updates; documents already written stay written.
    """
    result = ConfirmImageUpdatesResult()
    region_ids = {region.name: region.id for region in regions}
    updates_by_path: Dict[str, List[ProposedImageUpdate]] = {}
    for update in updates:
        region_id = region_ids.get(update.prefecture)
        if not region_id:
            if update.prefecture not in result.unresolved_regions:
                logger.warning("No region document for %s", update.prefecture)
                result.unresolved_regions.append(update.prefecture)
            continue
        updates_by_path.setdefault(region_path(data_dir, region_id), []).append(update)

    def _apply(path: str) -> Tuple[bool, List[str]]:
        document = store.fetch(path)
        applied, missing = 0, []
        for update in updates_by_path[path]:
            try:
                index = spot_edits.find_spot_index(document.content, update.spot_name)
            except spot_edits.SpotNotFoundError:
                missing.append(update.spot_name)
                continue
            spot_edits.set_spot_image(
                document.content["spots"][index],
                update.new_image_url,
                update.new_image_source or constants.IMAGE_SOURCE_ADMIN_BATCH_UPDATE,
                update.new_image_source_url,
            )
            applied += 1
        if not applied:
            return False, missing
        store.write(
            path,
            document.content,
            document.sha,
            f"fix(images): Batch update images for {applied} spots in {path}",
        )
        return True, missing

    for outcome in run_bounded(_apply, list(updates_by_path), max_workers):
        if not outcome.ok:
            logger.error("Updating images in %s failed: %s", outcome.item, outcome.error)
            result.failed_documents.append(outcome.item)
            continue
        written, missing = outcome.value
        if written:
            result.updated_documents += 1
        result.missing_spots.extend(missing)
    return result
