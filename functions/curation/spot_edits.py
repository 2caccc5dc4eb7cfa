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

"""In-memory mutations of a region document.

A region document looks like:

    {
      "name": "Tokyo",
      "spots": [{"name": ..., "area": ..., "image": ..., ...}],
      "areaPositions": [{"name": "Shibuya", "top": "40%", "left": "35%"}],
      "transitData": {"Shibuya": {"Shinjuku": "20min"}}
    }

Spots are identified by name within their document. Every spot's area must
be listed in "areaPositions".
"""

from typing import List, Optional
from urllib.parse import quote

from shared import constants
from shared.types import AreaPosition, ImageSearchResult, SpotSubmission

EDITABLE_REQUEST_FIELDS = ("title", "image", "tags")


class SpotNotFoundError(LookupError):
    pass


class SpotEditError(ValueError):
    pass


def find_spot_index(document: dict, spot_name: str) -> int:
    for index, spot in enumerate(document.get("spots", [])):
        if spot.get("name") == spot_name:
            return index
    raise SpotNotFoundError(f'Spot "{spot_name}" was not found.')


def remove_spot(document: dict, spot_name: str) -> dict:
    index = find_spot_index(document, spot_name)
    return document["spots"].pop(index)


def set_spot_image(
    spot: dict, image_url: str, source: str, source_url: Optional[str] = None
) -> None:
    spot["image"] = image_url
    spot["imageSource"] = source
    spot["imageSourceUrl"] = source_url or image_url


def area_names(document: dict) -> List[str]:
    return [area.get("name") for area in document.get("areaPositions", [])]


def _check_area_known(document: dict, area: Optional[str]) -> None:
    # Documents without an area list predate the map and are not checked.
    if "areaPositions" not in document:
        return
    if area not in area_names(document):
        raise SpotEditError(f'Area "{area}" is not registered in {document.get("name")}.')


def apply_requested_edit(document: dict, spot_name: str, updates: dict) -> dict:
    """
    Applies a user-requested edit: a new title, image or tag list.

    Returns:
        dict: The updated spot.
    """
    spot = document["spots"][find_spot_index(document, spot_name)]
    new_title = updates.get("title")
    if new_title and new_title != spot_name and _has_spot(document, new_title):
        raise SpotEditError(f'Spot "{new_title}" already exists.')
    if new_title:
        spot["name"] = new_title
    if updates.get("image"):
        set_spot_image(spot, updates["image"], constants.IMAGE_SOURCE_ADMIN_UPDATE)
    if updates.get("tags"):
        spot["tags"] = list(updates["tags"])
    return spot


def merge_spot_fields(document: dict, spot_name: str, update_data: dict) -> dict:
    """Overwrites the given fields of a spot, keeping the rest."""
    index = find_spot_index(document, spot_name)
    if "area" in update_data:
        _check_area_known(document, update_data["area"])
    new_name = update_data.get("name")
    if new_name and new_name != spot_name and _has_spot(document, new_name):
        raise SpotEditError(f'Spot "{new_name}" already exists.')
    document["spots"][index] = {**document["spots"][index], **update_data}
    return document["spots"][index]


def add_area(
    document: dict,
    area_name: str,
    position: Optional[AreaPosition] = None,
    transit_data: Optional[dict] = None,
) -> None:
    """
    Registers a new area and its travel times.

    Travel times are stored in both directions, so supplying only the times
    from the new area to existing ones is enough.
    """
    if area_name not in area_names(document):
        top = position.top if position else constants.DEFAULT_AREA_POSITION["top"]
        left = position.left if position else constants.DEFAULT_AREA_POSITION["left"]
        document.setdefault("areaPositions", []).append(
            {"name": area_name, "top": top, "left": left}
        )

    if not transit_data:
        return
    transit = document.get("transitData") or {}
    document["transitData"] = transit
    transit.setdefault(area_name, {}).update(transit_data)
    for existing_area, travel_time in transit_data.items():
        transit.setdefault(existing_area, {})[area_name] = travel_time


def placeholder_image_url(spot_name: str) -> str:
    return constants.PLACEHOLDER_IMAGE_URL.format(text=quote(spot_name, safe=""))


def build_new_spot(
    submission: SpotSubmission, image: Optional[ImageSearchResult] = None
) -> dict:
    """Builds the region-document entry for an approved submission."""
    spot = {
        "prefecture": submission.prefecture,
        "name": submission.name,
        "area": submission.area,
        "category": submission.category,
        "subCategory": submission.sub_category,
        "description": submission.description,
        "website": submission.website,
        "gmaps": submission.gmaps,
        "stayTime": submission.stay_time,
        "tags": list(submission.tags),
    }
    if image:
        set_spot_image(spot, image.url, image.display_domain or "", image.page_url)
    else:
        set_spot_image(
            spot,
            placeholder_image_url(submission.name),
            constants.IMAGE_SOURCE_USER_SUGGESTION,
            submission.website,
        )
    return spot


def add_spot(document: dict, spot: dict) -> None:
    if _has_spot(document, spot["name"]):
        raise SpotEditError(f'Spot "{spot["name"]}" already exists.')
    _check_area_known(document, spot.get("area"))
    document.setdefault("spots", []).append(spot)


def _has_spot(document: dict, spot_name: str) -> bool:
    return any(spot.get("name") == spot_name for spot in document.get("spots", []))
