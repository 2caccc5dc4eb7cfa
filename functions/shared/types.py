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

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class RegionInfo:
    """A region document known to the data store: file id and display name."""

    id: str
    name: str


@dataclass
class StoredDocument:
    """A region document together with the revision token it was read at."""

    content: dict
    sha: str


@dataclass
class ImageSearchResult:
    """A single image search hit, in the order returned by the search API."""

    url: str
    page_url: Optional[str] = None
    display_domain: Optional[str] = None


@dataclass
class ProposedImageUpdate:
    """A replacement image proposed for one spot, pending admin confirmation."""

    spot_name: str
    prefecture: str
    new_image_url: str
    area: Optional[str] = None
    old_image_url: Optional[str] = None
    new_image_source: Optional[str] = None
    new_image_source_url: Optional[str] = None


@dataclass
class UpdateCountReport:
    counts: Dict[str, int] = field(default_factory=dict)
    skipped_regions: List[str] = field(default_factory=list)


@dataclass
class ImageUpdateProposals:
    updates: List[ProposedImageUpdate] = field(default_factory=list)
    skipped_regions: List[str] = field(default_factory=list)
    skipped_spots: List[str] = field(default_factory=list)


@dataclass
class ConfirmImageUpdatesResult:
    updated_documents: int = 0
    failed_documents: List[str] = field(default_factory=list)
    unresolved_regions: List[str] = field(default_factory=list)
    missing_spots: List[str] = field(default_factory=list)


@dataclass
class AreaPosition:
    top: str
    left: str


@dataclass
class SpotSubmission:
    """A user-proposed spot, as reviewed by an admin before approval."""

    prefecture: str
    name: str
    area: str
    category: Optional[str] = None
    sub_category: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    gmaps: Optional[str] = None
    stay_time: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    is_new_area: bool = False
    new_area_position: Optional[AreaPosition] = None
    new_transit_data: Optional[Dict[str, str]] = None
