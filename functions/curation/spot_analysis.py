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

"""AI drafting of spot entries from a name and a reference URL."""

import json
from typing import Dict, Iterable, List, Literal, Optional, Set
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from models import prompts
from models.gemini import GeminiClient
from shared import constants

# Characters encodeURIComponent leaves alone; browsers build Maps links this way.
_URI_COMPONENT_SAFE = "-_.!~*'()"


# These are Pydantic BaseModels used to validate structured output from Gemini
class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AreaPositionSchema(_CamelModel):
    top: str
    left: str

    @field_validator("top", "left", mode="before")
    @classmethod
    def _percent_string(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{value}%"
        return value


class AreaAnalysis(_CamelModel):
    prefecture: str
    area: str
    is_new_area: bool
    new_area_position: Optional[AreaPositionSchema] = None
    new_transit_data: Optional[Dict[str, str]] = None


class SpotSuggestion(AreaAnalysis):
    name: str
    category: str
    sub_category: str
    description: str
    website: str
    gmaps: str
    stay_time: str
    tags: List[str]
    is_name_consistent: bool
    recommendation: Literal["yes", "no"]
    reasoning: str

    @field_validator("recommendation", mode="before")
    @classmethod
    def _lower(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


def google_maps_search_url(spot_name: str) -> str:
    return constants.GOOGLE_MAPS_SEARCH_URL.format(
        query=quote(spot_name, safe=_URI_COMPONENT_SAFE)
    )


def _known_areas(area_positions, prefecture: str) -> Optional[Set[str]]:
    """
    Area names the client already shows for `prefecture`, or None when the
    context says nothing about that region.
    """
    if not isinstance(area_positions, dict) or prefecture not in area_positions:
        return None
    areas = area_positions[prefecture]
    if isinstance(areas, dict):
        return set(areas)
    names = set()
    for area in areas or []:
        if isinstance(area, dict):
            names.add(area.get("name"))
        else:
            names.add(area)
    return names


def _reconcile_new_area(analysis: AreaAnalysis, area_positions) -> None:
    known = _known_areas(area_positions, analysis.prefecture)
    if known is None:
        return
    if analysis.area in known:
        analysis.is_new_area = False
        analysis.new_area_position = None
        analysis.new_transit_data = None
    else:
        analysis.is_new_area = True


def _dedupe(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def analyze_spot_suggestion(
    spot_name: str,
    spot_url: str,
    area_positions,
    standard_tags: List[str],
    supported_regions: List[str],
    gemini: GeminiClient,
) -> SpotSuggestion:
    """
    Drafts a full spot entry for a user suggestion.

    The model fills in region, area, category, description and tags. Tags and
    the sub-category are then restricted to `standard_tags`, the name and
    website are pinned to the input, and the Maps link is built locally.

    Raises:
        GeminiMalformedResponseException: The model's JSON was unusable.
    """
    gmaps_url = google_maps_search_url(spot_name)
    prompt = prompts.ANALYZE_SPOT_SUGGESTION_PROMPT.format(
        area_positions=json.dumps(area_positions, ensure_ascii=False, indent=2),
        supported_regions=", ".join(supported_regions),
        spot_name=spot_name,
        spot_url=spot_url,
        standard_tags=", ".join(standard_tags),
        gmaps_url=gmaps_url,
    )
    suggestion = gemini.predict_json(prompt, SpotSuggestion)

    allowed = set(standard_tags)
    suggestion.tags = _dedupe(tag for tag in suggestion.tags if tag in allowed)
    if suggestion.sub_category not in allowed:
        suggestion.sub_category = ""
    suggestion.name = spot_name
    suggestion.website = spot_url
    suggestion.gmaps = gmaps_url
    _reconcile_new_area(suggestion, area_positions)
    return suggestion


def re_analyze_spot_location(
    spot_name: str,
    spot_url: str,
    gmaps_url: str,
    area_positions,
    gemini: GeminiClient,
) -> AreaAnalysis:
    """Re-derives the region and area of a spot, trusting its Maps link first."""
    prompt = prompts.REANALYZE_SPOT_LOCATION_PROMPT.format(
        spot_name=spot_name,
        spot_url=spot_url,
        gmaps_url=gmaps_url,
        area_positions=json.dumps(area_positions, ensure_ascii=False, indent=2),
    )
    analysis = gemini.predict_json(prompt, AreaAnalysis)
    _reconcile_new_area(analysis, area_positions)
    return analysis


def regenerate_description(spot_name: str, spot_url: str, gemini: GeminiClient) -> str:
    prompt = prompts.REGENERATE_DESCRIPTION_PROMPT.format(
        spot_name=spot_name, spot_url=spot_url
    )
    return gemini.predict(prompt).strip()
