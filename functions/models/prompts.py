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

"""Prompt templates for the spot curation functions."""

ANALYZE_SPOT_SUGGESTION_PROMPT = """You are an expert editor for a travel information site. Using the information below, draft the spot entry to add to the VLOG travel planner as JSON.

# Context
- Existing area map information: {area_positions}
- Currently supported regions: {supported_regions}

# Input
- Spot name: {spot_name}
- Reference URL: {spot_url}

# Rules
1. Analyze the reference URL and fill in every field below.
2. Region and area: from the spot's location decide the most suitable "prefecture" and "area". "prefecture" must be one of the currently supported regions.
3. Area check:
   * If the chosen "area" already exists in that region's "areaPositions" in the context, set "isNewArea" to false and set "newAreaPosition" and "newTransitData" to null.
   * If it does not exist, set "isNewArea" to true, and always compute the new area's map position ("top" and "left" as percentage strings) and its "transitData" (travel times) to the existing areas, taking their geography into account.
4. Name check: set "isNameConsistent" to true if the reference URL is about the spot, false if it is unrelated.
5. Tags and classification: "subCategory" and "tags" must be chosen from the available tag list. Do not use words that are not on the list.
6. Recommendation: from the point of view of the target users (vocational students and VLOG creators), decide whether the spot should be added ("recommendation": "yes" or "no") and explain why in "reasoning".

# Available tags
{standard_tags}

# Output format (output JSON only)
{{
  "prefecture": "(region name)",
  "name": "{spot_name}",
  "area": "(area name)",
  "isNewArea": false,
  "newAreaPosition": null,
  "newTransitData": null,
  "category": "(sightseeing or food)",
  "subCategory": "(specific classification)",
  "description": "(introduction text)",
  "website": "{spot_url}",
  "gmaps": "{gmaps_url}",
  "stayTime": "(typical stay, e.g. about 60 min)",
  "tags": ["(tag 1)", "(tag 2)"],
  "isNameConsistent": true,
  "recommendation": "(yes or no)",
  "reasoning": "(reason for the decision)"
}}"""

REANALYZE_SPOT_LOCATION_PROMPT = """You are a geography expert. Using the information below, identify the correct region and area of the spot. Treat the Google Maps URL as the most reliable source.

# Input
- Spot name: {spot_name}
- Official site URL: {spot_url}
- Google Maps URL: {gmaps_url}

# Context: existing area map information
{area_positions}

# Rules
1. Region and area: analyze the Google Maps URL first and decide the most suitable "prefecture" and "area".
2. Area check:
   * If the chosen "area" already exists in that region's "areaPositions" in the context, set "isNewArea" to false and set "newAreaPosition" and "newTransitData" to null.
   * If it does not exist, set "isNewArea" to true and always compute the new area's map position ("top" and "left") and its "transitData" (travel times) to the existing areas.

# Output format (output JSON only)
{{
  "prefecture": "(region name)",
  "area": "(area name)",
  "isNewArea": false,
  "newAreaPosition": null,
  "newTransitData": null
}}"""

IMAGE_APPROPRIATE_PROMPT = """Is the image at the URL below appropriate as a representative photo of the scenery or exterior of the tourist spot "{spot_name}"? Scenery, building exteriors and photos of food are "yes". Ticket faces, price lists, maps, close-ups of unrelated people and logo-only images are "no". Answer only "yes" or "no".
URL: {image_url}"""

SHOULD_UPDATE_IMAGE_PROMPT = """You evaluate image quality. Look at the spot information below and decide whether the spot's image (spot.image) should be replaced with a new one.

# Criteria
- The image is clearly a placeholder (for example the URL contains "placehold.co" or "dummyimage.com", or the image says "No Image").
- The image resolution is extremely low, or the image quality is very poor.
- The image has nothing to do with the spot.
- In every other case the image does not need to be replaced.

# Spot information
{spot_json}

# Answer
Answer only "yes" if it should be replaced, or "no" if it should not."""

REGENERATE_DESCRIPTION_PROMPT = """You are a professional travel writer. Based on the spot below, write an introduction of about 150 characters that is attractive, concrete and easy to understand for young people, especially vocational students who shoot VLOGs.

# Spot name
{spot_name}

# Reference URL
{spot_url}"""
