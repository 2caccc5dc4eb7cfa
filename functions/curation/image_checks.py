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

"""Yes/no image classifiers backed by the text model.

Both classifiers gate advisory heuristics, so a failed model call maps to a
safe default instead of an error: an image of unknown relevance is rejected,
and a spot of unknown image quality is left alone.
"""

import json
import logging

from models import prompts
from models.gemini import GeminiClient

logger = logging.getLogger(__name__)


def is_image_appropriate(image_url: str, spot_name: str, gemini: GeminiClient) -> bool:
    """Returns True when the model judges the image representative of the spot."""
    prompt = prompts.IMAGE_APPROPRIATE_PROMPT.format(
        spot_name=spot_name, image_url=image_url
    )
    try:
        answer = gemini.predict_yes_no(prompt)
    except Exception as e:
        logger.error("Image relevance check failed for %s: %s", image_url, e)
        return False
    return answer.startswith("yes")


def should_update_image(spot: dict, gemini: GeminiClient) -> bool:
    """
    Returns True when the spot's image should be replaced.

    A spot without an image always needs one and never reaches the model.
    Otherwise only an exact "yes" from the model counts.
    """
    image = spot.get("image") or ""
    if not image.strip():
        return True

    prompt = prompts.SHOULD_UPDATE_IMAGE_PROMPT.format(
        spot_json=json.dumps(spot, ensure_ascii=False, indent=2)
    )
    try:
        answer = gemini.predict_yes_no(prompt)
    except Exception as e:
        logger.error("Image update check failed for %s: %s", spot.get("name"), e)
        return False
    return answer == "yes"
