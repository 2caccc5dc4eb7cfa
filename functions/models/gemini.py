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

import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Type, TypeVar

from google import genai
from google.genai import types
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
QUERY_RESPONSE_MAX_OUTPUT_TOKENS = 4000

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)

T = TypeVar("T", bound=BaseModel)


class GeminiInvalidResponseException(Exception):
    pass


class GeminiMalformedResponseException(GeminiInvalidResponseException):
    """The model answered, but not with JSON of the requested shape."""


def strip_code_fences(text: str) -> str:
    """Removes Markdown code-fence markers and surrounding whitespace."""
    return _CODE_FENCE.sub("", text).strip()


@dataclass
class GeminiClient:
    """Text generation through the Gemini API."""

    api_key: str | None
    model: str = DEFAULT_MODEL
    temperature: float = 0

    def predict(self, prompt: str) -> str:
        """
        Sends `prompt` to the model and returns the first candidate's text.

        Raises:
            GeminiInvalidResponseException: The response carried no text.
        """
        client = genai.Client(api_key=self.api_key)
        start_time = time.time()
        truncated_prompt = (prompt[:200] + "...") if len(prompt) > 200 else prompt
        logger.debug("Calling Gemini, prompt: '%s'", truncated_prompt)

        response = client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=self.temperature,
                max_output_tokens=QUERY_RESPONSE_MAX_OUTPUT_TOKENS,
            ),
        )
        logger.debug("Gemini call took: %.2fs", time.time() - start_time)
        if not response.text:
            raise GeminiInvalidResponseException("Gemini returned no candidate text.")
        return response.text

    def predict_json(self, prompt: str, response_schema: Type[T]) -> T:
        """
        Calls the model and validates its JSON answer against `response_schema`.

        Code fences around the JSON are tolerated. Anything that does not parse
        or does not match the schema is rejected.

        Raises:
            GeminiMalformedResponseException: The answer is not valid JSON of
                the requested shape.
        """
        text = strip_code_fences(self.predict(prompt))
        try:
            return response_schema.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error("Malformed Gemini JSON for %s: %s", response_schema.__name__, e)
            raise GeminiMalformedResponseException(
                f"Response does not match {response_schema.__name__}"
            ) from e

    def predict_yes_no(self, prompt: str) -> str:
        """Returns the model's one-word answer, lower-cased and stripped."""
        return self.predict(prompt).strip().strip(".!\"'").strip().lower()
