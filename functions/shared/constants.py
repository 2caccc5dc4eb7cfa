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

# Image candidate selection
MAX_IMAGE_CANDIDATES = 3
IMAGE_SEARCH_RESULT_COUNT = 10
IMAGE_SEARCH_QUERY_SUFFIX = "official"

# Image provenance labels written into region documents.
IMAGE_SOURCE_ADMIN_UPDATE = "Admin update"
IMAGE_SOURCE_ADMIN_BATCH_UPDATE = "Admin batch update"
IMAGE_SOURCE_USER_SUGGESTION = "User suggestion"

PLACEHOLDER_IMAGE_URL = "https://placehold.co/600x400/E57373/FFF?text={text}"
GOOGLE_MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query={query}"
DEFAULT_AREA_POSITION = {"top": "50%", "left": "50%"}

# Edit requests
REQUEST_STATUS_PENDING = "pending"
# Claimed by an admin while the region document is being updated.
REQUEST_STATUS_PROCESSING = "processing"
REQUEST_STATUS_APPROVED = "approved"
REQUEST_STATUS_REJECTED = "rejected"
EDIT_REQUEST_TYPES = ("edit", "delete")

# Input limits
MAX_SPOT_NAME_LENGTH = 200
MAX_URL_LENGTH = 2048
MAX_REQUEST_DETAILS_LENGTH = 2000
MAX_BATCH_UPDATES = 500

# Function timeouts (seconds)
DEFAULT_FUNCTION_TIMEOUT = 60
BATCH_FUNCTION_TIMEOUT = 540
CONFIRM_FUNCTION_TIMEOUT = 300
