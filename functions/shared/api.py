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

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class EditRequest:
    """Schema for user-submitted edit/delete requests stored in Firestore."""

    spot_name: str
    prefecture: str
    request_type: str
    details: Any
    status: str
    submitted_by: str
    submitted_at: (
        Any  # Firestore timestamp (created with firestore_v1.SERVER_TIMESTAMP)
    )


@dataclass
class ImageReport:
    """Schema for a report that a spot's image is wrong."""

    spot_name: str
    prefecture: str
    reported_image_url: str
    reported_by: str
    created_at: Any  # Firestore timestamp created with firestore_v1.SERVER_TIMESTAMP
    candidate_image_url: Optional[str] = None
    comment: Optional[str] = None


@dataclass
class MailboxMessage:
    """A notification in a user's inbox (users/{uid}/mailbox)."""

    title: str
    message: str
    created_at: Any  # Firestore timestamp created with firestore_v1.SERVER_TIMESTAMP
    read: bool = False


@dataclass
class Announcement:
    """A public change-history entry; append-only."""

    title: str
    message: str
    created_at: Any  # Firestore timestamp created with firestore_v1.SERVER_TIMESTAMP
