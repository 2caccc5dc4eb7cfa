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

# Cloud functions for the VLOG travel planner - spot curation and image upkeep.
#
# This file containing Python cloud functions must be named main.py.
# See https://cloud.google.com/run/docs/write-functions#python for more info.

# Standard library imports
from dataclasses import asdict, fields

# Third-party library imports
from dacite import Config, from_dict
from dacite.exceptions import DaciteError
from firebase_admin import firestore, initialize_app
from firebase_functions import https_fn, logger, options
from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.genai import errors as genai_errors

# Local application imports
from curation import image_updates, spot_analysis, spot_edits
from curation.spot_edits import SpotEditError, SpotNotFoundError
from data_store import regions as region_directory
from data_store.document_store import DocumentConflictError, DocumentNotFoundError
from data_store.regions import RegionNotFoundError
from models.gemini import GeminiMalformedResponseException
from shared import constants
from shared.api import Announcement, EditRequest, ImageReport, MailboxMessage
from shared.config import get_settings
from shared.dependencies import (
    get_document_store,
    get_gemini_client,
    get_image_search_client,
)
from shared.firebase_constants import (
    ANNOUNCEMENTS_COLLECTION,
    EDIT_REQUESTS_COLLECTION,
    IMAGE_REPORTS_COLLECTION,
    MAILBOX_COLLECTION,
    SPOT_SUBMISSIONS_COLLECTION,
    USERS_COLLECTION,
)
from shared.json_utils import convert_keys
from shared.types import ProposedImageUpdate, SpotSubmission

options.set_global_options(
    region="asia-northeast1", timeout_sec=constants.DEFAULT_FUNCTION_TIMEOUT
)

initialize_app()


# ------------------------------------------------------------------------------
# Request helpers
# ------------------------------------------------------------------------------
def _require_auth(req: https_fn.CallableRequest) -> str:
    """Returns the caller's uid, rejecting anonymous calls."""
    if not req.auth:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.UNAUTHENTICATED,
            "Authentication is required for this operation.",
        )
    return req.auth.uid


def _require_admin(req: https_fn.CallableRequest) -> str:
    """Returns the caller's uid, rejecting callers without the admin claim."""
    uid = _require_auth(req)
    if not (req.auth.token or {}).get("admin"):
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.PERMISSION_DENIED,
            "Administrator privileges are required for this operation.",
        )
    return uid


def _require_fields(data: dict, *names: str) -> None:
    missing = [name for name in names if not data.get(name)]
    if missing:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            f"Missing required fields: {', '.join(missing)}.",
        )


def _check_length(value: str | None, limit: int, name: str) -> None:
    if value and len(value) > limit:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            f"{name} exceeds max length.",
        )


def _to_https_error(error: Exception, action: str) -> https_fn.HttpsError:
    """
    Translates a failure into the error returned to the caller.

    Details of internal failures are logged here and never sent back, since
    they can carry upstream URLs or credentials.
    """
    code = https_fn.FunctionsErrorCode
    if isinstance(error, https_fn.HttpsError):
        return error
    if isinstance(error, SpotNotFoundError):
        return https_fn.HttpsError(code.NOT_FOUND, str(error))
    if isinstance(error, RegionNotFoundError):
        return https_fn.HttpsError(code.NOT_FOUND, str(error))
    if isinstance(error, DocumentNotFoundError):
        logger.error(f"Region document missing while {action}: {error}")
        return https_fn.HttpsError(code.NOT_FOUND, "Region data was not found.")
    if isinstance(error, DocumentConflictError):
        logger.warn(f"Conflicting write while {action}: {error}")
        return https_fn.HttpsError(
            code.ABORTED,
            "Region data was changed by another update. Reload and try again.",
        )
    if isinstance(error, SpotEditError):
        return https_fn.HttpsError(code.INVALID_ARGUMENT, str(error))
    if isinstance(error, genai_errors.ClientError) and error.code == 429:
        logger.error(f"Gemini quota exceeded while {action}: {error}")
        return https_fn.HttpsError(code.RESOURCE_EXHAUSTED, "Model quota exceeded.")
    if isinstance(error, GeminiMalformedResponseException):
        logger.error(f"Malformed model response while {action}: {error}")
        return https_fn.HttpsError(code.INTERNAL, "The AI response was invalid.")

    logger.error(f"Error while {action}: {error!r}")
    return https_fn.HttpsError(code.INTERNAL, f"Server error while {action}.")


def _load_regions():
    settings = get_settings()
    return region_directory.list_regions(
        get_document_store(),
        settings.data_dir,
        exclude=settings.region_index_exclude,
        max_workers=settings.max_concurrency,
    )


def _region_document_path(region_name: str) -> str:
    """Maps a region display name to its document path in the data store."""
    try:
        region_id = region_directory.resolve_region_id(_load_regions(), region_name)
    except RegionNotFoundError:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            f"Unsupported region: {region_name}",
        )
    return region_directory.region_path(get_settings().data_dir, region_id)


def _to_firestore(record) -> dict:
    """
    Maps a record dataclass to a camelCase Firestore document.

    Values are not copied, so Firestore sentinels such as SERVER_TIMESTAMP
    keep their identity.
    """
    return convert_keys(
        {field.name: getattr(record, field.name) for field in fields(record)},
        "snake_to_camel",
        recursive=False,
    )


def _notify_user(db, batch, user_id: str | None, title: str, message: str) -> None:
    if not user_id:
        return
    mailbox_ref = (
        db.collection(USERS_COLLECTION)
        .document(user_id)
        .collection(MAILBOX_COLLECTION)
        .document()
    )
    batch.set(
        mailbox_ref,
        _to_firestore(MailboxMessage(title=title, message=message, created_at=SERVER_TIMESTAMP)),
    )


def _announce(db, batch, title: str, message: str) -> None:
    announcement_ref = db.collection(ANNOUNCEMENTS_COLLECTION).document()
    batch.set(
        announcement_ref,
        _to_firestore(Announcement(title=title, message=message, created_at=SERVER_TIMESTAMP)),
    )


# ------------------------------------------------------------------------------
# Spot edit/delete requests
# ------------------------------------------------------------------------------
@https_fn.on_call()
def submit_edit_request(req: https_fn.CallableRequest) -> dict:
    """
    Stores a user's request to edit or delete a spot for admin review.

    Args:
        req (https_fn.CallableRequest): spotName, prefecture, requestType
            ("edit" or "delete") and details.

    Returns:
        A dictionary with the submission status.
    """
    uid = _require_auth(req)
    data = req.data or {}
    _require_fields(data, "spotName", "prefecture", "requestType", "details")
    if data["requestType"] not in constants.EDIT_REQUEST_TYPES:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            "requestType must be 'edit' or 'delete'.",
        )
    _check_length(data["spotName"], constants.MAX_SPOT_NAME_LENGTH, "spotName")
    if isinstance(data["details"], str):
        _check_length(data["details"], constants.MAX_REQUEST_DETAILS_LENGTH, "details")

    edit_request = EditRequest(
        spot_name=data["spotName"],
        prefecture=data["prefecture"],
        request_type=data["requestType"],
        details=data["details"],
        status=constants.REQUEST_STATUS_PENDING,
        submitted_by=uid,
        submitted_at=SERVER_TIMESTAMP,
    )
    try:
        db = firestore.client()
        db.collection(EDIT_REQUESTS_COLLECTION).add(
            _to_firestore(edit_request)
        )
    except Exception as e:
        raise _to_https_error(e, "submitting the edit request") from e

    return {
        "success": True,
        "message": "Request submitted. Please wait for an administrator to review it.",
    }


def _claim_edit_request(db, request_ref, fields: dict) -> dict:
    """
    Moves a pending edit request out of pending inside a transaction.

    Only one caller can win the transition, so two admins acting on the same
    request never both resolve it.

    Returns:
        dict: The request as read inside the transaction.
    """
    transaction = db.transaction()

    @firestore.transactional
    def _claim_transaction(transaction, doc_ref):
        snapshot = doc_ref.get(transaction=transaction)
        if not snapshot.exists:
            raise https_fn.HttpsError(
                https_fn.FunctionsErrorCode.NOT_FOUND, "The request was not found."
            )
        request_data = snapshot.to_dict()
        if request_data.get("status") != constants.REQUEST_STATUS_PENDING:
            raise https_fn.HttpsError(
                https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
                "The request has already been resolved.",
            )
        transaction.update(doc_ref, fields)
        return request_data

    return _claim_transaction(transaction, request_ref)


@https_fn.on_call()
def handle_edit_request(req: https_fn.CallableRequest) -> dict:
    """
    Approves or rejects a pending edit/delete request.

    The request is first claimed in a transaction. Approval then applies the
    change to the region document, marks the request approved, notifies the
    submitter and posts a public announcement. When the target spot no longer
    exists the request is rejected automatically; any other failure puts the
    request back to pending.
    """
    _require_admin(req)
    data = req.data or {}
    _require_fields(data, "requestId", "action")
    action = data["action"]
    if action not in ("approve", "reject"):
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT, "Invalid action."
        )

    db = firestore.client()
    request_ref = db.collection(EDIT_REQUESTS_COLLECTION).document(data["requestId"])

    if action == "reject":
        request_data = _claim_edit_request(
            db,
            request_ref,
            {"status": constants.REQUEST_STATUS_REJECTED, "resolvedAt": SERVER_TIMESTAMP},
        )
        batch = db.batch()
        _notify_user(
            db,
            batch,
            request_data.get("submittedBy"),
            "Your edit/delete request was rejected",
            f'The change you requested for "{request_data.get("spotName")}" was rejected.',
        )
        batch.commit()
        return {"success": True, "message": "Request rejected."}

    request_data = _claim_edit_request(
        db, request_ref, {"status": constants.REQUEST_STATUS_PROCESSING}
    )
    spot_name = request_data.get("spotName")
    try:
        path = _region_document_path(request_data.get("prefecture"))
        store = get_document_store()
        document = store.fetch(path)
        if request_data.get("requestType") == "delete":
            spot_edits.remove_spot(document.content, spot_name)
            commit_message = f'feat: Remove spot "{spot_name}" based on user request'
            announcement = ("A spot was removed", f'"{spot_name}" was removed from the app.')
            notification = f'Your request to delete "{spot_name}" was approved. Thank you!'
        else:
            spot_edits.apply_requested_edit(
                document.content, spot_name, data.get("updates") or {}
            )
            commit_message = f'fix: Update spot "{spot_name}" based on user request'
            announcement = ("A spot was updated", f'The details of "{spot_name}" were updated.')
            notification = f'Your request to edit "{spot_name}" was approved. Thank you!'
        store.write(path, document.content, document.sha, commit_message)
    except SpotNotFoundError as e:
        request_ref.update(
            {
                "status": constants.REQUEST_STATUS_REJECTED,
                "reason": "Spot not found in data file.",
                "resolvedAt": SERVER_TIMESTAMP,
            }
        )
        raise _to_https_error(e, "approving the edit request") from e
    except Exception as e:
        request_ref.update({"status": constants.REQUEST_STATUS_PENDING})
        raise _to_https_error(e, "approving the edit request") from e

    batch = db.batch()
    batch.update(
        request_ref,
        {"status": constants.REQUEST_STATUS_APPROVED, "resolvedAt": SERVER_TIMESTAMP},
    )
    _notify_user(
        db, batch, request_data.get("submittedBy"), "Your request was approved", notification
    )
    _announce(db, batch, *announcement)
    batch.commit()
    return {"success": True, "message": "Request approved and data updated."}


@https_fn.on_call()
def direct_admin_spot_update(req: https_fn.CallableRequest) -> dict:
    """Lets an admin update or delete a spot directly."""
    uid = _require_admin(req)
    data = req.data or {}
    _require_fields(data, "prefecture", "spotName", "action")
    spot_name = data["spotName"]
    action = data["action"]
    update_data = data.get("updateData")

    if action == "update" and not isinstance(update_data, dict):
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT, "updateData is required."
        )
    if action not in ("update", "delete"):
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT, "Invalid action."
        )

    try:
        path = _region_document_path(data["prefecture"])
        store = get_document_store()
        document = store.fetch(path)
        if action == "delete":
            spot_edits.remove_spot(document.content, spot_name)
            commit_message = f'feat(admin): Remove spot "{spot_name}" by {uid}'
            title = "A spot was removed"
            message = f'An administrator removed "{spot_name}".'
        else:
            spot_edits.merge_spot_fields(document.content, spot_name, update_data)
            commit_message = f'fix(admin): Update spot "{spot_name}" by {uid}'
            title = "A spot was updated"
            message = f'An administrator updated the details of "{spot_name}".'
        store.write(path, document.content, document.sha, commit_message)

        db = firestore.client()
        db.collection(ANNOUNCEMENTS_COLLECTION).add(
            _to_firestore(Announcement(title=title, message=message, created_at=SERVER_TIMESTAMP))
        )
    except Exception as e:
        raise _to_https_error(e, "updating the spot") from e

    verb = "deleted" if action == "delete" else "updated"
    return {"success": True, "message": f'Spot "{spot_name}" {verb}.'}


# ------------------------------------------------------------------------------
# Regions and AI-assisted spot drafting
# ------------------------------------------------------------------------------
@https_fn.on_call()
def get_region_list(req: https_fn.CallableRequest) -> list:
    """Returns every supported region as {id, name}, sorted by id."""
    try:
        return [asdict(region) for region in _load_regions()]
    except Exception as e:
        raise _to_https_error(e, "listing regions") from e


@https_fn.on_call()
def analyze_spot_suggestion(req: https_fn.CallableRequest) -> dict:
    """
    Drafts a spot entry from a spot name and a reference URL.

    Args:
        req (https_fn.CallableRequest): spotName, spotUrl, and optionally
            areaPositions (region name -> areas shown on the map) and
            standardTags (the tags the draft may use).

    Returns:
        The drafted spot, in camelCase.
    """
    data = req.data or {}
    _require_fields(data, "spotName", "spotUrl")
    _check_length(data["spotName"], constants.MAX_SPOT_NAME_LENGTH, "spotName")
    _check_length(data["spotUrl"], constants.MAX_URL_LENGTH, "spotUrl")

    try:
        supported_regions = [region.name for region in _load_regions()]
        suggestion = spot_analysis.analyze_spot_suggestion(
            spot_name=data["spotName"],
            spot_url=data["spotUrl"],
            area_positions=data.get("areaPositions") or {},
            standard_tags=data.get("standardTags") or [],
            supported_regions=supported_regions,
            gemini=get_gemini_client(),
        )
    except Exception as e:
        raise _to_https_error(e, "analyzing the spot") from e
    return suggestion.model_dump(by_alias=True)


@https_fn.on_call()
def re_analyze_spot_suggestion(req: https_fn.CallableRequest) -> dict:
    """Re-derives a drafted spot's region and area from its Google Maps URL."""
    data = req.data or {}
    _require_fields(data, "gmapsUrl")
    _check_length(data["gmapsUrl"], constants.MAX_URL_LENGTH, "gmapsUrl")

    try:
        analysis = spot_analysis.re_analyze_spot_location(
            spot_name=data.get("originalName") or "",
            spot_url=data.get("originalUrl") or "",
            gmaps_url=data["gmapsUrl"],
            area_positions=data.get("areaPositions") or {},
            gemini=get_gemini_client(),
        )
    except Exception as e:
        raise _to_https_error(e, "re-analyzing the spot") from e
    return analysis.model_dump(by_alias=True)


@https_fn.on_call()
def regenerate_description(req: https_fn.CallableRequest) -> dict:
    data = req.data or {}
    _require_fields(data, "originalName", "originalUrl")

    try:
        description = spot_analysis.regenerate_description(
            data["originalName"], data["originalUrl"], get_gemini_client()
        )
    except Exception as e:
        raise _to_https_error(e, "regenerating the description") from e
    return {"description": description}


@https_fn.on_call()
def fetch_image_for_spot(req: https_fn.CallableRequest) -> dict:
    """
    Returns up to three candidate images for a spot.

    Args:
        req (https_fn.CallableRequest): spot ({name}) and optionally
            reportedImageUrl, an image that must not be proposed again.

    Returns:
        {"candidates": [{url, pageUrl, displayDomain}, ...]}
    """
    data = req.data or {}
    spot = data.get("spot") or {}
    if not isinstance(spot, dict) or not spot.get("name"):
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT, "Missing required fields: spot.name."
        )

    try:
        candidates = image_updates.fetch_image_candidates(
            spot["name"],
            get_image_search_client(),
            get_gemini_client(),
            reported_image_url=data.get("reportedImageUrl"),
        )
    except Exception as e:
        raise _to_https_error(e, "searching images") from e
    return {
        "candidates": [
            convert_keys(asdict(candidate), "snake_to_camel") for candidate in candidates
        ]
    }


# ------------------------------------------------------------------------------
# Submissions and image reports
# ------------------------------------------------------------------------------
@https_fn.on_call()
def approve_submission(req: https_fn.CallableRequest) -> dict:
    """
    Adds a user-suggested spot to its region document.

    A new area proposed with the spot is registered first when approveNewArea
    is not false, with travel times stored in both directions. The spot's image
    is the top image search candidate, or a placeholder when none is found.
    """
    _require_admin(req)
    data = req.data or {}
    _require_fields(data, "submissionId", "submissionData")
    submission_data = data["submissionData"]
    if not isinstance(submission_data, dict):
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT, "submissionData must be an object."
        )
    _require_fields(submission_data, "prefecture", "name", "area")
    try:
        submission = from_dict(
            data_class=SpotSubmission,
            data=convert_keys(submission_data, "camel_to_snake", recursive=False),
            config=Config(check_types=False),
        )
    except DaciteError as e:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT, f"Invalid submissionData: {e}"
        )
    approve_new_area = data.get("approveNewArea", True)

    try:
        path = _region_document_path(submission.prefecture)
        store = get_document_store()
        document = store.fetch(path)

        try:
            candidates = image_updates.fetch_image_candidates(
                submission.name, get_image_search_client(), get_gemini_client()
            )
        except Exception as e:
            logger.warn(f"Image search for new spot {submission.name} failed: {e}")
            candidates = []

        spot = spot_edits.build_new_spot(submission, candidates[0] if candidates else None)
        title = "A new spot was added!"
        message = f'"{submission.name}" ({submission.prefecture}) was added.'
        if submission.is_new_area and approve_new_area:
            spot_edits.add_area(
                document.content,
                submission.area,
                submission.new_area_position,
                submission.new_transit_data,
            )
            title = "A new area was added!"
            message = (
                f'The new area "{submission.area}" was added to {submission.prefecture} '
                f'and the spot "{submission.name}" was registered.'
            )
        spot_edits.add_spot(document.content, spot)

        store.write(
            path,
            document.content,
            document.sha,
            f'feat: Add new spot "{submission.name}" via VLOG Planner',
        )
    except Exception as e:
        raise _to_https_error(e, "approving the submission") from e

    db = firestore.client()
    batch = db.batch()
    batch.delete(db.collection(SPOT_SUBMISSIONS_COLLECTION).document(data["submissionId"]))
    _announce(db, batch, title, message)
    batch.commit()
    return {"success": True, "message": "Spot approved and region data updated."}


@https_fn.on_call()
def submit_image_report(req: https_fn.CallableRequest) -> dict:
    """Stores a report that a spot's image is wrong, with an optional replacement."""
    uid = _require_auth(req)
    data = req.data or {}
    _require_fields(data, "spotName", "prefecture", "reportedImageUrl")
    _check_length(data["reportedImageUrl"], constants.MAX_URL_LENGTH, "reportedImageUrl")
    _check_length(data.get("candidateImageUrl"), constants.MAX_URL_LENGTH, "candidateImageUrl")

    report = ImageReport(
        spot_name=data["spotName"],
        prefecture=data["prefecture"],
        reported_image_url=data["reportedImageUrl"],
        reported_by=uid,
        created_at=SERVER_TIMESTAMP,
        candidate_image_url=data.get("candidateImageUrl"),
        comment=data.get("comment"),
    )
    try:
        db = firestore.client()
        db.collection(IMAGE_REPORTS_COLLECTION).add(
            _to_firestore(report)
        )
    except Exception as e:
        raise _to_https_error(e, "submitting the image report") from e
    return {"success": True, "message": "Report submitted."}


@https_fn.on_call()
def resolve_image_report(req: https_fn.CallableRequest) -> dict:
    """Replaces a reported spot image and deletes the report."""
    _require_admin(req)
    data = req.data or {}
    _require_fields(data, "reportId", "spotName", "newImageUrl", "prefecture")
    spot_name = data["spotName"]

    try:
        path = _region_document_path(data["prefecture"])
        store = get_document_store()
        document = store.fetch(path)
        index = spot_edits.find_spot_index(document.content, spot_name)
        spot_edits.set_spot_image(
            document.content["spots"][index],
            data["newImageUrl"],
            constants.IMAGE_SOURCE_ADMIN_UPDATE,
        )
        store.write(
            path,
            document.content,
            document.sha,
            f'fix: Update image for "{spot_name}" based on report',
        )

        db = firestore.client()
        db.collection(IMAGE_REPORTS_COLLECTION).document(data["reportId"]).delete()
    except Exception as e:
        raise _to_https_error(e, "resolving the image report") from e
    return {"success": True, "message": "Image updated."}


# ------------------------------------------------------------------------------
# Batch image maintenance
# ------------------------------------------------------------------------------
@https_fn.on_call(timeout_sec=constants.BATCH_FUNCTION_TIMEOUT)
def get_batch_update_counts(req: https_fn.CallableRequest) -> dict:
    """Counts, per region id, the spots whose image should be replaced."""
    _require_admin(req)
    settings = get_settings()
    try:
        report = image_updates.count_update_candidates(
            get_document_store(),
            get_gemini_client(),
            _load_regions(),
            settings.data_dir,
            max_workers=settings.max_concurrency,
        )
    except Exception as e:
        raise _to_https_error(e, "counting image updates") from e
    return {"counts": report.counts, "skippedRegions": report.skipped_regions}


@https_fn.on_call(timeout_sec=constants.BATCH_FUNCTION_TIMEOUT)
def batch_find_image_updates(req: https_fn.CallableRequest) -> dict:
    """
    Proposes new images for spots that need one.

    Args:
        req (https_fn.CallableRequest): optional prefectureId, a region id or
            "all" (the default).

    Returns:
        {"updates": [...], "skippedRegions": [...], "skippedSpots": [...]}
    """
    _require_admin(req)
    data = req.data or {}
    settings = get_settings()
    try:
        proposals = image_updates.find_image_updates(
            get_document_store(),
            get_image_search_client(),
            get_gemini_client(),
            _load_regions(),
            settings.data_dir,
            region_id=data.get("prefectureId"),
            max_workers=settings.max_concurrency,
        )
    except Exception as e:
        raise _to_https_error(e, "finding image updates") from e
    return {
        "updates": [
            convert_keys(asdict(update), "snake_to_camel") for update in proposals.updates
        ],
        "skippedRegions": proposals.skipped_regions,
        "skippedSpots": proposals.skipped_spots,
    }


@https_fn.on_call(timeout_sec=constants.CONFIRM_FUNCTION_TIMEOUT)
def confirm_image_updates(req: https_fn.CallableRequest) -> dict:
    """
    Commits admin-approved image proposals, one write per region document.

    Returns:
        The number of documents written, plus the documents whose write
        failed and any proposals that could not be placed.
    """
    _require_admin(req)
    data = req.data or {}
    raw_updates = data.get("updates")
    if not isinstance(raw_updates, list) or not raw_updates:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT, "No updates were given."
        )
    if len(raw_updates) > constants.MAX_BATCH_UPDATES:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT, "Too many updates in one call."
        )
    try:
        updates = [
            from_dict(
                data_class=ProposedImageUpdate,
                data=convert_keys(update, "camel_to_snake"),
                config=Config(check_types=False),
            )
            for update in raw_updates
        ]
    except (DaciteError, TypeError) as e:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT, f"Invalid update: {e}"
        )

    settings = get_settings()
    try:
        result = image_updates.confirm_image_updates(
            get_document_store(),
            _load_regions(),
            updates,
            settings.data_dir,
            max_workers=settings.max_concurrency,
        )
    except Exception as e:
        raise _to_https_error(e, "confirming image updates") from e

    return {
        "success": not result.failed_documents,
        "message": f"Updated images in {result.updated_documents} files.",
        **convert_keys(asdict(result), "snake_to_camel"),
    }
