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
# Standard library imports
import inspect
import os
import unittest
from unittest.mock import MagicMock, patch

# Third-party library imports
from firebase_functions import https_fn
from functions_framework import create_app
from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.genai import errors as genai_errors

# Local application imports
# This patch must be applied before importing 'main'
with patch("firebase_admin.initialize_app"):
    import main
import main_testing_utils
from curation.spot_analysis import SpotSuggestion
from data_store.document_store import DocumentConflictError
from data_store.regions import region_path
from shared.config import Settings
from shared.types import (
    ImageSearchResult,
    ImageUpdateProposals,
    ProposedImageUpdate,
    RegionInfo,
    UpdateCountReport,
)

MAIN_SOURCE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "main.py")
TOKYO_PATH = region_path(main_testing_utils.DATA_DIR, "tokyo")


def _test_client(function_name: str):
    return create_app(function_name, MAIN_SOURCE).test_client()


class CallableTestCase(unittest.TestCase):
    """Calls the undecorated handlers with in-memory region data and mock Firestore."""

    def setUp(self):
        self.store, self.regions = main_testing_utils.create_store_with_regions()
        self.mock_firestore = MagicMock()
        self.db = self.mock_firestore.client.return_value
        self.batch = self.db.batch.return_value
        self.transaction = self.db.transaction.return_value
        # Run transactional functions directly against the mock transaction.
        self.mock_firestore.transactional.side_effect = lambda func: func
        patches = [
            patch.object(main, "get_document_store", return_value=self.store),
            patch.object(main, "_load_regions", return_value=self.regions),
            patch.object(
                main,
                "get_settings",
                return_value=Settings(data_dir=main_testing_utils.DATA_DIR, max_concurrency=2),
            ),
            patch.object(main, "get_gemini_client", return_value=MagicMock()),
            patch.object(main, "get_image_search_client", return_value=MagicMock()),
            patch.object(main, "firestore", self.mock_firestore),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)

    def call(self, handler, data, uid="admin-1", admin=True):
        request = main_testing_utils.create_request(data, uid=uid, admin=admin)
        return inspect.unwrap(handler)(request)

    def assertHttpsError(self, code, handler, data, **kwargs):
        with self.assertRaises(https_fn.HttpsError) as context:
            self.call(handler, data, **kwargs)
        self.assertEqual(context.exception.code, code)
        return context.exception

    def stored(self, path=TOKYO_PATH) -> dict:
        return self.store.fetch(path).content


class TestMainGetRegionList(unittest.TestCase):

    @patch("firebase_admin.initialize_app")
    def setUp(self, initialize_app_mock):
        self.client = _test_client("get_region_list")

    @patch("main._load_regions")
    def test_get_region_list(self, mock_load_regions):
        mock_load_regions.return_value = [
            RegionInfo(id="kyoto", name="Kyoto"),
            RegionInfo(id="tokyo", name="Tokyo"),
        ]

        response = self.client.post("/", json={"data": {}})

        self.assertEqual(
            response.status_code,
            200,
            f"Request failed with status {response.status_code}. Body: {response.get_data(as_text=True)}",
        )
        self.assertEqual(
            response.get_json()["result"],
            [{"id": "kyoto", "name": "Kyoto"}, {"id": "tokyo", "name": "Tokyo"}],
        )


class TestMainAnalyzeSpotSuggestion(unittest.TestCase):

    @patch("firebase_admin.initialize_app")
    def setUp(self, initialize_app_mock):
        self.client = _test_client("analyze_spot_suggestion")

    @patch("main.get_gemini_client")
    @patch("main._load_regions")
    @patch("main.spot_analysis")
    def test_analyze_spot_suggestion(self, mock_analysis, mock_load_regions, mock_gemini):
        # Arrange: The analysis returns a validated suggestion.
        mock_load_regions.return_value = [RegionInfo(id="tokyo", name="Tokyo")]
        mock_analysis.analyze_spot_suggestion.return_value = SpotSuggestion(
            prefecture="Tokyo",
            area="Shibuya",
            is_new_area=False,
            name="Example Cafe",
            category="Food",
            sub_category="Cafe",
            description="A quiet cafe.",
            website="https://example.com",
            gmaps="https://www.google.com/maps/search/?api=1&query=Example%20Cafe",
            stay_time="1h",
            tags=["Cafe"],
            is_name_consistent=True,
            recommendation="yes",
            reasoning="Popular.",
        )
        payload = {
            "spotName": "Example Cafe",
            "spotUrl": "https://example.com",
            "standardTags": ["Cafe", "Gourmet"],
        }

        # Act
        response = self.client.post("/", json={"data": payload})

        # Assert
        self.assertEqual(response.status_code, 200, response.get_data(as_text=True))
        result = response.get_json()["result"]
        self.assertEqual(result["subCategory"], "Cafe")
        self.assertEqual(result["isNewArea"], False)
        self.assertEqual(result["tags"], ["Cafe"])
        kwargs = mock_analysis.analyze_spot_suggestion.call_args.kwargs
        self.assertEqual(kwargs["supported_regions"], ["Tokyo"])
        self.assertEqual(kwargs["standard_tags"], ["Cafe", "Gourmet"])
        self.assertEqual(kwargs["area_positions"], {})

    def test_analyze_spot_suggestion_missing_url(self):
        response = self.client.post("/", json={"data": {"spotName": "Example Cafe"}})

        self.assertEqual(response.status_code, 400)
        error = response.get_json()["error"]
        self.assertEqual(error["status"], "INVALID_ARGUMENT")
        self.assertIn("spotUrl", error["message"])

    def test_analyze_spot_suggestion_name_too_long(self):
        payload = {"spotName": "a" * 201, "spotUrl": "https://example.com"}

        response = self.client.post("/", json={"data": payload})

        self.assertEqual(response.status_code, 400)
        self.assertIn("spotName exceeds max length", response.get_json()["error"]["message"])

    @patch("main.get_gemini_client")
    @patch("main._load_regions")
    @patch("main.spot_analysis")
    def test_analyze_spot_suggestion_quota_exhausted(
        self, mock_analysis, mock_load_regions, mock_gemini
    ):
        mock_load_regions.return_value = []
        mock_analysis.analyze_spot_suggestion.side_effect = genai_errors.ClientError(
            429,
            {"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}},
        )
        payload = {"spotName": "Example Cafe", "spotUrl": "https://example.com"}

        response = self.client.post("/", json={"data": payload})

        self.assertEqual(response.get_json()["error"]["status"], "RESOURCE_EXHAUSTED")

    @patch("main.get_gemini_client")
    @patch("main._load_regions")
    @patch("main.spot_analysis")
    def test_analyze_spot_suggestion_hides_internal_errors(
        self, mock_analysis, mock_load_regions, mock_gemini
    ):
        mock_load_regions.return_value = []
        mock_analysis.analyze_spot_suggestion.side_effect = RuntimeError(
            "https://api.example.com?key=secret"
        )
        payload = {"spotName": "Example Cafe", "spotUrl": "https://example.com"}

        response = self.client.post("/", json={"data": payload})

        self.assertEqual(response.status_code, 500)
        error = response.get_json()["error"]
        self.assertEqual(error["status"], "INTERNAL")
        self.assertNotIn("secret", error["message"])


class TestMainFetchImageForSpot(unittest.TestCase):

    @patch("firebase_admin.initialize_app")
    def setUp(self, initialize_app_mock):
        self.client = _test_client("fetch_image_for_spot")

    @patch("main.get_gemini_client")
    @patch("main.get_image_search_client")
    @patch("main.image_updates")
    def test_fetch_image_for_spot(self, mock_image_updates, mock_search, mock_gemini):
        mock_image_updates.fetch_image_candidates.return_value = [
            ImageSearchResult(
                url="https://example.com/a.jpg",
                page_url="https://example.com/a",
                display_domain="example.com",
            )
        ]
        payload = {
            "spot": {"name": "Example Cafe"},
            "reportedImageUrl": "https://example.com/bad.jpg",
        }

        response = self.client.post("/", json={"data": payload})

        self.assertEqual(response.status_code, 200, response.get_data(as_text=True))
        self.assertEqual(
            response.get_json()["result"],
            {
                "candidates": [
                    {
                        "url": "https://example.com/a.jpg",
                        "pageUrl": "https://example.com/a",
                        "displayDomain": "example.com",
                    }
                ]
            },
        )
        self.assertEqual(
            mock_image_updates.fetch_image_candidates.call_args.kwargs["reported_image_url"],
            "https://example.com/bad.jpg",
        )

    def test_fetch_image_for_spot_without_name(self):
        response = self.client.post("/", json={"data": {"spot": {}}})

        self.assertEqual(response.get_json()["error"]["status"], "INVALID_ARGUMENT")


class TestMainSubmitEditRequest(CallableTestCase):

    def test_submit_edit_request_requires_login(self):
        self.assertHttpsError(
            https_fn.FunctionsErrorCode.UNAUTHENTICATED,
            main.submit_edit_request,
            {"spotName": "Example Cafe"},
            uid=None,
        )

    def test_submit_edit_request(self):
        data = {
            "spotName": "Example Cafe",
            "prefecture": "Tokyo",
            "requestType": "edit",
            "details": "The cafe moved.",
        }

        result = self.call(main.submit_edit_request, data, uid="user-1", admin=False)

        self.assertTrue(result["success"])
        self.db.collection.assert_called_once_with("edit_requests")
        self.db.collection.return_value.add.assert_called_once_with(
            {
                "spotName": "Example Cafe",
                "prefecture": "Tokyo",
                "requestType": "edit",
                "details": "The cafe moved.",
                "status": "pending",
                "submittedBy": "user-1",
                "submittedAt": SERVER_TIMESTAMP,
            }
        )
        stored = self.db.collection.return_value.add.call_args.args[0]
        self.assertIs(stored["submittedAt"], SERVER_TIMESTAMP)

    def test_submit_edit_request_invalid_type(self):
        data = {
            "spotName": "Example Cafe",
            "prefecture": "Tokyo",
            "requestType": "rename",
            "details": "x",
        }
        self.assertHttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            main.submit_edit_request,
            data,
            admin=False,
        )


class TestMainHandleEditRequest(CallableTestCase):

    def _pending_request(self, **overrides):
        # A single stored request whose status follows every Firestore update.
        self.request_record = {
            "spotName": "Example Cafe",
            "prefecture": "Tokyo",
            "requestType": "delete",
            "details": "Closed.",
            "status": "pending",
            "submittedBy": "user-1",
        }
        self.request_record.update(overrides)
        snapshot = MagicMock()
        snapshot.exists = True
        snapshot.to_dict.side_effect = lambda: dict(self.request_record)
        request_ref = self.db.collection.return_value.document.return_value
        request_ref.get.return_value = snapshot

        def _record_update(*args):
            self.request_record.update(args[-1])

        self.transaction.update.side_effect = _record_update
        self.batch.update.side_effect = _record_update
        request_ref.update.side_effect = _record_update

    def test_handle_edit_request_requires_admin(self):
        self.assertHttpsError(
            https_fn.FunctionsErrorCode.PERMISSION_DENIED,
            main.handle_edit_request,
            {"requestId": "r1", "action": "approve"},
            admin=False,
        )
        self.assertEqual(self.store.commits, [])

    def test_approve_delete_request(self):
        self._pending_request()

        result = self.call(main.handle_edit_request, {"requestId": "r1", "action": "approve"})

        self.assertTrue(result["success"])
        self.assertEqual(self.stored()["spots"], [])
        self.assertEqual(len(self.store.commits), 1)
        self.assertIn('Remove spot "Example Cafe"', self.store.commits[0][1])
        self.assertEqual(
            self.transaction.update.call_args.args[1], {"status": "processing"}
        )
        self.assertEqual(self.request_record["status"], "approved")
        # One mailbox message and one announcement.
        self.assertEqual(self.batch.set.call_count, 2)
        self.batch.commit.assert_called_once()

    def test_second_resolution_is_refused(self):
        self._pending_request()
        self.call(main.handle_edit_request, {"requestId": "r1", "action": "approve"})

        self.assertHttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            main.handle_edit_request,
            {"requestId": "r1", "action": "approve"},
        )

        self.assertEqual(self.request_record["status"], "approved")
        self.assertNotIn("reason", self.request_record)
        self.assertEqual(len(self.store.commits), 1)

    def test_claimed_request_cannot_be_rejected(self):
        self._pending_request(status="processing")

        self.assertHttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            main.handle_edit_request,
            {"requestId": "r1", "action": "reject"},
        )
        self.transaction.update.assert_not_called()
        self.assertEqual(self.request_record["status"], "processing")

    def test_approve_edit_request(self):
        self._pending_request(requestType="edit")
        data = {
            "requestId": "r1",
            "action": "approve",
            "updates": {"image": "https://example.com/new.jpg", "tags": ["Gourmet"]},
        }

        self.call(main.handle_edit_request, data)

        spot = self.stored()["spots"][0]
        self.assertEqual(spot["image"], "https://example.com/new.jpg")
        self.assertEqual(spot["imageSource"], "Admin update")
        self.assertEqual(spot["imageSourceUrl"], "https://example.com/new.jpg")
        self.assertEqual(spot["tags"], ["Gourmet"])

    def test_rename_onto_existing_spot_is_refused(self):
        document = main_testing_utils.create_region_document(
            spots=[
                main_testing_utils.create_spot("Example Cafe"),
                main_testing_utils.create_spot("Park", area="Shinjuku"),
            ]
        )
        self.store.put(TOKYO_PATH, document)
        self._pending_request(requestType="edit")

        self.assertHttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            main.handle_edit_request,
            {"requestId": "r1", "action": "approve", "updates": {"title": "Park"}},
        )

        self.assertEqual(
            [spot["name"] for spot in self.stored()["spots"]], ["Example Cafe", "Park"]
        )
        self.assertEqual(self.store.commits, [])
        self.assertEqual(self.request_record["status"], "pending")

    def test_approve_request_for_missing_spot_rejects_it(self):
        self._pending_request(spotName="Gone Cafe")

        self.assertHttpsError(
            https_fn.FunctionsErrorCode.NOT_FOUND,
            main.handle_edit_request,
            {"requestId": "r1", "action": "approve"},
        )

        self.assertEqual(self.store.commits, [])
        self.assertEqual(self.request_record["status"], "rejected")
        self.assertEqual(self.request_record["reason"], "Spot not found in data file.")
        self.batch.commit.assert_not_called()

    def test_failed_write_returns_request_to_pending(self):
        self._pending_request()

        with patch.object(
            self.store, "write", side_effect=DocumentConflictError(TOKYO_PATH)
        ):
            self.assertHttpsError(
                https_fn.FunctionsErrorCode.ABORTED,
                main.handle_edit_request,
                {"requestId": "r1", "action": "approve"},
            )

        self.assertEqual(self.request_record["status"], "pending")

    def test_reject_request(self):
        self._pending_request()

        self.call(main.handle_edit_request, {"requestId": "r1", "action": "reject"})

        self.assertEqual(self.store.commits, [])
        self.assertEqual(self.request_record["status"], "rejected")
        # The submitter is notified.
        self.assertEqual(self.batch.set.call_count, 1)
        self.batch.commit.assert_called_once()

    def test_resolved_request_is_immutable(self):
        self._pending_request(status="approved")

        self.assertHttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            main.handle_edit_request,
            {"requestId": "r1", "action": "reject"},
        )
        self.batch.commit.assert_not_called()
        self.assertEqual(self.request_record["status"], "approved")

    def test_unknown_request(self):
        snapshot = MagicMock()
        snapshot.exists = False
        self.db.collection.return_value.document.return_value.get.return_value = snapshot

        self.assertHttpsError(
            https_fn.FunctionsErrorCode.NOT_FOUND,
            main.handle_edit_request,
            {"requestId": "missing", "action": "approve"},
        )


class TestMainDirectAdminSpotUpdate(CallableTestCase):

    def test_update_spot(self):
        data = {
            "prefecture": "Tokyo",
            "spotName": "Example Cafe",
            "action": "update",
            "updateData": {"description": "Now open late.", "area": "Shinjuku"},
        }

        self.call(main.direct_admin_spot_update, data)

        spot = self.stored()["spots"][0]
        self.assertEqual(spot["description"], "Now open late.")
        self.assertEqual(spot["area"], "Shinjuku")
        self.assertEqual(spot["category"], "Food")
        self.db.collection.assert_called_with("announcements")

    def test_update_spot_to_unknown_area(self):
        data = {
            "prefecture": "Tokyo",
            "spotName": "Example Cafe",
            "action": "update",
            "updateData": {"area": "Atlantis"},
        }

        self.assertHttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT, main.direct_admin_spot_update, data
        )
        self.assertEqual(self.store.commits, [])

    def test_unsupported_region(self):
        data = {"prefecture": "Osaka", "spotName": "Example Cafe", "action": "delete"}

        error = self.assertHttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT, main.direct_admin_spot_update, data
        )
        self.assertIn("Osaka", error.message)


class TestMainApproveSubmission(CallableTestCase):

    def _submission(self, **overrides):
        submission = {
            "prefecture": "Tokyo",
            "name": "New Bakery",
            "area": "Shibuya",
            "category": "Food",
            "subCategory": "Bakery",
            "description": "Fresh bread.",
            "website": "https://bakery.example.com",
            "gmaps": "https://www.google.com/maps/search/?api=1&query=New%20Bakery",
            "stayTime": "30min",
            "tags": ["Gourmet"],
        }
        submission.update(overrides)
        return submission

    @patch.object(main.image_updates, "fetch_image_candidates")
    def test_approve_submission(self, mock_candidates):
        mock_candidates.return_value = [
            ImageSearchResult(
                url="https://bakery.example.com/a.jpg",
                page_url="https://bakery.example.com",
                display_domain="bakery.example.com",
            )
        ]

        result = self.call(
            main.approve_submission,
            {"submissionId": "s1", "submissionData": self._submission()},
        )

        self.assertTrue(result["success"])
        spot = self.stored()["spots"][-1]
        self.assertEqual(spot["name"], "New Bakery")
        self.assertEqual(spot["subCategory"], "Bakery")
        self.assertEqual(spot["image"], "https://bakery.example.com/a.jpg")
        self.assertEqual(spot["imageSource"], "bakery.example.com")
        self.batch.delete.assert_called_once()
        self.db.collection.assert_any_call("spot_submissions")
        self.batch.commit.assert_called_once()

    @patch.object(main.image_updates, "fetch_image_candidates")
    def test_approve_submission_with_new_area(self, mock_candidates):
        mock_candidates.return_value = []
        submission = self._submission(
            area="Harajuku",
            isNewArea=True,
            newAreaPosition={"top": "45%", "left": "33%"},
            newTransitData={"Shibuya": "5min", "Shinjuku": "8min"},
        )

        self.call(main.approve_submission, {"submissionId": "s1", "submissionData": submission})

        document = self.stored()
        self.assertIn(
            {"name": "Harajuku", "top": "45%", "left": "33%"}, document["areaPositions"]
        )
        self.assertEqual(document["transitData"]["Harajuku"], {"Shibuya": "5min", "Shinjuku": "8min"})
        self.assertEqual(document["transitData"]["Shibuya"]["Harajuku"], "5min")
        self.assertEqual(document["transitData"]["Shinjuku"]["Harajuku"], "8min")
        spot = document["spots"][-1]
        self.assertEqual(spot["area"], "Harajuku")
        self.assertEqual(spot["imageSource"], "User suggestion")
        self.assertTrue(spot["image"].startswith("https://placehold.co/"))

    @patch.object(main.image_updates, "fetch_image_candidates", return_value=[])
    def test_new_area_transit_time_is_symmetric(self, mock_candidates):
        document = main_testing_utils.create_region_document(spots=[])
        document["areaPositions"] = [{"name": "Shibuya", "top": "40%", "left": "35%"}]
        document["transitData"] = {}
        self.store.put(TOKYO_PATH, document)
        submission = self._submission(
            area="Shinjuku", isNewArea=True, newTransitData={"Shibuya": "20min"}
        )

        self.call(main.approve_submission, {"submissionId": "s1", "submissionData": submission})

        document = self.stored()
        self.assertEqual(
            [area["name"] for area in document["areaPositions"]], ["Shibuya", "Shinjuku"]
        )
        self.assertEqual(document["transitData"]["Shibuya"]["Shinjuku"], "20min")
        self.assertEqual(document["transitData"]["Shinjuku"]["Shibuya"], "20min")

    @patch.object(main.image_updates, "fetch_image_candidates")
    def test_new_area_not_approved(self, mock_candidates):
        mock_candidates.return_value = []
        submission = self._submission(area="Harajuku", isNewArea=True)

        self.assertHttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            main.approve_submission,
            {"submissionId": "s1", "submissionData": submission, "approveNewArea": False},
        )
        self.assertEqual(self.store.commits, [])
        self.batch.commit.assert_not_called()

    @patch.object(main.image_updates, "fetch_image_candidates")
    def test_image_search_failure_uses_placeholder(self, mock_candidates):
        mock_candidates.side_effect = RuntimeError("search down")

        self.call(
            main.approve_submission,
            {"submissionId": "s1", "submissionData": self._submission()},
        )

        spot = self.stored()["spots"][-1]
        self.assertEqual(spot["imageSourceUrl"], "https://bakery.example.com")

    def test_missing_submission_fields(self):
        self.assertHttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            main.approve_submission,
            {"submissionId": "s1", "submissionData": {"name": "New Bakery"}},
        )


class TestMainImageReports(CallableTestCase):

    def test_submit_image_report(self):
        data = {
            "spotName": "Example Cafe",
            "prefecture": "Tokyo",
            "reportedImageUrl": "https://example.com/old.jpg",
            "comment": "Wrong building.",
        }

        self.call(main.submit_image_report, data, uid="user-2", admin=False)

        self.db.collection.assert_called_once_with("image_reports")
        stored = self.db.collection.return_value.add.call_args.args[0]
        self.assertEqual(stored["reportedBy"], "user-2")
        self.assertEqual(stored["reportedImageUrl"], "https://example.com/old.jpg")
        self.assertIsNone(stored["candidateImageUrl"])
        self.assertIs(stored["createdAt"], SERVER_TIMESTAMP)

    def test_resolve_image_report(self):
        data = {
            "reportId": "rep1",
            "spotName": "Example Cafe",
            "prefecture": "Tokyo",
            "newImageUrl": "https://example.com/fixed.jpg",
        }

        self.call(main.resolve_image_report, data)

        spot = self.stored()["spots"][0]
        self.assertEqual(spot["image"], "https://example.com/fixed.jpg")
        self.assertEqual(spot["imageSource"], "Admin update")
        self.db.collection.return_value.document.assert_called_with("rep1")
        self.db.collection.return_value.document.return_value.delete.assert_called_once()

    def test_resolve_image_report_conflict(self):
        data = {
            "reportId": "rep1",
            "spotName": "Example Cafe",
            "prefecture": "Tokyo",
            "newImageUrl": "https://example.com/fixed.jpg",
        }

        with patch.object(
            self.store, "write", side_effect=DocumentConflictError(TOKYO_PATH)
        ):
            self.assertHttpsError(
                https_fn.FunctionsErrorCode.ABORTED, main.resolve_image_report, data
            )
        self.db.collection.return_value.document.return_value.delete.assert_not_called()


class TestMainBatchImageUpdates(CallableTestCase):

    @patch.object(main.image_updates, "count_update_candidates")
    def test_get_batch_update_counts(self, mock_count):
        mock_count.return_value = UpdateCountReport(
            counts={"tokyo": 2}, skipped_regions=["osaka"]
        )

        result = self.call(main.get_batch_update_counts, {})

        self.assertEqual(result, {"counts": {"tokyo": 2}, "skippedRegions": ["osaka"]})

    def test_batch_find_image_updates_unknown_region(self):
        self.assertHttpsError(
            https_fn.FunctionsErrorCode.NOT_FOUND,
            main.batch_find_image_updates,
            {"prefectureId": "atlantis"},
        )

    @patch.object(main.image_updates, "find_image_updates")
    def test_batch_find_image_updates(self, mock_find):
        mock_find.return_value = ImageUpdateProposals(
            updates=[
                ProposedImageUpdate(
                    spot_name="Example Cafe",
                    prefecture="Tokyo",
                    area="Shibuya",
                    old_image_url="https://example.com/old.jpg",
                    new_image_url="https://example.com/new.jpg",
                    new_image_source="example.com",
                    new_image_source_url="https://example.com/page",
                )
            ]
        )

        result = self.call(main.batch_find_image_updates, {"prefectureId": "tokyo"})

        self.assertEqual(mock_find.call_args.kwargs["region_id"], "tokyo")
        self.assertEqual(result["updates"][0]["spotName"], "Example Cafe")
        self.assertEqual(result["updates"][0]["newImageSourceUrl"], "https://example.com/page")
        self.assertEqual(result["skippedRegions"], [])

    def test_confirm_image_updates(self):
        updates = [
            {
                "spotName": "Example Cafe",
                "prefecture": "Tokyo",
                "newImageUrl": "https://example.com/new.jpg",
                "newImageSource": "example.com",
                "newImageSourceUrl": "https://example.com/page",
            },
            {"spotName": "Lost", "prefecture": "Atlantis", "newImageUrl": "https://x.test/a.jpg"},
        ]

        result = self.call(main.confirm_image_updates, {"updates": updates})

        self.assertTrue(result["success"])
        self.assertEqual(result["updatedDocuments"], 1)
        self.assertEqual(result["unresolvedRegions"], ["Atlantis"])
        spot = self.stored()["spots"][0]
        self.assertEqual(spot["image"], "https://example.com/new.jpg")
        self.assertEqual(spot["imageSourceUrl"], "https://example.com/page")

    def test_confirm_image_updates_empty(self):
        self.assertHttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            main.confirm_image_updates,
            {"updates": []},
        )

    def test_confirm_image_updates_malformed(self):
        self.assertHttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            main.confirm_image_updates,
            {"updates": [{"spotName": "Example Cafe"}]},
        )

    def test_confirm_image_updates_requires_admin(self):
        self.assertHttpsError(
            https_fn.FunctionsErrorCode.PERMISSION_DENIED,
            main.confirm_image_updates,
            {"updates": [{"spotName": "Example Cafe"}]},
            admin=False,
        )


if __name__ == "__main__":
    unittest.main()
