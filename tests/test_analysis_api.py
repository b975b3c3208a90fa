import base64
import unittest

from fastapi.testclient import TestClient

from agroguard.app import create_app
from agroguard.exceptions import ProviderError, ProviderFailure
from agroguard.services.analysis import AnalysisOrchestrator

from fakes import instant_simulator, make_settings, DISEASED_AT, HEALTHY_AT


class QuotaExhaustedRemote:
    name = "gemini"

    async def analyze(self, image_bytes, mime_type="image/jpeg"):
        raise ProviderError(ProviderFailure.QUOTA_EXHAUSTED, "quota exceeded")


class TestAnalysisEndpoints(unittest.TestCase):
    def client_for(self, timestamp: int = DISEASED_AT, remote=None) -> TestClient:
        orchestrator = AnalysisOrchestrator(instant_simulator(timestamp), remote)
        client = TestClient(create_app(make_settings(), orchestrator=orchestrator))
        client.__enter__()
        self.addCleanup(client.__exit__, None, None, None)
        return client

    def test_multipart_upload(self):
        client = self.client_for(DISEASED_AT)
        response = client.post("/api/analyze-crop", files={"image": ("leaf.jpg", bytes(5000), "image/jpeg")})

        self.assertEqual(200, response.status_code, response.text)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual("simulator", body["provider"])
        self.assertEqual("Late Blight", body["result"]["diseaseName"])
        self.assertTrue(body["result"]["detected"])
        self.assertFalse(body["result"]["isHealthy"])
        self.assertNotIn("submissionId", body)

    def test_healthy_verdict(self):
        client = self.client_for(HEALTHY_AT)
        body = client.post("/api/analyze-crop", files={"image": ("leaf.png", bytes(5000), "image/png")}).json()
        self.assertTrue(body["result"]["isHealthy"])
        self.assertFalse(body["result"]["detected"])

    def test_quota_failure_still_answers(self):
        client = self.client_for(DISEASED_AT, remote=QuotaExhaustedRemote())
        body = client.post("/api/analyze-crop", files={"image": ("leaf.jpg", bytes(5000), "image/jpeg")}).json()
        self.assertTrue(body["success"])
        self.assertEqual("simulator", body["provider"])

    def test_rejects_bad_uploads(self):
        client = self.client_for()
        cases = [
            {"files": {"image": ("notes.txt", b"x" * 5000, "text/plain")}},
            {"files": {"image": ("leaf.jpg", bytes(50), "image/jpeg")}},
            {"data": {"userId": "farmer-1"}},
        ]
        for kwargs in cases:
            with self.subTest(kwargs=repr(kwargs)[:60]):
                response = client.post("/api/analyze-crop", **kwargs)
                self.assertEqual(400, response.status_code, response.text)
                self.assertFalse(response.json()["success"])

    def test_detected_disease_is_queued_for_review(self):
        client = self.client_for(DISEASED_AT)
        response = client.post(
            "/api/analyze-crop",
            files={"image": ("leaf.jpg", bytes(5000), "image/jpeg")},
            data={"userId": "farmer-1", "imageUrl": "https://img/leaf.jpg", "location": "Robe"},
        )
        submission_id = response.json()["submissionId"]

        submission = client.get(f"/api/pendingDiseases/{submission_id}").json()["data"]
        self.assertEqual("Late Blight", submission["detectedDisease"])
        self.assertEqual("farmer-1", submission["userId"])
        self.assertEqual("pending", submission["status"])

    def test_healthy_verdict_is_not_queued(self):
        client = self.client_for(HEALTHY_AT)
        client.post(
            "/api/analyze-crop",
            files={"image": ("leaf.jpg", bytes(5000), "image/jpeg")},
            data={"userId": "farmer-1", "imageUrl": "https://img/leaf.jpg"},
        )
        self.assertEqual(0, client.get("/api/pendingDiseases").json()["count"])

    def test_base64_with_data_url_prefix(self):
        client = self.client_for(DISEASED_AT)
        encoded = base64.b64encode(bytes(5000)).decode()

        for payload in (f"data:image/png;base64,{encoded}", encoded):
            with self.subTest(prefixed=payload.startswith("data:")):
                response = client.post("/api/analyze-crop-base64", json={"imageBase64": payload})
                self.assertEqual(200, response.status_code, response.text)
                self.assertEqual("Late Blight", response.json()["result"]["diseaseName"])

    def test_base64_rejects_bad_payloads(self):
        client = self.client_for()
        for payload in ({}, {"imageBase64": "not base64!!"}, {"imageBase64": base64.b64encode(b"tiny").decode()}):
            with self.subTest(payload=payload):
                response = client.post("/api/analyze-crop-base64", json=payload)
                self.assertEqual(400, response.status_code, response.text)


if __name__ == '__main__':
    unittest.main()
