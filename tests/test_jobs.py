"""
Test suite for the v1 job endpoints.

Tests cover:
- Job creation
- Job retrieval and listing
- Validation
"""

import pytest


class TestJobCreation:
    """Tests for job creation endpoint"""

    def test_create_job_success(self, client, sample_job_data):
        response = client.post("/api/jobs", json=sample_job_data)

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 1
        assert data["title"] == sample_job_data["title"]
        assert data["applications"] == []
        assert response.headers["location"] == f"/api/jobs/{data['id']}"

    def test_create_job_with_title_only(self, client):
        response = client.post("/api/jobs", json={"title": "Engineer"})

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Engineer"
        assert data["description"] is None
        assert data["location"] is None

    def test_create_job_missing_title(self, client):
        response = client.post("/api/jobs", json={"description": "No title here"})

        assert response.status_code == 422  # Validation error

    def test_create_job_empty_title(self, client):
        response = client.post("/api/jobs", json={"title": ""})

        assert response.status_code == 422


class TestJobRetrieval:
    """Tests for job retrieval endpoints"""

    def test_get_job_round_trip(self, client, sample_job_data):
        created = client.post("/api/jobs", json=sample_job_data).json()

        response = client.get(f"/api/jobs/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_nonexistent_job(self, client):
        response = client.get("/api/jobs/99999")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"].lower()

    def test_get_job_non_numeric_id(self, client):
        response = client.get("/api/jobs/abc")

        assert response.status_code == 422

    def test_list_jobs(self, client, sample_job_data):
        created_ids = set()
        for i in range(3):
            job_data = sample_job_data.copy()
            job_data["title"] = f"Job {i}"
            created_ids.add(client.post("/api/jobs", json=job_data).json()["id"])

        response = client.get("/api/jobs")

        assert response.status_code == 200
        data = response.json()
        assert isinstance(data, list)
        assert created_ids <= {job["id"] for job in data}

    def test_list_jobs_empty(self, client):
        response = client.get("/api/jobs")

        assert response.status_code == 200
        assert response.json() == []

    def test_get_job_includes_applications(self, client, sample_application_data):
        job_id = client.post("/api/jobs", json={"title": "Engineer"}).json()["id"]
        client.post(f"/api/jobs/{job_id}/job-applications", json=sample_application_data)

        data = client.get(f"/api/jobs/{job_id}").json()

        assert len(data["applications"]) == 1
        application = data["applications"][0]
        assert application["job_id"] == job_id
        assert application["candidate_name"] == "Ana"
        assert application["candidate_email"] == "ana@x.com"
        assert application["cv_url"] is None


@pytest.mark.parametrize("path", ["/health", "/"])
def test_service_is_up(client, path):
    response = client.get(path)

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_detailed_health_check(client):
    response = client.get("/health/detailed")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert set(data["checks"]) == {"database", "document_store", "storage", "queue"}
