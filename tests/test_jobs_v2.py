"""
Tests for the v2 (document store) API.
"""

import io
import json


def create_job(client, title="Engineer"):
    response = client.post("/api/v2/jobs", json={"title": title})
    assert response.status_code == 201
    return response.json()["id"]


def apply(client, job_id, data):
    response = client.post(f"/api/v2/jobs/{job_id}/job-applications", json=data)
    assert response.status_code == 204
    return response.headers["location"].rsplit("/", 1)[-1]


def upload(client, job_id, application_id, filename, content):
    return client.put(
        f"/api/v2/jobs/{job_id}/job-applications/{application_id}/upload-cv",
        files={"file": (filename, io.BytesIO(content), "application/octet-stream")}
    )


class TestJobsV2:

    def test_create_and_get_job(self, client, document_store, sample_job_data):
        response = client.post("/api/v2/jobs", json=sample_job_data)

        assert response.status_code == 201
        created = response.json()
        assert isinstance(created["id"], str)
        assert response.headers["location"] == f"/api/v2/jobs/{created['id']}"
        assert document_store.get(created["id"])["title"] == sample_job_data["title"]

        fetched = client.get(f"/api/v2/jobs/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json() == created

    def test_get_missing_job(self, client):
        response = client.get("/api/v2/jobs/does-not-exist")

        assert response.status_code == 404

    def test_list_jobs(self, client):
        ids = {create_job(client, f"Job {i}") for i in range(3)}

        response = client.get("/api/v2/jobs")

        assert response.status_code == 200
        assert ids <= {job["id"] for job in response.json()}

    def test_v1_and_v2_are_separate_stores(self, client):
        create_job(client)

        assert client.get("/api/jobs").json() == []


class TestApplicationsV2:

    def test_application_is_embedded_in_job(self, client, queue, sample_application_data):
        job_id = create_job(client)

        application_id = apply(client, job_id, sample_application_data)

        job = client.get(f"/api/v2/jobs/{job_id}").json()
        assert [a["id"] for a in job["applications"]] == [application_id]
        assert job["applications"][0]["job_id"] == job_id
        assert job["applications"][0]["cv_url"] is None

        event = json.loads(queue.peek()[0])
        assert event["job_id"] == job_id
        assert event["application_id"] == application_id

    def test_apply_to_missing_job(self, client, queue, sample_application_data):
        response = client.post("/api/v2/jobs/missing/job-applications", json=sample_application_data)

        assert response.status_code == 404
        assert len(queue) == 0

    def test_upload_and_download(self, client, sample_application_data):
        job_id = create_job(client)
        application_id = apply(client, job_id, sample_application_data)

        response = upload(client, job_id, application_id, "cv.docx", b"PK\x03\x04docx")

        assert response.status_code == 204
        application = client.get(f"/api/v2/jobs/{job_id}").json()["applications"][0]
        assert application["cv_url"] == f"job-applications/{application_id}-cv.docx"

        download = client.get(
            f"/api/v2/jobs/{job_id}/job-applications/{application_id}/cv",
            params={"email": "ana@x.com"}
        )
        assert download.status_code == 200
        assert download.content == b"PK\x03\x04docx"
        assert download.headers["content-type"] == (
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        )

    def test_upload_rejects_bad_extension(self, client, sample_application_data):
        job_id = create_job(client)
        application_id = apply(client, job_id, sample_application_data)

        response = upload(client, job_id, application_id, "cv.exe", b"MZ")

        assert response.status_code == 400
        assert client.get(f"/api/v2/jobs/{job_id}").json()["applications"][0]["cv_url"] is None

    def test_upload_for_application_of_another_job(self, client, sample_application_data):
        job_id = create_job(client)
        other_job_id = create_job(client, "Other")
        application_id = apply(client, job_id, sample_application_data)

        response = upload(client, other_job_id, application_id, "cv.pdf", b"%PDF")

        assert response.status_code == 404

    def test_download_with_token(self, client, sample_application_data):
        job_id = create_job(client)
        application_id = apply(client, job_id, sample_application_data)
        upload(client, job_id, application_id, "cv.pdf", b"%PDF v2")

        token = client.post(
            f"/api/v2/jobs/{job_id}/job-applications/{application_id}/cv-token",
            json={"email": "ana@x.com"}
        ).json()["token"]

        response = client.get(
            f"/api/v2/jobs/{job_id}/job-applications/{application_id}/cv",
            params={"token": token}
        )

        assert response.status_code == 200
        assert response.content == b"%PDF v2"

    def test_mixed_case_email_is_accepted_as_submitted(self, client):
        job_id = create_job(client)
        application_id = apply(client, job_id, {"candidate_name": "Ana", "candidate_email": "Ana@Example.COM"})
        upload(client, job_id, application_id, "cv.pdf", b"%PDF mixed")

        by_email = client.get(
            f"/api/v2/jobs/{job_id}/job-applications/{application_id}/cv",
            params={"email": "Ana@Example.COM"}
        )
        token_response = client.post(
            f"/api/v2/jobs/{job_id}/job-applications/{application_id}/cv-token",
            json={"email": "Ana@Example.COM"}
        )

        assert by_email.status_code == 200
        assert by_email.content == b"%PDF mixed"
        assert token_response.status_code == 200


class TestApplicationEdgeCasesV2:

    def test_empty_upload_is_rejected(self, client, storage, sample_application_data):
        job_id = create_job(client)
        application_id = apply(client, job_id, sample_application_data)

        response = upload(client, job_id, application_id, "cv.pdf", b"")

        assert response.status_code == 400
        assert client.get(f"/api/v2/jobs/{job_id}").json()["applications"][0]["cv_url"] is None
        assert not storage.file_exists(f"job-applications/{application_id}-cv.pdf")

    def test_upload_for_unknown_application_in_existing_job(self, client, storage, sample_application_data):
        job_id = create_job(client)
        apply(client, job_id, sample_application_data)

        response = upload(client, job_id, "unknown", "cv.pdf", b"%PDF")

        assert response.status_code == 404
        assert not storage.file_exists("job-applications/unknown-cv.pdf")
        assert client.get(f"/api/v2/jobs/{job_id}").json()["applications"][0]["cv_url"] is None

    def test_download_with_wrong_email(self, client, sample_application_data):
        job_id = create_job(client)
        application_id = apply(client, job_id, sample_application_data)
        upload(client, job_id, application_id, "cv.pdf", b"%PDF")

        response = client.get(
            f"/api/v2/jobs/{job_id}/job-applications/{application_id}/cv",
            params={"email": "eve@x.com"}
        )

        assert response.status_code == 404

    def test_download_before_upload(self, client, sample_application_data):
        job_id = create_job(client)
        application_id = apply(client, job_id, sample_application_data)

        response = client.get(
            f"/api/v2/jobs/{job_id}/job-applications/{application_id}/cv",
            params={"email": "ana@x.com"}
        )

        assert response.status_code == 404
