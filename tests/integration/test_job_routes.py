"""Integration tests for /api/jobs and the application endpoints nested under a job."""

import pytest
from bson import ObjectId


JOB = {
    "title": "Backend Engineer",
    "description": "Build APIs",
    "location": "Berlin",
    "salary": {"min": 60000, "max": 80000},
    "job_type": "Full-time",
    "experience": "Mid Level",
    "skills": ["python", "mongodb"],
}


@pytest.fixture
def employer(make_user):
    return make_user("Erin", role="employer", company="Acme GmbH")


@pytest.fixture
def seeker(make_user):
    return make_user("Sam")


# ============================================================
# POSTINGS
# ============================================================

@pytest.mark.integration
def test_employer_creates_job(client, employer, auth):
    response = client.post("/api/jobs", json=JOB, headers=auth(employer))

    assert response.status_code == 201
    job = response.json()["job"]
    assert job["company"] == "Acme GmbH"
    assert job["employer"] == str(employer["_id"])
    assert job["is_active"] is True
    assert job["applications"] == []


@pytest.mark.integration
def test_job_seeker_cannot_create_job(client, seeker, auth):
    response = client.post("/api/jobs", json=JOB, headers=auth(seeker))
    assert response.status_code == 403
    assert response.json()["message"] == "Employers only"


@pytest.mark.integration
def test_salary_range_is_validated(client, employer, auth):
    payload = {**JOB, "salary": {"min": 90000, "max": 10000}}
    response = client.post("/api/jobs", json=payload, headers=auth(employer))
    assert response.status_code == 400


@pytest.mark.integration
def test_public_listing_hides_applications(client, employer, seeker, make_job):
    make_job(employer, applications=[{"_id": ObjectId(), "applicant": seeker["_id"], "status": "pending"}])
    make_job(employer, is_active=False, title="Closed")

    response = client.get("/api/jobs")

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    job = body["jobs"][0]
    assert "applications" not in job
    assert job["application_count"] == 1
    assert job["employer"]["name"] == "Erin"


@pytest.mark.integration
def test_get_job_details(client, employer, make_job):
    job = make_job(employer)

    response = client.get(f"/api/jobs/{job['_id']}")

    assert response.status_code == 200
    assert response.json()["job"]["title"] == "Backend Engineer"
    assert client.get(f"/api/jobs/{ObjectId()}").status_code == 404


@pytest.mark.integration
def test_owner_updates_and_deletes_job(client, employer, make_job, job_store, auth):
    job = make_job(employer)
    headers = auth(employer)

    response = client.put(f"/api/jobs/{job['_id']}", json={"is_active": False}, headers=headers)
    assert response.status_code == 200
    assert response.json()["job"]["is_active"] is False

    response = client.delete(f"/api/jobs/{job['_id']}", headers=headers)
    assert response.status_code == 200
    assert job_store.find_by_id(job["_id"]) is None


@pytest.mark.integration
def test_other_employer_cannot_touch_job(client, employer, make_user, make_job, auth):
    job = make_job(employer)
    rival = make_user("Rita", role="employer")

    response = client.put(f"/api/jobs/{job['_id']}", json={"title": "Mine now"}, headers=auth(rival))
    assert response.status_code == 403
    assert response.json()["message"] == "Not authorized to update this job"

    response = client.delete(f"/api/jobs/{job['_id']}", headers=auth(rival))
    assert response.status_code == 403


@pytest.mark.integration
def test_my_jobs_lists_only_own_jobs(client, employer, make_user, make_job, auth):
    make_job(employer, title="Mine")
    make_job(make_user("Rita", role="employer"), title="Theirs")

    response = client.get("/api/jobs/employer/my-jobs", headers=auth(employer))

    assert response.status_code == 200
    assert [job["title"] for job in response.json()["jobs"]] == ["Mine"]


# ============================================================
# APPLYING
# ============================================================

@pytest.mark.integration
def test_apply_creates_pending_application(client, employer, seeker, make_job, auth):
    job = make_job(employer)

    response = client.post(
        f"/api/jobs/{job['_id']}/apply",
        json={"resume": "/uploads/resumes/cv.pdf", "cover_letter": "Hire me"},
        headers=auth(seeker),
    )

    assert response.status_code == 201
    applications = response.json()["job"]["applications"]
    assert len(applications) == 1
    application = applications[0]
    assert application["status"] == "pending"
    assert application["applicant"]["_id"] == str(seeker["_id"])
    assert application["cover_letter"] == "Hire me"


@pytest.mark.integration
def test_applicant_does_not_see_other_applications(client, employer, seeker, make_user, make_job, auth):
    other = make_user("Olga")
    job = make_job(employer, applications=[
        {"_id": ObjectId(), "applicant": other["_id"], "resume": "x.pdf", "status": "pending"}
    ])

    response = client.post(f"/api/jobs/{job['_id']}/apply", json={"resume": "cv.pdf"}, headers=auth(seeker))

    applications = response.json()["job"]["applications"]
    assert [a["applicant"]["_id"] for a in applications] == [str(seeker["_id"])]


@pytest.mark.integration
def test_cannot_apply_twice(client, employer, seeker, make_job, auth):
    job = make_job(employer)
    url = f"/api/jobs/{job['_id']}/apply"
    client.post(url, json={"resume": "cv.pdf"}, headers=auth(seeker))

    response = client.post(url, json={"resume": "cv.pdf"}, headers=auth(seeker))

    assert response.status_code == 400
    assert response.json()["message"] == "Already applied to this job"


@pytest.mark.integration
def test_employer_cannot_apply(client, employer, make_job, auth):
    job = make_job(employer)
    response = client.post(f"/api/jobs/{job['_id']}/apply", json={"resume": "cv.pdf"}, headers=auth(employer))
    assert response.status_code == 403


@pytest.mark.integration
def test_inactive_job_rejects_applications(client, employer, seeker, make_job, auth):
    job = make_job(employer, is_active=False)
    response = client.post(f"/api/jobs/{job['_id']}/apply", json={"resume": "cv.pdf"}, headers=auth(seeker))
    assert response.status_code == 400
    assert response.json()["message"] == "Job is not accepting applications"


@pytest.mark.integration
def test_apply_requires_resume(client, employer, seeker, make_job, auth):
    job = make_job(employer)
    response = client.post(f"/api/jobs/{job['_id']}/apply", json={"cover_letter": "hi"}, headers=auth(seeker))
    assert response.status_code == 400


@pytest.mark.integration
def test_applicant_edits_application(client, employer, seeker, make_job, auth):
    application_id = ObjectId()
    job = make_job(employer, applications=[
        {"_id": application_id, "applicant": seeker["_id"], "resume": "old.pdf",
         "cover_letter": "", "status": "pending"}
    ])

    response = client.put(
        f"/api/jobs/{job['_id']}/applications/{application_id}",
        json={"cover_letter": "Updated"},
        headers=auth(seeker),
    )

    assert response.status_code == 200
    application = response.json()["job"]["applications"][0]
    assert application["cover_letter"] == "Updated"
    assert application["resume"] == "old.pdf"
    assert application["status"] == "pending"


@pytest.mark.integration
def test_status_cannot_be_edited_through_application_patch(client, employer, seeker, make_job, auth):
    application_id = ObjectId()
    job = make_job(employer, applications=[
        {"_id": application_id, "applicant": seeker["_id"], "resume": "cv.pdf", "status": "pending"}
    ])

    response = client.put(
        f"/api/jobs/{job['_id']}/applications/{application_id}",
        json={"status": "accepted"},
        headers=auth(seeker),
    )
    assert response.status_code == 400


@pytest.mark.integration
def test_applicant_withdraws_application(client, employer, seeker, make_job, job_store, auth):
    application_id = ObjectId()
    job = make_job(employer, applications=[
        {"_id": application_id, "applicant": seeker["_id"], "resume": "cv.pdf", "status": "pending"}
    ])
    url = f"/api/jobs/{job['_id']}/applications/{application_id}"

    response = client.delete(url, headers=auth(seeker))
    assert response.status_code == 200
    assert job_store.find_by_id(job["_id"])["applications"] == []

    # Already gone: still a success
    assert client.delete(url, headers=auth(seeker)).status_code == 200


@pytest.mark.integration
def test_stranger_cannot_withdraw_application(client, employer, seeker, make_user, make_job, auth):
    application_id = ObjectId()
    job = make_job(employer, applications=[
        {"_id": application_id, "applicant": seeker["_id"], "resume": "cv.pdf", "status": "pending"}
    ])

    response = client.delete(
        f"/api/jobs/{job['_id']}/applications/{application_id}", headers=auth(make_user("Mallory"))
    )
    assert response.status_code == 403


@pytest.mark.integration
@pytest.mark.parametrize("field", ["title", "description", "location", "salary", "job_type", "is_active"])
def test_job_update_cannot_null_a_field(client, employer, make_job, job_store, auth, field):
    job = make_job(employer)

    response = client.put(f"/api/jobs/{job['_id']}", json={field: None}, headers=auth(employer))

    assert response.status_code == 400
    assert field in response.json()["message"]
    assert job_store.find_by_id(job["_id"])[field] == job[field]
