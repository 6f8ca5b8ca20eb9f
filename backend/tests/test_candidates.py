"""
Tests for candidate profiles
"""
from talentrack.models.application import Application


class TestCandidates:
    
    def test_create_candidate(self, client, recruiter_headers):
        response = client.post(
            "/api/v1/candidates/",
            json={
                "first_name": "Grace",
                "last_name": "Hopper",
                "email": "Grace.Hopper@Example.com",
                "source": "referral",
                "tags": ["cobol", "compilers"],
            },
            headers=recruiter_headers,
        )
        assert response.status_code == 201
        candidate = response.json()
        assert candidate["email"] == "grace.hopper@example.com"
        assert candidate["full_name"] == "Grace Hopper"
        assert candidate["tags"] == ["cobol", "compilers"]
    
    def test_duplicate_email_is_case_insensitive(self, client, make_candidate, recruiter_headers):
        existing = make_candidate(email="sam@example.com")
        response = client.post(
            "/api/v1/candidates/",
            json={"first_name": "Sam", "last_name": "Again", "email": "SAM@example.com"},
            headers=recruiter_headers,
        )
        assert response.status_code == 409
        assert response.json()["error"]["details"]["candidate_id"] == existing["id"]
    
    def test_invalid_email(self, client, recruiter_headers):
        response = client.post(
            "/api/v1/candidates/",
            json={"first_name": "No", "last_name": "Mail", "email": "not-an-email"},
            headers=recruiter_headers,
        )
        assert response.status_code == 422
    
    def test_interviewer_cannot_create(self, client, interviewer_headers):
        response = client.post(
            "/api/v1/candidates/",
            json={"first_name": "A", "last_name": "B", "email": "ab@example.com"},
            headers=interviewer_headers,
        )
        assert response.status_code == 403
    
    def test_search_and_source_filter(self, client, make_candidate, recruiter_headers):
        make_candidate(first_name="Ada", last_name="Lovelace", email="ada@example.com", source="referral")
        make_candidate(first_name="Alan", last_name="Turing", email="alan@example.com", source="job_board")
        
        response = client.get("/api/v1/candidates/?q=love", headers=recruiter_headers)
        assert [candidate["email"] for candidate in response.json()] == ["ada@example.com"]
        
        response = client.get("/api/v1/candidates/?q=ALAN@", headers=recruiter_headers)
        assert [candidate["email"] for candidate in response.json()] == ["alan@example.com"]
        
        response = client.get("/api/v1/candidates/?source=job_board", headers=recruiter_headers)
        assert len(response.json()) == 1
    
    def test_update_candidate(self, client, make_candidate, recruiter_headers):
        candidate = make_candidate()
        response = client.put(
            f"/api/v1/candidates/{candidate['id']}",
            json={"headline": "Staff Engineer", "email": "NEW@example.com"},
            headers=recruiter_headers,
        )
        assert response.status_code == 200
        assert response.json()["headline"] == "Staff Engineer"
        assert response.json()["email"] == "new@example.com"
        assert response.json()["first_name"] == candidate["first_name"]
    
    def test_update_to_taken_email(self, client, make_candidate, recruiter_headers):
        first = make_candidate()
        second = make_candidate()
        response = client.put(
            f"/api/v1/candidates/{second['id']}", json={"email": first["email"]}, headers=recruiter_headers
        )
        assert response.status_code == 409
    
    def test_update_keeping_own_email(self, client, make_candidate, recruiter_headers):
        candidate = make_candidate()
        response = client.put(
            f"/api/v1/candidates/{candidate['id']}", json={"email": candidate["email"]}, headers=recruiter_headers
        )
        assert response.status_code == 200
    
    def test_get_missing_candidate(self, client, recruiter_headers):
        response = client.get("/api/v1/candidates/404", headers=recruiter_headers)
        assert response.status_code == 404
        assert response.json()["error"]["type"] == "NotFoundError"
    
    def test_delete_removes_applications(self, client, db, make_application, recruiter_headers):
        application = make_application()
        candidate_id = application["candidate_id"]
        
        response = client.delete(f"/api/v1/candidates/{candidate_id}", headers=recruiter_headers)
        assert response.status_code == 204
        assert client.get(f"/api/v1/candidates/{candidate_id}", headers=recruiter_headers).status_code == 404
        assert db.query(Application).filter(Application.id == application["id"]).first() is None
    
    def test_candidate_applications(self, client, make_job, make_candidate, make_application, recruiter_headers):
        candidate = make_candidate()
        first = make_application(job=make_job(), candidate=candidate)
        second = make_application(job=make_job(title="SRE"), candidate=candidate)
        
        response = client.get(f"/api/v1/candidates/{candidate['id']}/applications", headers=recruiter_headers)
        assert [application["id"] for application in response.json()] == [first["id"], second["id"]]
