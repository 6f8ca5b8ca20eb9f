"""
Tests for the offer lifecycle and hiring
"""
import pytest


@pytest.fixture
def make_offer(client, recruiter_headers):
    def _make_offer(application, extend=False, **overrides):
        payload = {"application_id": application["id"], "salary": 120000, "currency": "usd"}
        payload.update(overrides)
        response = client.post("/api/v1/offers/", json=payload, headers=recruiter_headers)
        assert response.status_code == 201, response.text
        offer = response.json()
        if extend:
            response = client.post(f"/api/v1/offers/{offer['id']}/extend", headers=recruiter_headers)
            assert response.status_code == 200, response.text
            offer = response.json()
        return offer
    
    return _make_offer


class TestOfferDrafts:
    
    def test_create_draft(self, make_application, make_offer):
        offer = make_offer(make_application(), bonus=10000, start_date="2030-03-01")
        assert offer["status"] == "draft"
        assert offer["currency"] == "USD"
        assert offer["bonus"] == 10000
        assert offer["start_date"] == "2030-03-01"
    
    def test_one_open_offer_per_application(self, client, make_application, make_offer, recruiter_headers):
        application = make_application()
        first = make_offer(application)
        response = client.post(
            "/api/v1/offers/", json={"application_id": application["id"], "salary": 99000}, headers=recruiter_headers
        )
        assert response.status_code == 409
        assert response.json()["error"]["details"]["offer_id"] == first["id"]
    
    def test_salary_must_be_positive(self, client, make_application, recruiter_headers):
        application = make_application()
        response = client.post(
            "/api/v1/offers/", json={"application_id": application["id"], "salary": 0}, headers=recruiter_headers
        )
        assert response.status_code == 422
    
    def test_edit_draft_only(self, client, make_application, make_offer, recruiter_headers):
        offer = make_offer(make_application())
        response = client.put(f"/api/v1/offers/{offer['id']}", json={"salary": 125000}, headers=recruiter_headers)
        assert response.json()["salary"] == 125000
        
        client.post(f"/api/v1/offers/{offer['id']}/extend", headers=recruiter_headers)
        response = client.put(f"/api/v1/offers/{offer['id']}", json={"salary": 130000}, headers=recruiter_headers)
        assert response.status_code == 409
    
    def test_no_offer_for_closed_application(self, client, make_application, recruiter_headers):
        application = make_application()
        client.post(f"/api/v1/applications/{application['id']}/reject", json={}, headers=recruiter_headers)
        response = client.post(
            "/api/v1/offers/", json={"application_id": application["id"], "salary": 99000}, headers=recruiter_headers
        )
        assert response.status_code == 409


class TestOfferTransitions:
    
    def test_extend_sets_timestamp(self, make_application, make_offer):
        offer = make_offer(make_application(), extend=True)
        assert offer["status"] == "extended"
        assert offer["extended_at"] is not None
    
    @pytest.mark.parametrize("action, requested", [("accept", "accepted"), ("decline", "declined")])
    def test_draft_cannot_be_answered(self, client, make_application, make_offer, recruiter_headers, action, requested):
        offer = make_offer(make_application())
        response = client.post(f"/api/v1/offers/{offer['id']}/{action}", json={}, headers=recruiter_headers)
        assert response.status_code == 409
        assert response.json()["error"]["details"] == {"resource": "offer", "current": "draft", "requested": requested}
    
    def test_decline_then_new_offer(self, client, make_application, make_offer, recruiter_headers):
        application = make_application()
        offer = make_offer(application, extend=True)
        response = client.post(
            f"/api/v1/offers/{offer['id']}/decline", json={"reason": "Counter offer"}, headers=recruiter_headers
        )
        assert response.json()["status"] == "declined"
        assert response.json()["decline_reason"] == "Counter offer"
        
        second = make_offer(application, salary=135000)
        assert second["status"] == "draft"
        
        offers = client.get(f"/api/v1/applications/{application['id']}/offers", headers=recruiter_headers).json()
        assert [o["status"] for o in offers] == ["declined", "draft"]
    
    def test_rescind_is_final(self, client, make_application, make_offer, recruiter_headers):
        offer = make_offer(make_application(), extend=True)
        assert client.post(f"/api/v1/offers/{offer['id']}/rescind", headers=recruiter_headers).status_code == 200
        assert client.post(f"/api/v1/offers/{offer['id']}/extend", headers=recruiter_headers).status_code == 409
    
    def test_expired_offer_cannot_be_accepted(self, client, make_application, make_offer, recruiter_headers):
        offer = make_offer(make_application(), extend=True, expires_on="2000-01-01")
        response = client.post(f"/api/v1/offers/{offer['id']}/accept", headers=recruiter_headers)
        assert response.status_code == 422
        assert response.json()["error"]["details"]["expires_on"] == "2000-01-01"


class TestHiring:
    
    def test_accept_hires_into_last_stage(self, client, make_job, make_application, make_offer, recruiter_headers):
        job = make_job(openings=2)
        application = make_application(job=job)
        offer = make_offer(application, extend=True)
        
        response = client.post(f"/api/v1/offers/{offer['id']}/accept", headers=recruiter_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "accepted"
        assert response.json()["responded_at"] is not None
        
        hired = client.get(f"/api/v1/applications/{application['id']}", headers=recruiter_headers).json()
        assert hired["status"] == "hired"
        assert hired["stage_name"] == "Hired"
        assert hired["hired_at"] is not None
        assert hired["events"][-1]["event_type"] == "hired"
        
        # One of two openings filled
        assert client.get(f"/api/v1/jobs/{job['id']}", headers=recruiter_headers).json()["status"] == "open"
    
    def test_last_hire_fills_the_job(self, client, make_job, make_application, make_offer, recruiter_headers):
        job = make_job()
        application = make_application(job=job)
        other = make_application(job=job)
        offer = make_offer(application, extend=True)
        client.post(f"/api/v1/offers/{offer['id']}/accept", headers=recruiter_headers)
        
        filled = client.get(f"/api/v1/jobs/{job['id']}", headers=recruiter_headers).json()
        assert filled["status"] == "filled"
        assert filled["closed_at"] is not None
        
        # Filled jobs take no new applications but existing ones can still close
        response = client.post(f"/api/v1/applications/{other['id']}/reject", json={}, headers=recruiter_headers)
        assert response.status_code == 200
        
        pipeline = client.get(f"/api/v1/jobs/{job['id']}/pipeline", headers=recruiter_headers).json()
        assert pipeline["status_counts"]["hired"] == 1
    
    def test_hired_application_is_closed(self, client, make_application, make_offer, recruiter_headers):
        application = make_application()
        offer = make_offer(application, extend=True)
        client.post(f"/api/v1/offers/{offer['id']}/accept", headers=recruiter_headers)
        
        response = client.post(f"/api/v1/applications/{application['id']}/advance", headers=recruiter_headers)
        assert response.status_code == 409
