"""
Tests for applications moving through a job's pipeline
"""
import pytest


class TestApplicationCreation:
    
    def test_placed_in_first_stage(self, make_job, make_application):
        job = make_job()
        application = make_application(job=job)
        assert application["status"] == "active"
        assert application["stage_id"] == job["stages"][0]["id"]
        assert application["stage_name"] == "Applied"
        assert application["stage_entered_at"] is not None
        assert [event["event_type"] for event in application["events"]] == ["applied"]
        assert application["events"][0]["to_stage"] == "Applied"
    
    def test_source_defaults_to_candidate_source(self, client, make_job, make_candidate, recruiter_headers):
        job = make_job()
        candidate = make_candidate(source="referral")
        response = client.post(
            "/api/v1/applications/",
            json={"candidate_id": candidate["id"], "job_id": job["id"]},
            headers=recruiter_headers,
        )
        assert response.json()["source"] == "referral"
    
    @pytest.mark.parametrize("target", [None, "on_hold", "closed"])
    def test_job_must_be_open(self, client, make_job, make_candidate, recruiter_headers, target):
        job = make_job(open_job=target is not None)
        if target is not None:
            client.post(f"/api/v1/jobs/{job['id']}/status", json={"status": target}, headers=recruiter_headers)
        candidate = make_candidate()
        
        response = client.post(
            "/api/v1/applications/",
            json={"candidate_id": candidate["id"], "job_id": job["id"]},
            headers=recruiter_headers,
        )
        assert response.status_code == 422
        assert response.json()["error"]["details"]["job_id"] == job["id"]
    
    def test_one_application_per_candidate_and_job(self, client, make_job, make_candidate, make_application, recruiter_headers):
        job = make_job()
        candidate = make_candidate()
        first = make_application(job=job, candidate=candidate)
        
        response = client.post(
            "/api/v1/applications/",
            json={"candidate_id": candidate["id"], "job_id": job["id"]},
            headers=recruiter_headers,
        )
        assert response.status_code == 409
        assert response.json()["error"]["details"]["application_id"] == first["id"]
    
    def test_unknown_candidate(self, client, make_job, recruiter_headers):
        job = make_job()
        response = client.post(
            "/api/v1/applications/", json={"candidate_id": 999, "job_id": job["id"]}, headers=recruiter_headers
        )
        assert response.status_code == 404
    
    def test_notification_queued(self, monkeypatch, make_application):
        from talentrack.notifications import service as notifications
        
        sent = []
        monkeypatch.setattr(notifications.send_email_task, "delay", lambda *args: sent.append(args))
        make_application()
        
        assert len(sent) == 1
        to, subject, _body = sent[0]
        assert to.startswith("casey")
        assert subject == "Application received: Backend Engineer"


class TestStageMoves:
    
    def test_advance_walks_the_pipeline(self, client, make_job, make_application, recruiter_headers):
        job = make_job(stages=["Applied", "Interview", "Hired"])
        application = make_application(job=job)
        
        response = client.post(f"/api/v1/applications/{application['id']}/advance", headers=recruiter_headers)
        assert response.status_code == 200
        assert response.json()["stage_name"] == "Interview"
        
        last = response.json()["events"][-1]
        assert last["event_type"] == "stage_changed"
        assert (last["from_stage"], last["to_stage"]) == ("Applied", "Interview")
    
    def test_advance_past_last_stage(self, client, make_job, make_application, recruiter_headers):
        job = make_job(stages=["Applied", "Hired"])
        application = make_application(job=job)
        client.post(f"/api/v1/applications/{application['id']}/advance", headers=recruiter_headers)
        
        response = client.post(f"/api/v1/applications/{application['id']}/advance", headers=recruiter_headers)
        assert response.status_code == 422
    
    def test_move_can_skip_and_go_back(self, client, make_job, make_application, recruiter_headers):
        job = make_job()
        application = make_application(job=job)
        offer_stage = job["stages"][3]["id"]
        screening = job["stages"][1]["id"]
        
        response = client.post(
            f"/api/v1/applications/{application['id']}/move",
            json={"stage_id": offer_stage, "comment": "Strong referral"},
            headers=recruiter_headers,
        )
        assert response.json()["stage_name"] == "Offer"
        assert response.json()["events"][-1]["details"] == {"comment": "Strong referral"}
        
        response = client.post(
            f"/api/v1/applications/{application['id']}/move",
            json={"stage_id": screening},
            headers=recruiter_headers,
        )
        assert response.json()["stage_name"] == "Screening"
    
    def test_move_to_stage_of_other_job(self, client, make_job, make_application, recruiter_headers):
        application = make_application()
        other = make_job(title="Other")
        response = client.post(
            f"/api/v1/applications/{application['id']}/move",
            json={"stage_id": other["stages"][1]["id"]},
            headers=recruiter_headers,
        )
        assert response.status_code == 422
    
    def test_move_to_current_stage(self, client, make_application, recruiter_headers):
        application = make_application()
        response = client.post(
            f"/api/v1/applications/{application['id']}/move",
            json={"stage_id": application["stage_id"]},
            headers=recruiter_headers,
        )
        assert response.status_code == 422
    
    def test_stage_moves_follow_reordering(self, client, make_job, make_application, recruiter_headers):
        job = make_job(stages=["A", "B", "C"])
        application = make_application(job=job)
        ids = [stage["id"] for stage in job["stages"]]
        client.put(
            f"/api/v1/jobs/{job['id']}/stages/order",
            json={"stage_ids": [ids[0], ids[2], ids[1]]},
            headers=recruiter_headers,
        )
        
        response = client.post(f"/api/v1/applications/{application['id']}/advance", headers=recruiter_headers)
        assert response.json()["stage_name"] == "C"


class TestClosingApplications:
    
    def test_reject_keeps_stage_and_reason(self, client, make_application, recruiter_headers):
        application = make_application()
        response = client.post(
            f"/api/v1/applications/{application['id']}/reject",
            json={"reason": "Salary expectations"},
            headers=recruiter_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "rejected"
        assert body["rejection_reason"] == "Salary expectations"
        assert body["closed_at"] is not None
        assert body["stage_name"] == "Applied"
        assert body["events"][-1]["event_type"] == "rejected"
    
    def test_closed_application_cannot_move(self, client, make_application, recruiter_headers):
        application = make_application()
        client.post(f"/api/v1/applications/{application['id']}/reject", json={}, headers=recruiter_headers)
        
        response = client.post(f"/api/v1/applications/{application['id']}/advance", headers=recruiter_headers)
        assert response.status_code == 409
        assert response.json()["error"]["details"]["status"] == "rejected"
        
        response = client.post(f"/api/v1/applications/{application['id']}/withdraw", json={}, headers=recruiter_headers)
        assert response.status_code == 409
    
    def test_withdraw(self, client, make_application, recruiter_headers):
        application = make_application()
        response = client.post(
            f"/api/v1/applications/{application['id']}/withdraw",
            json={"reason": "Accepted another offer"},
            headers=recruiter_headers,
        )
        assert response.json()["status"] == "withdrawn"
        assert response.json()["rejection_reason"] is None
    
    def test_interviewer_cannot_reject(self, client, make_application, interviewer_headers):
        application = make_application()
        response = client.post(
            f"/api/v1/applications/{application['id']}/reject", json={}, headers=interviewer_headers
        )
        assert response.status_code == 403


class TestNotesAndListing:
    
    def test_notes(self, client, make_application, interviewer, interviewer_headers, recruiter_headers):
        application = make_application()
        response = client.post(
            f"/api/v1/applications/{application['id']}/notes",
            json={"body": "Great systems design answers"},
            headers=interviewer_headers,
        )
        assert response.status_code == 201
        assert response.json()["author_id"] == interviewer.id
        
        notes = client.get(f"/api/v1/applications/{application['id']}/notes", headers=recruiter_headers).json()
        assert [note["body"] for note in notes] == ["Great systems design answers"]
    
    def test_empty_note_rejected(self, client, make_application, recruiter_headers):
        application = make_application()
        response = client.post(
            f"/api/v1/applications/{application['id']}/notes", json={"body": ""}, headers=recruiter_headers
        )
        assert response.status_code == 422
    
    def test_list_filters(self, client, make_job, make_application, recruiter_headers):
        job = make_job()
        first = make_application(job=job)
        second = make_application(job=job)
        make_application()
        client.post(f"/api/v1/applications/{second['id']}/reject", json={}, headers=recruiter_headers)
        
        response = client.get(f"/api/v1/applications/?job_id={job['id']}", headers=recruiter_headers)
        assert {application["id"] for application in response.json()} == {first["id"], second["id"]}
        
        response = client.get(
            f"/api/v1/applications/?job_id={job['id']}&status=active", headers=recruiter_headers
        )
        assert [application["id"] for application in response.json()] == [first["id"]]
    
    def test_events_endpoint(self, client, make_application, recruiter_headers):
        application = make_application()
        client.post(f"/api/v1/applications/{application['id']}/advance", headers=recruiter_headers)
        
        events = client.get(f"/api/v1/applications/{application['id']}/events", headers=recruiter_headers).json()
        assert [event["event_type"] for event in events] == ["applied", "stage_changed"]
    
    def test_empty_scorecard(self, client, make_application, recruiter_headers):
        application = make_application()
        response = client.get(f"/api/v1/applications/{application['id']}/scorecard", headers=recruiter_headers)
        assert response.json() == {
            "application_id": application["id"],
            "feedback_count": 0,
            "average_rating": None,
            "recommendations": {"strong_yes": 0, "yes": 0, "no": 0, "strong_no": 0},
        }
