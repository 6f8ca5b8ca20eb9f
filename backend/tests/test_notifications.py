"""
Tests for notification emails
"""
import smtplib

import pytest

from talentrack.core.config import settings
from talentrack.tasks import notification_tasks
from talentrack.tasks.notification_tasks import send_email_task
from talentrack.notifications import service as notifications


class TestSendEmailTask:
    
    def test_skipped_without_smtp(self, monkeypatch):
        monkeypatch.setattr(settings, "SMTP_HOST", None)
        result = send_email_task.apply(args=("casey@example.com", "Hello", "Body")).get()
        assert result == {"status": "skipped", "to": "casey@example.com"}
    
    def test_sent_through_smtp(self, monkeypatch):
        delivered = []
        monkeypatch.setattr(settings, "SMTP_HOST", "smtp.example.com")
        monkeypatch.setattr(notification_tasks, "send_email", lambda *args: delivered.append(args))
        
        result = send_email_task.apply(args=("casey@example.com", "Hello", "Body")).get()
        assert result == {"status": "sent", "to": "casey@example.com"}
        assert delivered == [("casey@example.com", "Hello", "Body")]
    
    def test_smtp_failure_propagates_when_called_directly(self, monkeypatch):
        def broken(*args):
            raise smtplib.SMTPServerDisconnected("gone")
        
        monkeypatch.setattr(settings, "SMTP_HOST", "smtp.example.com")
        monkeypatch.setattr(notification_tasks, "send_email", broken)
        
        with pytest.raises(smtplib.SMTPServerDisconnected):
            send_email_task("casey@example.com", "Hello", "Body")


class TestNotificationService:
    
    def test_missing_recipient_is_not_sent(self, monkeypatch):
        sent = []
        monkeypatch.setattr(send_email_task, "delay", lambda *args: sent.append(args))
        assert notifications._dispatch(None, "Subject", "Body", "test") is False
        assert sent == []
    
    def test_enqueue_failure_does_not_fail_the_request(self, monkeypatch, client, make_job, make_candidate, recruiter_headers):
        job = make_job()
        candidate = make_candidate()
        
        def unavailable(*args):
            raise ConnectionError("broker down")
        
        monkeypatch.setattr(send_email_task, "delay", unavailable)
        response = client.post(
            "/api/v1/applications/",
            json={"candidate_id": candidate["id"], "job_id": job["id"]},
            headers=recruiter_headers,
        )
        assert response.status_code == 201
    
    def test_stage_change_and_rejection_emails(self, monkeypatch, client, make_application, recruiter_headers):
        application = make_application()
        sent = []
        monkeypatch.setattr(send_email_task, "delay", lambda *args: sent.append(args))
        
        client.post(f"/api/v1/applications/{application['id']}/advance", headers=recruiter_headers)
        client.post(f"/api/v1/applications/{application['id']}/reject", json={}, headers=recruiter_headers)
        
        subjects = [subject for _to, subject, _body in sent]
        assert subjects == ["Update on your application: Backend Engineer", "Your application for Backend Engineer"]
        assert "Screening" in sent[0][2]
    
    def test_withdrawal_sends_nothing(self, monkeypatch, client, make_application, recruiter_headers):
        application = make_application()
        sent = []
        monkeypatch.setattr(send_email_task, "delay", lambda *args: sent.append(args))
        client.post(f"/api/v1/applications/{application['id']}/withdraw", json={}, headers=recruiter_headers)
        assert sent == []
    
    def test_offer_email_mentions_salary(self, monkeypatch, client, make_application, recruiter_headers):
        application = make_application()
        offer = client.post(
            "/api/v1/offers/",
            json={"application_id": application["id"], "salary": 120000, "expires_on": "2030-02-01"},
            headers=recruiter_headers,
        ).json()
        sent = []
        monkeypatch.setattr(send_email_task, "delay", lambda *args: sent.append(args))
        client.post(f"/api/v1/offers/{offer['id']}/extend", headers=recruiter_headers)
        
        assert len(sent) == 1
        assert "120,000 USD" in sent[0][2]
        assert "2030-02-01" in sent[0][2]
