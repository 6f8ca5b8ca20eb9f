"""
Offer lifecycle service
"""
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session
import structlog

from talentrack.core.exceptions import ConflictError, NotFoundError, StateTransitionError, ValidationError
from talentrack.core.utils import utcnow
from talentrack.audit.service import record_audit
from talentrack.applications.service import application_service
from talentrack.jobs.service import invalidate_pipeline
from talentrack.models.offer import Offer, OPEN_OFFER_STATUSES
from talentrack.models.user import User
from talentrack.notifications import service as notifications
from talentrack.offers.schemas import OfferCreate, OfferUpdate

logger = structlog.get_logger()

OFFER_TRANSITIONS = {
    "draft": {"extended", "rescinded"},
    "extended": {"accepted", "declined", "rescinded"},
}


def get_offer(db: Session, offer_id: int) -> Offer:
    offer = db.query(Offer).filter(Offer.id == offer_id).first()
    if not offer:
        raise NotFoundError("Offer", str(offer_id))
    return offer


def _transition(offer: Offer, new_status: str) -> str:
    current = offer.status
    if new_status not in OFFER_TRANSITIONS.get(current, set()):
        raise StateTransitionError("offer", current, new_status)
    offer.status = new_status
    return current


def create_offer(db: Session, offer_data: OfferCreate, actor: User) -> Offer:
    """Draft an offer; an application holds at most one open offer"""
    application = application_service.get(db, offer_data.application_id)
    application_service.ensure_active(application)
    
    open_offer = next((o for o in application.offers if o.status in OPEN_OFFER_STATUSES), None)
    if open_offer is not None:
        raise ConflictError(
            "Application already has an open offer",
            details={"offer_id": open_offer.id, "status": open_offer.status},
        )
    
    offer = Offer(
        **offer_data.model_dump(exclude={"application_id", "currency"}),
        currency=offer_data.currency.upper(),
        application_id=application.id,
        status="draft",
        created_by=actor.id,
    )
    db.add(offer)
    db.flush()
    record_audit(
        db, "create", "offer", offer.id, user=actor,
        details={"application_id": application.id, "salary": offer.salary, "currency": offer.currency},
    )
    db.commit()
    db.refresh(offer)
    
    logger.info("offer_created", offer_id=offer.id, application_id=application.id)
    return offer


def update_offer(db: Session, offer: Offer, offer_data: OfferUpdate, actor: User) -> Offer:
    if offer.status != "draft":
        raise ConflictError("Only draft offers can be edited", details={"status": offer.status})
    
    changes = offer_data.model_dump(exclude_unset=True)
    if changes.get("currency"):
        changes["currency"] = changes["currency"].upper()
    for field, value in changes.items():
        if value is None and field in ("salary", "currency"):
            continue
        setattr(offer, field, value)
    
    record_audit(db, "update", "offer", offer.id, user=actor, details={"fields": sorted(changes)})
    db.commit()
    db.refresh(offer)
    return offer


def extend_offer(db: Session, offer: Offer, actor: User) -> Offer:
    """Send the offer to the candidate"""
    application_service.ensure_active(offer.application)
    _transition(offer, "extended")
    offer.extended_at = utcnow()
    record_audit(db, "extend", "offer", offer.id, user=actor)
    db.commit()
    db.refresh(offer)
    
    logger.info("offer_extended", offer_id=offer.id)
    notifications.notify_offer_extended(offer)
    return offer


def accept_offer(db: Session, offer: Offer, actor: User, today: Optional[date] = None) -> Offer:
    """Record acceptance and hire the application"""
    today = today or date.today()
    if offer.status == "extended" and offer.expires_on is not None and offer.expires_on < today:
        raise ValidationError(
            "Offer has expired",
            details={"offer_id": offer.id, "expires_on": offer.expires_on.isoformat()},
        )
    _transition(offer, "accepted")
    offer.responded_at = utcnow()
    application_service.mark_hired(offer.application, actor)
    
    record_audit(db, "accept", "offer", offer.id, user=actor, details={"application_id": offer.application_id})
    db.commit()
    db.refresh(offer)
    invalidate_pipeline(offer.application.job_id)
    
    logger.info("offer_accepted", offer_id=offer.id, application_id=offer.application_id)
    return offer


def decline_offer(db: Session, offer: Offer, actor: User, reason: Optional[str] = None) -> Offer:
    _transition(offer, "declined")
    offer.responded_at = utcnow()
    offer.decline_reason = reason
    record_audit(db, "decline", "offer", offer.id, user=actor, details={"reason": reason})
    db.commit()
    db.refresh(offer)
    
    logger.info("offer_declined", offer_id=offer.id)
    return offer


def rescind_offer(db: Session, offer: Offer, actor: User) -> Offer:
    _transition(offer, "rescinded")
    record_audit(db, "rescind", "offer", offer.id, user=actor)
    db.commit()
    db.refresh(offer)
    
    logger.info("offer_rescinded", offer_id=offer.id)
    return offer
