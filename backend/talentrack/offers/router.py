"""
Offer routes
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from talentrack.core.database import get_db
from talentrack.auth.dependencies import get_current_active_user, require_recruiter
from talentrack.models.user import User
from talentrack.offers import service
from talentrack.offers.schemas import OfferCreate, OfferUpdate, OfferDecline, OfferResponse

router = APIRouter(prefix="/api/v1/offers", tags=["Offers"])


@router.post("/", response_model=OfferResponse, status_code=status.HTTP_201_CREATED)
def create_offer(
    offer_data: OfferCreate,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Draft an offer for an active application"""
    return service.create_offer(db, offer_data, current_user)


@router.get("/{offer_id}", response_model=OfferResponse)
def get_offer(
    offer_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return service.get_offer(db, offer_id)


@router.put("/{offer_id}", response_model=OfferResponse)
def update_offer(
    offer_id: int,
    offer_data: OfferUpdate,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Edit a draft offer"""
    offer = service.get_offer(db, offer_id)
    return service.update_offer(db, offer, offer_data, current_user)


@router.post("/{offer_id}/extend", response_model=OfferResponse)
def extend_offer(
    offer_id: int,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    offer = service.get_offer(db, offer_id)
    return service.extend_offer(db, offer, current_user)


@router.post("/{offer_id}/accept", response_model=OfferResponse)
def accept_offer(
    offer_id: int,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    """Record the candidate's acceptance; hires the application"""
    offer = service.get_offer(db, offer_id)
    return service.accept_offer(db, offer, current_user)


@router.post("/{offer_id}/decline", response_model=OfferResponse)
def decline_offer(
    offer_id: int,
    decline: OfferDecline,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    offer = service.get_offer(db, offer_id)
    return service.decline_offer(db, offer, current_user, reason=decline.reason)


@router.post("/{offer_id}/rescind", response_model=OfferResponse)
def rescind_offer(
    offer_id: int,
    current_user: User = Depends(require_recruiter),
    db: Session = Depends(get_db),
):
    offer = service.get_offer(db, offer_id)
    return service.rescind_offer(db, offer, current_user)
