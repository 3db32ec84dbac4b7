"""
Card endpoints, mounted under /cards.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from speculum.database import get_db
from speculum.dependencies.auth import require_admin
from speculum.dependencies.csrf import validate_csrf_token
from speculum.repositories.card_repository import (
    create_card,
    delete_card,
    get_card,
    get_published_cards,
)
from speculum.schemas.card import CardCreate, CardResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Cards"])


@router.get("/", response_model=List[CardResponse])
def list_cards(db: Session = Depends(get_db)):
    return get_published_cards(db)


@router.get("/{card_id}", response_model=CardResponse)
def read_card(card_id: int, db: Session = Depends(get_db)):
    card = get_card(db, card_id)
    if card is None or not card.published:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


@router.post("/", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
def add_card(
    payload: CardCreate,
    csrf_protected: None = Depends(validate_csrf_token),
    admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    card = create_card(
        db,
        title=payload.title,
        subtitle=payload.subtitle,
        link=str(payload.link),
        img=str(payload.img),
        published=payload.published,
    )
    logger.info(f"Card {card.id} created by {admin}")
    return card


@router.delete("/{card_id}")
def remove_card(
    card_id: int,
    csrf_protected: None = Depends(validate_csrf_token),
    admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    card = get_card(db, card_id)
    if card is None:
        raise HTTPException(status_code=404, detail="Card not found")

    delete_card(db, card)
    logger.info(f"Card {card_id} deleted by {admin}")
    return {"success": True, "message": "Card deleted successfully"}
