from typing import List, Optional

from sqlalchemy.orm import Session

from speculum.models.card import Card


def get_published_cards(db: Session) -> List[Card]:
    return db.query(Card).filter(Card.published.is_(True)).order_by(Card.id.asc()).all()


def get_card(db: Session, card_id: int) -> Optional[Card]:
    return db.query(Card).filter(Card.id == card_id).first()


def create_card(
    db: Session,
    title: str,
    link: str,
    img: str,
    subtitle: Optional[str] = None,
    published: bool = True,
) -> Card:
    card = Card(title=title, subtitle=subtitle, link=link, img=img, published=published)
    db.add(card)
    db.flush()
    return card


def delete_card(db: Session, card: Card) -> None:
    db.delete(card)
    db.flush()
