from typing import List, Optional

from sqlalchemy.orm import Session

from speculum.models.comment import Comment


def get_approved_comments(db: Session, post_id: int) -> List[Comment]:
    """Approved comments of a post, oldest first."""
    return (
        db.query(Comment)
        .filter(Comment.post_id == post_id, Comment.approved.is_(True))
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )


def get_comment(db: Session, post_id: int, comment_id: int) -> Optional[Comment]:
    return (
        db.query(Comment)
        .filter(Comment.id == comment_id, Comment.post_id == post_id)
        .first()
    )


def create_comment(
    db: Session,
    post_id: int,
    username: str,
    text: str,
    ip_address: Optional[str],
) -> Comment:
    comment = Comment(
        post_id=post_id,
        username=username or "Anonym",
        text=text,
        ip_address=ip_address,
    )
    db.add(comment)
    db.flush()
    return comment


def delete_comment(db: Session, comment: Comment) -> None:
    db.delete(comment)
    db.flush()
