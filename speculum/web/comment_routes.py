"""
Comment endpoints, mounted under /comments.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from speculum.database import get_db
from speculum.dependencies.auth import require_admin
from speculum.dependencies.csrf import validate_csrf_token
from speculum.repositories.comment_repository import (
    create_comment,
    delete_comment,
    get_approved_comments,
    get_comment,
)
from speculum.repositories.post_repository import get_post_by_id
from speculum.schemas.comment import CommentCreate, CommentResponse
from speculum.services.rate_limit_service import check_comment_rate_limit
from speculum.utils.ip_utils import get_client_ip

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Comments"])


@router.get("/{post_id}", response_model=List[CommentResponse])
def list_comments(post_id: int, db: Session = Depends(get_db)):
    return get_approved_comments(db, post_id)


@router.post(
    "/", response_model=CommentResponse, status_code=status.HTTP_201_CREATED
)
def add_comment(
    payload: CommentCreate,
    request: Request,
    csrf_protected: None = Depends(validate_csrf_token),
    db: Session = Depends(get_db),
):
    client_ip = get_client_ip(request)
    allowed, retry_after = check_comment_rate_limit(client_ip)
    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many comments. Please slow down.",
            headers={"Retry-After": str(retry_after)},
        )

    post = get_post_by_id(db, payload.post_id)
    if post is None or not post.is_visible:
        raise HTTPException(status_code=404, detail="Post not found")

    comment = create_comment(
        db,
        post_id=post.id,
        username=payload.username.strip(),
        text=payload.text.strip(),
        ip_address=client_ip,
    )
    logger.info(f"Comment {comment.id} added to post {post.id}")
    return comment


@router.delete("/{post_id}/{comment_id}")
def remove_comment(
    post_id: int,
    comment_id: int,
    csrf_protected: None = Depends(validate_csrf_token),
    admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    comment = get_comment(db, post_id, comment_id)
    if comment is None:
        raise HTTPException(status_code=404, detail="Comment not found")

    delete_comment(db, comment)
    logger.info(f"Comment {comment_id} on post {post_id} deleted by {admin}")
    return {"success": True, "message": "Comment deleted successfully"}
