"""GET /notifications, PUT /notifications/{id}/read"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from debt_ledger.api.dependencies import get_current_identity
from debt_ledger.api.v1.schemas import MarkReadResponse, NotificationListResponse, NotificationSchema
from debt_ledger.domain.exceptions import NotificationNotFoundError
from debt_ledger.domain.models import Identity
from debt_ledger.infrastructure.database.repositories import NotificationRepository
from debt_ledger.infrastructure.database.session import get_db

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    is_read: Optional[bool] = Query(None, description="false = unread only"),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    notifications = NotificationRepository(db).list_for_user(identity.id, only_unread=is_read is False)
    return NotificationListResponse(
        notifications=[NotificationSchema.model_validate(n) for n in notifications]
    )


@router.put("/{notification_id}/read", response_model=MarkReadResponse)
def mark_notification_read(
    notification_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    if not NotificationRepository(db).mark_read(notification_id, identity.id):
        raise NotificationNotFoundError()

    db.commit()
    return MarkReadResponse(success=True)
