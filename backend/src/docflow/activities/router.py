"""Activity history endpoint (read-only)."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth.dependencies import CurrentActor
from ..config import get_settings
from ..database import get_db
from ..models.user_activity import ActivityType
from .schemas import UserActivityResponse
from .service import list_user_activities

router = APIRouter(prefix="/activities", tags=["Activities"])


@router.get("", response_model=List[UserActivityResponse])
def get_activities(
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
    types: Annotated[
        Optional[List[ActivityType]],
        Query(alias="type", description="Filter by activity type; repeatable"),
    ] = None,
):
    """Recent activity of the caller, newest first."""
    activities = list_user_activities(
        db, actor.id, types=types, limit=get_settings().ACTIVITY_LIMIT
    )
    return [UserActivityResponse.model_validate(a) for a in activities]
