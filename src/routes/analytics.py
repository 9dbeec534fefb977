from fastapi import APIRouter, Depends
from sqlmodel import Session

from src.db.session import get_session
from src.routes.deps import require_user_id
from src.services.analytics_service import get_daily_event_stats

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/usage")
def read_usage(user_id: str = Depends(require_user_id), session: Session = Depends(get_session)):
    """
    Retorna os eventos do usuário no dia atual, agrupados por tipo.
    """
    return get_daily_event_stats(session, user_id)
