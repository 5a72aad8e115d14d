from fastapi import APIRouter, Depends

from gestor.core.deps import get_current_user, get_store
from gestor.core.errors import success_response
from gestor.db.models import User
from gestor.db.store import Store
from gestor.services.dashboard import build_dashboard


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
def get_dashboard(
    db: Store = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return success_response(build_dashboard(db, current_user), "Estadísticas del dashboard obtenidas exitosamente")
