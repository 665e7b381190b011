from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import StatsOut
from storefront.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=StatsOut)
def get_stats(admin: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    return AdminService(db).get_stats()
