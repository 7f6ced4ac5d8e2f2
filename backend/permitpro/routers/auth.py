from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from permitpro.database import get_db
from permitpro.schemas.auth import LoginRequest, LoginResponse
from permitpro.services.auth_service import login_or_create

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(req: LoginRequest, db: Session = Depends(get_db)):
    user = login_or_create(db, req.email, req.password)
    return LoginResponse(name=user.name, role=user.role)
