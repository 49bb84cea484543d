from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jwt.exceptions import PyJWTError
from sqlalchemy.ext.asyncio import AsyncSession

from medsched.core.config import settings
from medsched.core.security import ROLES, decode_access_token
from medsched.db.session import get_session
from medsched.schemas.actor import Actor
from medsched.services.doctor_service import DoctorService
from medsched.services.schedule_service import ScheduleService

# Tokens are issued by the clinic's identity service; this API only verifies them
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")

async def get_current_actor(token: str = Depends(oauth2_scheme)) -> Actor:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        subject = payload.get("sub")
        role = payload.get("role")
        if subject is None or role not in ROLES:
            raise credentials_exception
        return Actor(id=UUID(str(subject)), role=role)
    except (PyJWTError, ValueError):
        raise credentials_exception

async def get_schedule_service(session: AsyncSession = Depends(get_session)) -> ScheduleService:
    return ScheduleService(session)

async def get_doctor_service(session: AsyncSession = Depends(get_session)) -> DoctorService:
    return DoctorService(session)
