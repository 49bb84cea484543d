from pydantic import BaseModel
from uuid import UUID

from medsched.core.security import MANAGER_ROLES

class Actor(BaseModel):
    """Who is calling: the token subject and its role."""
    id: UUID
    role: str

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGER_ROLES

    @property
    def is_doctor(self) -> bool:
        return self.role == "doctor"
