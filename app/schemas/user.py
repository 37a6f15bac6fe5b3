from typing import List
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    user_id: str
    organizations: List[str] = Field(default_factory=list, description="Ids of the organizations the user belongs to")
