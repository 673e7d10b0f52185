# rentalhub/api/v1/schemas/session.py
from pydantic import BaseModel, Field
from typing import Optional

from rentalhub.domain.models.session import UserHandle


class SignInIn(BaseModel):
    """Identity asserted by the authentication provider after it verified the credentials."""
    uid: str = Field(min_length=1)
    email: Optional[str] = None
    display_name: Optional[str] = None

    def to_handle(self) -> UserHandle:
        return UserHandle(uid=self.uid, email=self.email, display_name=self.display_name)


class SessionOut(BaseModel):
    auth_checked: bool
    state: str
    user: Optional[UserHandle] = None
