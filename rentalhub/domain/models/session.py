from pydantic import BaseModel, Field
from typing import Optional

class UserHandle(BaseModel):
    """Opaque identity issued by the authentication service. Routing only checks that one exists."""
    uid: str = Field(min_length=1)
    email: Optional[str] = None
    display_name: Optional[str] = None

    model_config = {"frozen": True}  # immuable = safe
