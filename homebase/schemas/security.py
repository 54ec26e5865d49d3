from pydantic import BaseModel
from datetime import datetime


class CsrfTokenResponse(BaseModel):
    """Token to send back in the X-CSRF-Token header until it expires."""
    csrf_token: str
    expires_at: datetime
