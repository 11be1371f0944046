# Import all models here for Alembic
from waitlist_api.models.user import User
from waitlist_api.models.waitlist_email import WaitlistEmail

__all__ = [
    "User",
    "WaitlistEmail",
]
