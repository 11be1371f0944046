from fastapi import Depends

from waitlist_api.services.storage import IStorage, get_storage
from waitlist_api.services.waitlist_service import WaitlistService


def get_waitlist_service(storage: IStorage = Depends(get_storage)) -> WaitlistService:
    """Waitlist flow bound to the process-wide storage backend."""
    return WaitlistService(storage)
