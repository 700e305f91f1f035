from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from slotwise.core.db import get_session
from slotwise.services.store import BookingStore, SqlBookingStore


async def get_store(session: AsyncSession = Depends(get_session)) -> BookingStore:
    """Storage collaborator for one request; the session owns the transaction."""
    return SqlBookingStore(session)
