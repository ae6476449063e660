from fastapi import APIRouter, Depends

from mindcare.models import User
from mindcare.schemas import BookingSummaryReq, BookingSummary
from mindcare.services.auth_service import require_admin
from mindcare.services.booking_helpers import summarize_month

router = APIRouter(prefix="/admin/bookings", tags=["admin-bookings"])

@router.post("/summary", response_model=BookingSummary)
async def month_summary(
    req: BookingSummaryReq,
    admin: User = Depends(require_admin)
):
    """
    Revenue of completed bookings for one calendar month (month is zero-indexed).
    Bookings come from the booking system as-is; malformed rows are skipped, not rejected.
    """
    return summarize_month(req.bookings, req.month, req.year)
