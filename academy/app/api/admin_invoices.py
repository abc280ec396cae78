"""Admin invoice sending endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from academy.app.core.security import get_current_admin
from academy.app.db.session import get_db
from academy.app.models.user import User
from academy.app.schemas.payroll import InvoiceSendRequest, InvoiceSendResponse
from academy.app.services.invoices import send_monthly_invoices
from academy.app.services.mailer import EmailClient, get_email_client
from academy.app.services.payroll import validate_month

router = APIRouter(prefix="/admin/invoices", tags=["admin-invoices"])


@router.post("/send", response_model=InvoiceSendResponse)
async def send_invoices(
    request: InvoiceSendRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
    email_client: EmailClient = Depends(get_email_client),
):
    month = validate_month(request.month)
    results = send_monthly_invoices(db, month, email_client, coach_id=request.coach_id)
    if not results:
        return {"message": "No data found for this month", "emails_sent": []}
    sent = sum(1 for item in results if item["status"] == "sent")
    return {"message": f"Sent {sent} of {len(results)} invoices", "emails_sent": results}
