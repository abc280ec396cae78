"""Monthly coach invoice emails."""

import logging
from datetime import datetime
from html import escape
from typing import Optional

from sqlalchemy.orm import Session

from academy.app.core.errors import EmailDeliveryError
from academy.app.models.adjustment import Adjustment
from academy.app.models.session import Session as SessionModel
from academy.app.models.user import User
from academy.app.services.mailer import EmailClient
from academy.app.services.payroll import adjustments_for_month, get_monthly_totals, sessions_for_month, validate_month

logger = logging.getLogger(__name__)

ACADEMY_NAME = "TricksLand Academy"


def _money(value) -> str:
    return f"${float(value or 0):.2f}"


def _month_label(month: str) -> str:
    return datetime.strptime(month, "%Y-%m").strftime("%B %Y")


def render_invoice_html(
    coach: User,
    month: str,
    totals: dict,
    sessions: list[SessionModel],
    adjustments: list[Adjustment],
) -> str:
    label = _month_label(month)
    session_rows = "".join(
        "<tr>"
        f"<td>{s.session_date.isoformat()}</td>"
        f"<td>{escape(s.course.name if s.course else '-')}</td>"
        f"<td>{s.start_time.strftime('%H:%M')}-{s.end_time.strftime('%H:%M')}</td>"
        f"<td>{s.computed_hours}h</td>"
        f"<td>{_money(s.applied_rate)}</td>"
        f"<td><strong>{_money(s.subtotal)}</strong></td>"
        "</tr>"
        for s in sessions
    )
    adjustment_html = ""
    if adjustments:
        rows = "".join(
            "<tr>"
            f"<td>{escape(a.notes or '')}</td>"
            f"<td>{a.type}</td>"
            f"<td>{'+' if a.type == 'bonus' else '-'}{_money(a.amount)}</td>"
            "</tr>"
            for a in adjustments
        )
        adjustment_html = f"<h3>Adjustments</h3><table>{rows}</table>"

    name = escape(coach.full_name or coach.email)
    return (
        "<!DOCTYPE html><html><body>"
        f"<h1>{ACADEMY_NAME}</h1><p>Monthly Invoice - {label}</p>"
        f"<p>Hi <strong>{name}</strong>,</p>"
        f"<p>Here is your earnings breakdown for <strong>{label}</strong>.</p>"
        f"<h3>Sessions ({totals['session_count']})</h3>"
        "<table><thead><tr><th>Date</th><th>Course</th><th>Time</th><th>Hours</th><th>Rate</th><th>Amount</th></tr></thead>"
        f"<tbody>{session_rows}</tbody></table>"
        f"{adjustment_html}"
        "<table>"
        f"<tr><td>Gross Earnings</td><td>{_money(totals['gross_total'])}</td></tr>"
        f"<tr><td>Bonuses</td><td>+{_money(totals['total_bonuses'])}</td></tr>"
        f"<tr><td>Discounts</td><td>-{_money(totals['total_discounts'])}</td></tr>"
        f"<tr><td><strong>Net Total</strong></td><td><strong>{_money(totals['net_total'])}</strong></td></tr>"
        "</table></body></html>"
    )


def send_monthly_invoices(
    db: Session,
    month: str,
    email_client: EmailClient,
    coach_id: Optional[int] = None,
) -> list[dict]:
    """Email each coach their invoice for ``month``; report the outcome per coach."""
    validate_month(month)
    results = []
    for totals in get_monthly_totals(db, month, coach_id=coach_id):
        coach = db.query(User).filter(User.id == totals["coach_id"]).first()
        result = {
            "coach_id": totals["coach_id"],
            "coach_name": totals["coach_name"],
            "email": coach.email if coach and coach.email else "unknown",
            "status": "sent",
        }
        if coach is None or not coach.email:
            result["status"] = "skipped: no email"
            results.append(result)
            continue

        html = render_invoice_html(
            coach,
            month,
            totals,
            sessions_for_month(db, coach.id, month),
            adjustments_for_month(db, coach.id, month),
        )
        try:
            email_client.send(coach.email, f"Your {ACADEMY_NAME} invoice for {_month_label(month)}", html)
        except EmailDeliveryError as exc:
            logger.error("Invoice email to coach=%s failed: %s", coach.id, exc.message)
            result["status"] = f"failed: {exc.message}"
        results.append(result)
    return results
