import datetime
import logging

from django.core.exceptions import ObjectDoesNotExist
from django.db import transaction
from django.utils import timezone

from .. import conf
from ..models import Invoice
from ..store import FleetStores, default_stores
from .audit_helper import log_action
from .pricing import compute_tax, to_decimal

logger = logging.getLogger(__name__)


def next_invoice_number(
    issue_date: datetime.date | None = None, *, stores: FleetStores | None = None
) -> str:
    """FACT-<year>-<NNNN>, sequential within the issue year."""
    stores = stores or default_stores()
    issue_date = issue_date or timezone.localdate()
    prefix = f"{conf.invoice_prefix()}-{issue_date.year}-"

    highest = 0
    for invoice in stores.invoices.query(invoice_number__startswith=prefix):
        suffix = invoice.invoice_number[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{prefix}{highest + 1:04d}"


# ----------------------------------------------
# Invoice workflows
# ----------------------------------------------
def create_invoice(
    customer_id,
    *,
    reservation_id=None,
    issue_date: datetime.date | None = None,
    due_date: datetime.date | None = None,
    total_amount=None,
    tax_amount=None,
    notes: str = "",
    user=None,
    stores: FleetStores | None = None,
) -> Invoice:
    """
    Issue an invoice. When a reservation is given and no total, the
    reservation total is billed; tax defaults to the configured VAT rate
    on the total.
    """
    stores = stores or default_stores()
    issue_date = issue_date or timezone.localdate()
    due_date = due_date or issue_date + datetime.timedelta(days=conf.invoice_due_days())

    if total_amount is None:
        reservation = stores.reservations.get_by_id(reservation_id)
        total_amount = reservation.total_amount if reservation else 0
    total_amount = to_decimal(total_amount)
    tax_amount = compute_tax(total_amount) if tax_amount is None else to_decimal(tax_amount)

    with transaction.atomic():
        invoice = stores.invoices.create(
            invoice_number=next_invoice_number(issue_date, stores=stores),
            reservation_id=reservation_id,
            customer_id=customer_id,
            issue_date=issue_date,
            due_date=due_date,
            total_amount=total_amount,
            tax_amount=tax_amount,
            notes=notes,
        )
        log_action(
            action="create",
            instance=invoice,
            user=user,
            changes={"number": invoice.invoice_number, "total": str(total_amount)},
        )
    logger.info("Invoice %s issued", invoice.invoice_number)
    return invoice


def create_invoice_for_reservation(
    reservation_id, *, user=None, stores: FleetStores | None = None, **kwargs
) -> Invoice:
    stores = stores or default_stores()
    reservation = stores.reservations.get_by_id(reservation_id)
    if reservation is None:
        raise ObjectDoesNotExist(f"Reservation {reservation_id} does not exist")
    return create_invoice(
        reservation.customer_id,
        reservation_id=reservation.pk,
        user=user,
        stores=stores,
        **kwargs,
    )


"""Move invoice from unpaid → paid."""
def mark_invoice_paid(invoice_id, *, user=None, stores: FleetStores | None = None) -> Invoice:
    return _transition(invoice_id, "paid", user=user, stores=stores)


"""Move invoice from unpaid → cancelled."""
def cancel_invoice(invoice_id, *, user=None, stores: FleetStores | None = None) -> Invoice:
    return _transition(invoice_id, "cancelled", user=user, stores=stores)


def _transition(invoice_id, new_status, *, user=None, stores=None):
    stores = stores or default_stores()
    with transaction.atomic():
        invoice = stores.invoices.get_by_id(invoice_id)
        if invoice is None:
            raise Invoice.DoesNotExist(f"Invoice {invoice_id} does not exist")
        previous = invoice.status
        invoice.transition_to(new_status)
        log_action(
            action=new_status,
            instance=invoice,
            user=user,
            changes={"status": [previous, new_status]},
        )
    return invoice
