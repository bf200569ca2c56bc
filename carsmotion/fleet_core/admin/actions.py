from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from ..services import (cancel_invoice, change_reservation_status,
                        mark_invoice_paid)

# ---------- Admin actions ----------


def _move_reservations(modeladmin, request, queryset, new_status):
    """
    Run each selected reservation through the save workflow so the
    vehicle status and the ledger follow, one transaction per row.
    """
    success = 0
    for reservation in queryset:
        try:
            change_reservation_status(reservation.pk, new_status, user=request.user)
            success += 1
        except ValidationError as exc:
            modeladmin.message_user(
                request,
                _("Reservation %(pk)s: %(err)s") % {
                    "pk": reservation.pk, "err": "; ".join(exc.messages)},
                level=messages.ERROR,
            )

    total = queryset.count()
    modeladmin.message_user(
        request,
        _("%(success)d of %(total)d reservations updated.") % {
            "success": success, "total": total},
        level=messages.SUCCESS if success == total else messages.WARNING,
    )


@admin.action(description="Confirm selected reservations")
def confirm_reservations(modeladmin, request, queryset):
    _move_reservations(modeladmin, request, queryset, "confirmed")


@admin.action(description="Mark selected reservations as Completed")
def complete_reservations(modeladmin, request, queryset):
    _move_reservations(modeladmin, request, queryset, "completed")


@admin.action(description="Cancel selected reservations")
def cancel_reservations(modeladmin, request, queryset):
    _move_reservations(modeladmin, request, queryset, "cancelled")


""" call invoice.transition_to("paid") through the invoicing service """


@admin.action(description="Mark selected invoices as Paid")
def mark_inv_as_paid(modeladmin, request, queryset):
    for inv in queryset:
        try:
            mark_invoice_paid(inv.pk, user=request.user)
        except ValidationError as e:
            modeladmin.message_user(
                request, f"{inv}: {'; '.join(e.messages)}", level=messages.ERROR)


@admin.action(description="Cancel selected invoices")
def mark_inv_as_cancelled(modeladmin, request, queryset):
    for inv in queryset:
        try:
            cancel_invoice(inv.pk, user=request.user)
        except ValidationError as e:
            modeladmin.message_user(
                request, f"{inv}: {'; '.join(e.messages)}", level=messages.ERROR)
