import functools
import json
import logging

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import DatabaseError
from django.http import JsonResponse
from django.utils.dateparse import parse_date
from django.views.decorators.http import require_GET, require_POST

from .exceptions import ReservationConflictError
from .models import Reservation
from .services import (cash_book, change_reservation_status,
                       create_invoice_for_reservation, dashboard_stats,
                       export_backup, find_conflicts,
                       generate_monthly_vehicle_expenses, mark_invoice_paid,
                       quote_reservation, reconcile_vehicle_statuses,
                       record_maintenance, restore_backup, save_reservation)
from .services.reservations import as_reference

logger = logging.getLogger(__name__)


def _error_payload(exc: ValidationError):
    if hasattr(exc, "error_dict"):
        return {"ok": False, "errors": exc.message_dict}
    return {"ok": False, "errors": {"__all__": exc.messages}}


def json_endpoint(view):
    """Map workflow errors to HTTP answers.

    conflict → 409, validation → 400, unknown id → 404,
    storage failure → 503 (logged, no retry).
    """
    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except ReservationConflictError as exc:
            payload = _error_payload(exc)
            payload["conflicts"] = [r.pk for r in exc.conflicts]
            return JsonResponse(payload, status=409)
        except ValidationError as exc:
            return JsonResponse(_error_payload(exc), status=400)
        except ObjectDoesNotExist as exc:
            return JsonResponse({"ok": False, "error": str(exc)}, status=404)
        except DatabaseError:
            logger.exception("Storage failure in %s", view.__name__)
            return JsonResponse(
                {"ok": False, "error": "Erreur de stockage, veuillez réessayer."},
                status=503,
            )
    return wrapper


def _body(request) -> dict:
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except ValueError:
        raise ValidationError("Corps JSON invalide")
    if not isinstance(data, dict):
        raise ValidationError("Un objet JSON est attendu")
    return data


def _date_param(request, name, required=True):
    raw = request.GET.get(name)
    if not raw:
        if required:
            raise ValidationError({name: "Ce champ est requis"})
        return None
    value = parse_date(raw)
    if value is None:
        raise ValidationError({name: f"Date invalide: {raw}"})
    return value


def _reservation_json(reservation):
    return {
        "id": reservation.pk,
        "vehicle_id": reservation.vehicle_id,
        "customer_id": reservation.customer_id,
        "start_date": reservation.start_date,
        "end_date": reservation.end_date,
        "total_amount": reservation.total_amount,
        "status": reservation.status,
        "notes": reservation.notes,
    }


# ---------- Reservations ----------
@require_POST
@json_endpoint
def reservation_create_view(request):
    reservation = save_reservation(_body(request), user=request.user)
    return JsonResponse({"ok": True, "reservation": _reservation_json(reservation)},
                        status=201)


@require_POST
@json_endpoint
def reservation_update_view(request, reservation_id):
    reservation = save_reservation(_body(request), reservation_id, user=request.user)
    return JsonResponse({"ok": True, "reservation": _reservation_json(reservation)})


@require_POST
@json_endpoint
def reservation_status_view(request, reservation_id):
    status = _body(request).get("status")
    if not status:
        raise ValidationError({"status": "Ce champ est requis"})
    reservation = change_reservation_status(reservation_id, status, user=request.user)
    return JsonResponse({"ok": True, "status": reservation.status})


@require_POST
@json_endpoint
def reservation_invoice_view(request, reservation_id):
    invoice = create_invoice_for_reservation(reservation_id, user=request.user)
    return JsonResponse({
        "ok": True,
        "invoice_number": invoice.invoice_number,
        "total_amount": invoice.total_amount,
        "tax_amount": invoice.tax_amount,
        "due_date": invoice.due_date,
    }, status=201)


@require_POST
@json_endpoint
def invoice_pay_view(request, invoice_id):
    invoice = mark_invoice_paid(invoice_id, user=request.user)
    return JsonResponse({"ok": True, "status": invoice.status})


# ---------- Vehicles ----------
@require_GET
@json_endpoint
def vehicle_availability_view(request, vehicle_id):
    start = _date_param(request, "start_date")
    end = _date_param(request, "end_date")
    exclude = as_reference(Reservation, "id", request.GET.get("exclude"))
    conflicts = find_conflicts(vehicle_id, start, end, exclude)
    return JsonResponse({
        "available": not conflicts,
        "conflicts": [_reservation_json(r) for r in conflicts],
    })


@require_GET
@json_endpoint
def vehicle_quote_view(request, vehicle_id):
    quote = quote_reservation(
        vehicle_id, _date_param(request, "start_date"), _date_param(request, "end_date"))
    return JsonResponse(quote)


@require_POST
@json_endpoint
def reconcile_statuses_view(request):
    changed = reconcile_vehicle_statuses(user=request.user)
    return JsonResponse({"ok": True, "changed": changed})


# ---------- Maintenance & ledger ----------
@require_POST
@json_endpoint
def maintenance_create_view(request):
    record, expense = record_maintenance(_body(request), user=request.user)
    return JsonResponse({
        "ok": True,
        "maintenance_id": record.pk,
        "transaction_id": expense.pk if expense else None,
    }, status=201)


@require_POST
@json_endpoint
def monthly_expenses_view(request):
    raw = _body(request).get("date")
    for_date = parse_date(raw) if raw else None
    if raw and for_date is None:
        raise ValidationError({"date": f"Date invalide: {raw}"})
    created = generate_monthly_vehicle_expenses(for_date, user=request.user)
    return JsonResponse({"ok": True, "created": created})


# ---------- Reports ----------
@require_GET
@json_endpoint
def cash_book_view(request, year, month):
    if not 1 <= month <= 12:
        raise ValidationError({"month": "Mois invalide"})
    return JsonResponse(cash_book(year, month))


@require_GET
@json_endpoint
def dashboard_view(request):
    return JsonResponse(dashboard_stats())


# ---------- Backup ----------
@require_GET
@json_endpoint
def backup_export_view(request):
    response = JsonResponse(export_backup())
    response["Content-Disposition"] = 'attachment; filename="carsmotion-backup.json"'
    return response


@require_POST
@json_endpoint
def backup_restore_view(request):
    counts = restore_backup(_body(request))
    return JsonResponse({"ok": True, "restored": counts})
