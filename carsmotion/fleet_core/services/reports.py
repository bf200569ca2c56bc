import calendar
import datetime
from decimal import Decimal

from django.db import models
from django.db.models.functions import Coalesce
from django.utils import timezone

from .. import conf
from ..store import FleetStores, default_stores

ZERO = Decimal("0.00")


def _sum(qs):
    return qs.aggregate(
        total=Coalesce(models.Sum("amount"), ZERO,
                       output_field=models.DecimalField())
    )["total"]


def _shift_month(day: datetime.date, months: int) -> datetime.date:
    index = day.year * 12 + (day.month - 1) + months
    return datetime.date(index // 12, index % 12 + 1, 1)


# ----------------------------
# Cash book
# ----------------------------
def cash_book(year: int, month: int, *, stores: FleetStores | None = None) -> dict:
    """
    Daily income / expense / running balance for one calendar month.

    opening_balance is the net of every entry dated before the month,
    closing_balance = opening_balance + month balance.
    """
    stores = stores or default_stores()
    ledger = stores.transactions.objects
    first_day = datetime.date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]

    before = ledger.filter(date__lt=first_day)
    opening = _sum(before.filter(type="income")) - _sum(before.filter(type="expense"))

    # one query for the month, grouped per day and type
    per_day = {}
    rows = (
        ledger.in_month(year, month)
        .order_by()
        .values("date", "type")
        .annotate(total=models.Sum("amount"))
    )
    for row in rows:
        per_day.setdefault(row["date"], {})[row["type"]] = row["total"]

    running = opening
    days = []
    for offset in range(days_in_month):
        day = first_day + datetime.timedelta(days=offset)
        income = per_day.get(day, {}).get("income") or ZERO
        expense = per_day.get(day, {}).get("expense") or ZERO
        running += income - expense
        days.append({
            "date": day,
            "income": income,
            "expense": expense,
            "balance": income - expense,
            "cumulative_balance": running,
        })

    month_income = sum((d["income"] for d in days), ZERO)
    month_expense = sum((d["expense"] for d in days), ZERO)
    return {
        "year": year,
        "month": month,
        "opening_balance": opening,
        "income": month_income,
        "expense": month_expense,
        "balance": month_income - month_expense,
        "closing_balance": opening + month_income - month_expense,
        "days": days,
    }


# ----------------------------
# Dashboard
# ----------------------------
def dashboard_stats(
    today: datetime.date | None = None, *, stores: FleetStores | None = None
) -> dict:
    stores = stores or default_stores()
    today = today or timezone.localdate()
    vehicles = stores.vehicles.objects
    ledger = stores.transactions.objects

    revenue = []
    for back in range(9, -1, -1):
        month = _shift_month(today, -back)
        revenue.append({
            "month": month.strftime("%Y-%m"),
            "amount": _sum(ledger.income().in_month(month.year, month.month)),
        })

    return {
        "total_vehicles": vehicles.count(),
        "available_vehicles": vehicles.filter(status="available").count(),
        "vehicles_in_maintenance": vehicles.filter(status="maintenance").count(),
        "active_reservations": stores.reservations.objects.confirmed()
        .filter(end_date__gte=today).count(),
        "monthly_revenue": _sum(ledger.income().in_month(today.year, today.month)),
        "revenue_by_month": revenue,
    }


# ----------------------------
# Maintenance alerts
# ----------------------------
def _is_due(last_record, vehicle, threshold, today) -> bool:
    # never done → due
    if last_record is None:
        return True
    next_date = last_record.date + datetime.timedelta(days=threshold["days"])
    next_km = last_record.mileage + threshold["km"]
    return next_date < today or vehicle.mileage >= next_km


def maintenance_alerts(
    today: datetime.date | None = None, *, stores: FleetStores | None = None
) -> list:
    """Vehicles whose service or technical inspection is due."""
    stores = stores or default_stores()
    today = today or timezone.localdate()
    thresholds = conf.maintenance_thresholds()
    records = stores.maintenance.objects

    alerts = []
    for vehicle in stores.vehicles.get_all():
        due = {}
        for kind in ("service", "inspection"):
            last = (
                records.filter(vehicle_id=vehicle.pk, type=kind)
                .order_by("-date", "-id")
                .first()
            )
            due[kind] = _is_due(last, vehicle, thresholds[kind], today)
        if due["service"] or due["inspection"]:
            alerts.append({
                "vehicle": vehicle,
                "service": due["service"],
                "inspection": due["inspection"],
            })
    return alerts
