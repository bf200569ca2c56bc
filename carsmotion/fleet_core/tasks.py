import datetime

from celery import shared_task
from django.utils.dateparse import parse_date


@shared_task  # scheduled on the 1st of each month (CELERY_BEAT_SCHEDULE)
def generate_monthly_vehicle_expenses_task(for_date=None):
    # import services lazily to avoid circular imports at module import time
    from .services import generate_monthly_vehicle_expenses

    # beat and .delay() pass JSON, so the date may arrive as "YYYY-MM-DD"
    if isinstance(for_date, str):
        for_date = parse_date(for_date)
    elif isinstance(for_date, datetime.datetime):
        for_date = for_date.date()

    # Safe to re-run: already booked months are skipped
    return generate_monthly_vehicle_expenses(for_date)


@shared_task
def reconcile_vehicle_statuses_task():
    from .services import reconcile_vehicle_statuses

    # flips vehicles whose confirmed booking started or ended overnight
    return reconcile_vehicle_statuses()
