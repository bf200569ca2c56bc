from django.db import models

# -----------------------------------------
# Query helpers for the reservation engine
# -----------------------------------------
# Define subclass of Django's QuerySet
class ReservationQuerySet(models.QuerySet):
    def for_vehicle(self, vehicle_id):
        return self.filter(vehicle_id=vehicle_id)

    # every status except cancelled blocks the calendar
    def active(self):
        return self.exclude(status="cancelled")

    def confirmed(self):
        return self.filter(status="confirmed")

    # inclusive overlap: NOT(end < start_other OR end_other < start)
    def overlapping(self, start_date, end_date):
        return self.filter(start_date__lte=end_date, end_date__gte=start_date)

    def covering(self, day):
        return self.filter(start_date__lte=day, end_date__gte=day)


# Attach ReservationQuerySet to .objects
class ReservationManager(models.Manager):
    def get_queryset(self):
        return ReservationQuerySet(self.model, using=self._db)

    def for_vehicle(self, vehicle_id):
        return self.get_queryset().for_vehicle(vehicle_id)

    def confirmed(self):
        return self.get_queryset().confirmed()


class TransactionQuerySet(models.QuerySet):
    def income(self):
        return self.filter(type="income")

    def expense(self):
        return self.filter(type="expense")

    def in_month(self, year, month):
        return self.filter(date__year=year, date__month=month)

    def for_source(self, source_type, source_id):
        return self.filter(source_type=source_type, source_id=source_id)


class TransactionManager(models.Manager):
    def get_queryset(self):
        return TransactionQuerySet(self.model, using=self._db)

    def income(self):
        return self.get_queryset().income()

    def expense(self):
        return self.get_queryset().expense()

    def in_month(self, year, month):
        return self.get_queryset().in_month(year, month)

    def for_source(self, source_type, source_id):
        return self.get_queryset().for_source(source_type, source_id)
