from django.db import models


# ---------- Agency settings (singleton) ----------
class AgencySettings(models.Model):
    """Company details printed on invoices, plus backup bookkeeping.
    Only one row (pk=1) ever exists."""

    company_name = models.CharField(max_length=200, blank=True, default="")
    company_address = models.CharField(max_length=255, blank=True, default="")
    company_phone = models.CharField(max_length=30, blank=True, default="")
    company_email = models.EmailField(blank=True, default="")
    vat_number = models.CharField(max_length=50, blank=True, default="")
    bank_details = models.TextField(blank=True, default="")
    logo_url = models.URLField(blank=True, default="")
    last_backup_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Agency settings"
        verbose_name_plural = "Agency settings"

    def __str__(self):
        return self.company_name or "Agency settings"

    def save(self, *args, **kwargs):
        self.pk = 1  # singleton
        if self._state.adding and AgencySettings.objects.filter(pk=1).exists():
            # overwrite the existing row instead of inserting a second one
            self._state.adding = False
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        # the settings row is never removed, only edited
        return 0, {}

    @classmethod
    def load(cls):
        obj, _ = cls.objects.get_or_create(pk=1)
        return obj
