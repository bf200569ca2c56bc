import json
import logging

from django.core.management.color import no_style
from django.core.serializers.json import DjangoJSONEncoder
from django.db import connection, transaction
from django.utils import timezone

from ..models import AgencySettings
from ..store import FleetStores, default_stores

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"
BACKUP_DATE_KEY = "backupDate"


def _record(instance) -> dict:
    # attname keeps references as plain ids ("vehicle_id": 3)
    return {
        f.attname: f.value_from_object(instance)
        for f in instance._meta.concrete_fields
    }


def _settings_record(settings_row) -> dict:
    record = _record(settings_row)
    record.pop("id", None)
    return record


def export_backup(*, stores: FleetStores | None = None) -> dict:
    """
    One JSON-ready document with every collection, the agency settings
    and the export timestamp.
    """
    stores = stores or default_stores()
    document = {
        name: [_record(item) for item in store.objects.order_by("pk")]
        for name, store in stores.collections()
    }
    document[SETTINGS_KEY] = _settings_record(AgencySettings.load())
    document[BACKUP_DATE_KEY] = timezone.now()
    # dates, datetimes and decimals become strings
    return json.loads(json.dumps(document, cls=DjangoJSONEncoder))


def _build(model, raw: dict):
    """Instance from a backup record; unknown keys are ignored and
    missing ones take the model default."""
    values = {}
    for field in model._meta.concrete_fields:
        for key in (field.attname, field.name):
            if key in raw:
                values[field.attname] = field.to_python(raw[key])
                break
    return model(**values)


def _reset_sequences(models_list):
    # ids are restored verbatim, move Postgres sequences past them
    statements = connection.ops.sequence_reset_sql(no_style(), models_list)
    if statements:
        with connection.cursor() as cursor:
            for sql in statements:
                cursor.execute(sql)


def restore_backup(document: dict, *, stores: FleetStores | None = None) -> dict:
    """
    Whole-document overwrite: each collection present in ``document``
    replaces the stored one (ids kept, no ledger / status side effects).
    Collections absent from the document are left untouched.
    Returns the number of records restored per collection.
    """
    stores = stores or default_stores()
    counts = {}

    with transaction.atomic():
        restored_models = []
        for name, store in stores.collections():
            if name not in document or document[name] is None:
                continue
            model = store.model
            model.objects.all().delete()
            rows = document[name]
            instances = [_build(model, raw) for raw in rows]
            created_at = [instance.created_at for instance in instances]
            model.objects.bulk_create(instances)

            # auto_now_add overwrote created_at during the insert
            for instance, stamp in zip(instances, created_at):
                if stamp is not None and instance.pk is not None:
                    model.objects.filter(pk=instance.pk).update(created_at=stamp)

            restored_models.append(model)
            counts[name] = len(instances)

        _reset_sequences(restored_models)

        agency = AgencySettings.load()
        if document.get(SETTINGS_KEY):
            restored = _build(AgencySettings, document[SETTINGS_KEY])
            for field in AgencySettings._meta.concrete_fields:
                if field.primary_key:
                    continue
                if field.attname in document[SETTINGS_KEY]:
                    setattr(agency, field.attname, getattr(restored, field.attname))
        agency.last_backup_date = timezone.now()
        agency.save()

    logger.info("Backup restored: %s", counts)
    return counts


def reset_all_data(*, stores: FleetStores | None = None) -> None:
    """Empty the six collections, agency settings are kept."""
    stores = stores or default_stores()
    with transaction.atomic():
        for _, store in stores.collections():
            store.objects.all().delete()
        agency = AgencySettings.load()
        agency.last_backup_date = timezone.now()
        agency.save()
    logger.warning("All fleet data has been reset")
