from __future__ import annotations
import os
from celery import Celery

# ensure Django settings are set for Celery
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "carsmotion.settings")

# name should match the project package
celery_app = Celery("carsmotion")

# read config from Django settings, using CELERY_ prefix
# (broker url, beat schedule, eager mode for tests)
celery_app.config_from_object("django.conf:settings", namespace="CELERY")

# autoload tasks from installed apps (fleet_core.tasks)
celery_app.autodiscover_tasks()
