# Celery instance is defined in carsmotion/celery.py
# It points the worker at the Django settings and discovers fleet_core.tasks
# celery_app is the single task queue app for the whole project
from .celery import celery_app

# 'from carsmotion import *', only exports celery_app
__all__ = ("celery_app",)

""" Workers and the beat scheduler are started with
    "celery -A carsmotion worker -l info" and "celery -A carsmotion beat".
    The -A carsmotion means:
    Import carsmotion/__init__.py →
    which exposes celery_app →  now Celery knows what to run. """
