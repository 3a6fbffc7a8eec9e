"""
Celery application.
Notification delivery runs here; in dev and tests tasks execute eagerly.
"""

import os
from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "fleetledger.settings_dev")

app = Celery("fleetledger")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
