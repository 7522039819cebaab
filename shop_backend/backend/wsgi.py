# backend/wsgi.py
"""
WSGI entrypoint (gunicorn / uwsgi).

Falls back to dev settings; deployments set
DJANGO_SETTINGS_MODULE=backend.settings.prod and run `manage.py migrate`
before starting workers.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
