"""
WSGI config for lab_work_orders project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'lab_work_orders.settings')

application = get_wsgi_application()
