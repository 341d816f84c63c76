"""
WSGI config for the OCL Services back office.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'ocl.settings')

application = get_wsgi_application()
