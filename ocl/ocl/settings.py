"""
Django settings for the OCL Services back office.

Deployment values come from OCL_* environment variables; everything defaults
to a local SQLite setup suitable for development and tests.
"""

import os
from datetime import timedelta
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


SECRET_KEY = os.getenv('OCL_SECRET_KEY', 'django-insecure-ocl-development-key')

DEBUG = env_bool('OCL_DEBUG', False)

ALLOWED_HOSTS = [h.strip() for h in os.getenv('OCL_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h.strip()]


INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'rest_framework',
    'django_filters',

    'users',
    'bookings',
    'courier_assignment',
    'settlement',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'ocl.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'ocl.wsgi.application'


# Database

DATABASES = {
    'default': {
        'ENGINE': os.getenv('OCL_DB_ENGINE', 'django.db.backends.sqlite3'),
        'NAME': os.getenv('OCL_DB_NAME', str(BASE_DIR / 'db.sqlite3')),
        'USER': os.getenv('OCL_DB_USER', ''),
        'PASSWORD': os.getenv('OCL_DB_PASSWORD', ''),
        'HOST': os.getenv('OCL_DB_HOST', ''),
        'PORT': os.getenv('OCL_DB_PORT', ''),
    }
}

AUTH_USER_MODEL = 'users.User'

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]


# Internationalization

LANGUAGE_CODE = 'en-us'

TIME_ZONE = 'Asia/Kolkata'

USE_I18N = True

USE_TZ = True


STATIC_URL = 'static/'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# REST framework

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework_simplejwt.authentication.JWTAuthentication',
        'rest_framework.authentication.SessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_FILTER_BACKENDS': [
        'django_filters.rest_framework.DjangoFilterBackend',
    ],
    'DEFAULT_PAGINATION_CLASS': 'rest_framework.pagination.LimitOffsetPagination',
    'PAGE_SIZE': 50,
}

SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(hours=int(os.getenv('OCL_ACCESS_TOKEN_HOURS', '8'))),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=7),
}


# Billing constants used by the settlement calculator

OCL_BILLING = {
    'BILLER_NAME': 'Our Courier & Logistics Services (I) Pvt.Ltd',
    'BILLER_ADDRESS': 'Rehabari, Guwahati, Kamrup',
    'BILLER_GSTIN': '18AACCO3877C1ZE',
    'BILLER_STATE': 'Assam',
    'BILLER_STATE_CODE': '18',
    'BILLER_CONTACT': '9085969696',
    'BILLER_EMAIL': 'oclindia2016@gmail.com',
    'FUEL_CHARGE_RATE': '0.10',
    'AWB_CHARGE': '50',
    'CGST_RATE': '0.09',
    'SGST_RATE': '0.09',
    'IGST_RATE': '0.18',
    'MEDICINE_COMMISSION_PER_KG': '10',
    'INVOICE_DUE_DAYS': 30,
    'SETTLEMENT_MIN_YEAR': 2020,
    'SETTLEMENT_MAX_YEAR': 2100,
    'INVOICE_TERMS': [
        'Invoice Amount To Be Paid By Same Days From The Date Of Invoice',
        'Payment Should Be Crossed Account Payee Cheque/Demand Draft or Digital Transfer '
        'Our Courier & Logistics Services (I) Pvt.Ltd',
        'Interest @ 3% Per Month Will Be Charged On Payment',
    ],
}


# Logging

LOG_LEVEL = os.getenv('OCL_LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'courier_assignment': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'settlement': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'bookings': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
    },
}
