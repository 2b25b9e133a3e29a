"""
Django settings for the POS dashboard gateway.

Every value that differs between environments is read from the process
environment (optionally seeded from a `.env` file at the project root).
"""
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent.parent

load_dotenv(BASE_DIR / '.env')

SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-posdash-development-key')

DEBUG = os.getenv('DJANGO_DEBUG', 'true').lower() == 'true'

ALLOWED_HOSTS = [h.strip() for h in os.getenv('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',') if h.strip()]

INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'rest_framework',
    'posdash.core',
    'posdash.catalog',
    'posdash.inventory',
    'posdash.parties',
    'posdash.pos',
    'posdash.expenses',
    'posdash.reports',
    'posdash.dashboard',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'posdash.core.session.SessionContextMiddleware',
]

ROOT_URLCONF = 'posdash.config.urls'

WSGI_APPLICATION = 'posdash.config.wsgi.application'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

# Nothing is persisted locally; the database only exists for Django internals and tests.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

# Dashboard page state (stock adjustment lines, toasts) lives in a signed cookie.
SESSION_ENGINE = 'django.contrib.sessions.backends.signed_cookies'

# Browser routes mirror the backend and are reached both with and without a trailing slash.
APPEND_SLASH = False

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.getenv('DJANGO_TIME_ZONE', 'UTC')
USE_TZ = True
STATIC_URL = 'static/'
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

REST_FRAMEWORK = {
    'DEFAULT_RENDERER_CLASSES': ['rest_framework.renderers.JSONRenderer'],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
        'rest_framework.parsers.FormParser',
        'rest_framework.parsers.MultiPartParser',
    ],
    # Authentication belongs to the backend; the gateway only relays its cookie.
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': ['rest_framework.permissions.AllowAny'],
    'EXCEPTION_HANDLER': 'posdash.core.errors.proxy_exception_handler',
}

# Backend (system of record) connection
BACKEND_API_BASE_URL = os.getenv('BACKEND_API_BASE_URL', 'http://localhost:8000')
PROXY_DEFAULT_TIMEOUT = int(os.getenv('PROXY_DEFAULT_TIMEOUT', '30'))
PROXY_LONG_TIMEOUT = int(os.getenv('PROXY_LONG_TIMEOUT', '120'))
PROXY_RETRY_DELAY = float(os.getenv('PROXY_RETRY_DELAY', '1.0'))

# Session cookie issued by the backend and re-emitted to the browser
SESSION_TOKEN_COOKIE = 'session_token'
SESSION_TOKEN_MAX_AGE = 60 * 60 * 24
SESSION_TOKEN_SECURE = not DEBUG

PROTECTED_PATH_PREFIXES = [
    '/dashboard',
    '/administration',
    '/brand',
    '/category',
    '/products',
    '/customers',
    '/vendors',
    '/stock',
    '/expenses',
    '/salesman',
    '/customer-invoices',
    '/walkin-invoice',
]
LOGIN_URL = '/login/'

# Listing pages
DEFAULT_PAGE_SIZE = int(os.getenv('PAGE_SIZE', '8'))
MAX_PAGE_SIZE = 100
PAGE_SIZE_OPTIONS = [8, 10, 20, 50]

DEFAULT_BRANCH = os.getenv('DEFAULT_BRANCH', 'European Sports Light House')

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

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
    'loggers': {
        'posdash': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'django.request': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
    },
}
