from .base import *
import os

DEBUG = True

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.environ.get('DB_NAME', 'hotelcat_db'),
        'HOST': os.environ.get('DB_HOST', 'localhost'),
        'PORT': os.environ.get('DB_PORT', '5432'),
        'USER': os.environ.get('DB_USER', 'hotelcat_user'),
        'PASSWORD': os.environ.get('DB_PASSWORD', 'hotelcat_password'),
        'OPTIONS': {
            'sslmode': os.environ.get('DB_SSLMODE', 'prefer'),
        },
    }
}

# CSRF trusted origins for local dev (admin site)
CSRF_TRUSTED_ORIGINS = [
    'http://localhost:5173',
    'http://localhost:4000',
]

CORS_ALLOW_ALL_ORIGINS = True

LOGGING['loggers'] = {
    'django.db.backends': {
        'handlers': ['console'],
        'level': os.environ.get('SQL_LOG_LEVEL', 'WARNING'),
        'propagate': False,
    },
}
