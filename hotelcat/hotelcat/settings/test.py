from .base import *
import tempfile

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

SIMPLE_JWT['SIGNING_KEY'] = 'test-signing-key-with-enough-length-for-hs256'

MEDIA_ROOT = Path(tempfile.mkdtemp(prefix='hotelcat-uploads-'))

LOGGING['root']['level'] = 'WARNING'
