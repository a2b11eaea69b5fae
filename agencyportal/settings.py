import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

# ---------------------------------
#   .env
# ---------------------------------
env_path = BASE_DIR / ".env"
if env_path.exists():
    load_dotenv(env_path)

# ---------------------------------
#   Security / Debug
# ---------------------------------
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "change-me-in-development-only")

DEBUG = os.getenv("DJANGO_DEBUG", "True") == "True"

# e.g. "127.0.0.1 localhost portal.example.com"
_raw_hosts = os.getenv("DJANGO_ALLOWED_HOSTS", "")
if _raw_hosts.strip():
    ALLOWED_HOSTS = _raw_hosts.split()
else:
    ALLOWED_HOSTS = ["127.0.0.1", "localhost", "testserver"]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # portal apps
    "core.apps.CoreConfig",
    "website.apps.WebsiteConfig",
    "clients.apps.ClientsConfig",
    "sales.apps.SalesConfig",
    "accounting.apps.AccountingConfig",
    "payments.apps.PaymentsConfig",
    "portal.apps.PortalConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "agencyportal.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "agencyportal.wsgi.application"

# ---------------------------------
#   Database
# ---------------------------------
# SQLite for development; PostgreSQL in production so concurrent
# identifier allocation is serialized by row locks.
if os.getenv("DJANGO_DB_ENGINE", "sqlite") == "postgresql":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.getenv("POSTGRES_DB", "agencyportal"),
            "USER": os.getenv("POSTGRES_USER", "postgres"),
            "PASSWORD": os.getenv("POSTGRES_PASSWORD", ""),
            "HOST": os.getenv("POSTGRES_HOST", "localhost"),
            "PORT": os.getenv("POSTGRES_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
            # writers wait on the lock instead of failing at once
            "OPTIONS": {"timeout": 20},
            # file-backed test database so threaded tests share one database
            "TEST": {"NAME": BASE_DIR / "test_db.sqlite3"},
        }
    }

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en"
TIME_ZONE = "Asia/Kolkata"
USE_I18N = True
USE_TZ = True

# -----------------------------
#   Static
# -----------------------------
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

LOGIN_URL = "login"
LOGIN_REDIRECT_URL = "portal:dashboard"
LOGOUT_REDIRECT_URL = "/"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# -----------------------------
#   Email
# -----------------------------
EMAIL_BACKEND = os.getenv(
    "EMAIL_BACKEND", "django.core.mail.backends.console.EmailBackend"
)
EMAIL_HOST = os.getenv("EMAIL_HOST", "localhost")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "25"))
EMAIL_HOST_USER = os.getenv("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.getenv("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = os.getenv("EMAIL_USE_TLS", "False") == "True"
DEFAULT_FROM_EMAIL = os.getenv("DEFAULT_FROM_EMAIL", "Zervitra <no-reply@zervitra.com>")

# Internal inbox(es) for new inquiries, accepted quotations, payment proofs.
AGENCY_STAFF_EMAILS = os.getenv("AGENCY_STAFF_EMAILS", "team@zervitra.com").split()

# -----------------------------
#   Agency
# -----------------------------
AGENCY_NAME = os.getenv("AGENCY_NAME", "Zervitra")
AGENCY_SITE_URL = os.getenv("AGENCY_SITE_URL", "https://zervitra.com")

# -----------------------------
#   Identifiers
# -----------------------------
NUMBERING_SEQUENCE_STORE = os.getenv(
    "NUMBERING_SEQUENCE_STORE", "core.services.numbering.DatabaseSequenceStore"
)
NUMBERING_DEFAULT_COUNTRY = os.getenv("NUMBERING_DEFAULT_COUNTRY", "IND")

# -----------------------------
#   Billing
# -----------------------------
BILLING_DEFAULT_CURRENCY = os.getenv("BILLING_DEFAULT_CURRENCY", "USD")
BILLING_DEFAULT_TAX_PERCENT = os.getenv("BILLING_DEFAULT_TAX_PERCENT", "18")  # GST
BILLING_INVOICE_DUE_DAYS = int(os.getenv("BILLING_INVOICE_DUE_DAYS", "15"))
BILLING_QUOTATION_VALID_DAYS = int(os.getenv("BILLING_QUOTATION_VALID_DAYS", "30"))

AGENCY_BANK_DETAILS = {
    "bank_name": os.getenv("BANK_NAME", ""),
    "account_holder_name": os.getenv("BANK_ACCOUNT_HOLDER", ""),
    "account_number": os.getenv("BANK_ACCOUNT_NUMBER", ""),
    "ifsc_code": os.getenv("BANK_IFSC_CODE", ""),
    "branch_name": os.getenv("BANK_BRANCH", ""),
    "upi_id": os.getenv("BANK_UPI_ID", ""),
}

# -----------------------------
#   Logging
# -----------------------------
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": os.getenv("DJANGO_LOG_LEVEL", "INFO"),
    },
}
