import os
from dotenv import load_dotenv

load_dotenv(override=True)

class Config:
    """
    Base configuration for the TAPI admin console.
    Every value can be overridden through environment variables (or a .env file).
    """
    # Remote API
    API_URL = os.getenv('TAPI_API_URL', 'https://tapi-tubes-server.onrender.com').rstrip('/')
    REQUEST_TIMEOUT = float(os.getenv('TAPI_REQUEST_TIMEOUT', '30'))

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('TAPI_DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # Durable client-side storage (the console's "localStorage")
    TOKEN_DB = os.getenv('TAPI_TOKEN_DB', os.path.join(DB_DIR, "client_storage.db"))
    TOKEN_KEY = "token"

    # Activity log database - leave unset to log through the stdlib logger only
    LOG_DB = os.getenv('TAPI_LOG_DB')

    # Table names
    STORAGE_TABLE = "client_storage"
    LOGS_TABLE = "app_logs"

    # Embedded content editor
    EDITOR_READY_TIMEOUT = float(os.getenv('TAPI_EDITOR_READY_TIMEOUT', '15'))
    EDITOR_EXPORT_TIMEOUT = float(os.getenv('TAPI_EDITOR_EXPORT_TIMEOUT', '10'))

    # Blog categories offered by the blog form
    BLOG_CATEGORIES = (
        ('industry-news', 'Industry News'),
        ('product-updates', 'Product Updates'),
        ('tutorials', 'Tutorials'),
        ('case-studies', 'Case Studies'),
        ('company-news', 'Company News'),
    )
