import os
from dotenv import load_dotenv

load_dotenv(override=True)


class Config:
    """
    Base configuration for the Atelier site.
    Deployments provide secrets, database paths and image host settings
    via environment variables (or a .env file).
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # Database paths - use environment variables or fallback to DB_DIR
    PROJECTS_DB = os.getenv('PROJECTS_DB', os.path.join(DB_DIR, 'projects.db'))
    LOGS_DB = os.getenv('LOGS_DB', os.path.join(DB_DIR, 'app_logs.db'))

    # Site identity (used in page titles)
    BRAND_NAME = os.getenv('BRAND_NAME', 'Ayaase Atalier')

    # Cloudinary unsigned uploads for project thumbnails
    CLOUDINARY_CLOUD_NAME = os.getenv('CLOUDINARY_CLOUD_NAME', 'dbi3iqa9k')
    CLOUDINARY_UPLOAD_PRESET = os.getenv('CLOUDINARY_UPLOAD_PRESET', 'v7bn49sm')
    IMAGE_UPLOAD_URL = os.getenv('IMAGE_UPLOAD_URL')
    # Seconds; unset means the upload waits for the image host indefinitely
    IMAGE_UPLOAD_TIMEOUT = os.getenv('IMAGE_UPLOAD_TIMEOUT')

    # The login page is owned by the auth layer; the dashboard only redirects there
    ATELIER_LOGIN_URL = os.getenv('ATELIER_LOGIN_URL', '/admin/login')

    # Origins allowed to call the RPC endpoint from the browser
    RPC_ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.getenv('RPC_ALLOWED_ORIGINS', 'http://localhost:3000').split(',')
        if origin.strip()
    ]


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val:
        return val
    return os.getenv(key, default)
