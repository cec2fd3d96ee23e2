import os
from dotenv import load_dotenv

load_dotenv()

IS_PRODUCTION = (
    os.getenv('ENVIRONMENT') == 'production' or
    os.getenv('FLASK_ENV') == 'production' or
    os.getenv('PRODUCTION') == '1'
)

DB_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'databases')


class Config:
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')

    # Database paths
    DB_DIR = DB_DIR
    PROJECTS_DB = os.path.join(DB_DIR, 'projects.db')
    LOGS_DB = os.path.join(DB_DIR, 'app_logs.db')

    # Site identity
    BRAND_NAME = os.getenv('BRAND_NAME', 'Ayaase Atalier')

    # Cloudinary (unsigned uploads for project thumbnails)
    CLOUDINARY_CLOUD_NAME = os.getenv('CLOUDINARY_CLOUD_NAME', 'dbi3iqa9k')
    CLOUDINARY_UPLOAD_PRESET = os.getenv('CLOUDINARY_UPLOAD_PRESET', 'v7bn49sm')

    # Login page of the auth layer in front of the dashboard
    ATELIER_LOGIN_URL = os.getenv('ATELIER_LOGIN_URL', '/admin/login')
