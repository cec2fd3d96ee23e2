"""
My Atelier Site
===============

Flask app using the Atelier framework.
"""

import os
from flask import Flask, redirect, url_for

# ===== App Setup =====

app = Flask(__name__)

# Load config
from config import Config
app.config['SECRET_KEY'] = Config.SECRET_KEY
app.config['DB_DIR'] = Config.DB_DIR
app.config['PROJECTS_DB'] = Config.PROJECTS_DB
app.config['LOGS_DB'] = Config.LOGS_DB
app.config['BRAND_NAME'] = Config.BRAND_NAME
app.config['CLOUDINARY_CLOUD_NAME'] = Config.CLOUDINARY_CLOUD_NAME
app.config['CLOUDINARY_UPLOAD_PRESET'] = Config.CLOUDINARY_UPLOAD_PRESET
app.config['ATELIER_LOGIN_URL'] = Config.ATELIER_LOGIN_URL

# Session security
app.config['SESSION_COOKIE_SECURE'] = not app.debug
app.config['SESSION_COOKIE_HTTPONLY'] = True
app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'

# Ensure database directory exists
os.makedirs(Config.DB_DIR, exist_ok=True)

# ===== Atelier Framework =====
# Registers the public project pages, the dashboard editor and the RPC endpoint.
# Local templates/ still override the framework's templates.

from atelier import Atelier
atelier = Atelier(app)


# ===== Routes =====

@app.route('/health')
def health():
    return {'status': 'ok'}


@app.route('/')
def home():
    """Home page"""
    return redirect(url_for('projects.projects_list'))


# ===== Run =====

if __name__ == '__main__':
    print("[STARTER] Starting on port 5000...")
    app.run(debug=True, port=5000, host='0.0.0.0')
