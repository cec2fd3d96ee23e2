"""
Atelier - Portfolio Site Framework
==================================

A Flask extension for a server-rendered portfolio site with:
- Public project pages looked up by slug
- A dashboard editor for projects with thumbnail uploads
- A typed RPC boundary (`project.*` procedures) between pages and storage

Usage:
    from atelier import Atelier

    app = Flask(__name__)
    Atelier(app)
"""

import os

from flask_cors import CORS
from jinja2 import ChoiceLoader, FileSystemLoader

__version__ = '0.1.0'

CONFIG_DEFAULTS = (
    'DB_DIR', 'PROJECTS_DB', 'LOGS_DB', 'BRAND_NAME',
    'CLOUDINARY_CLOUD_NAME', 'CLOUDINARY_UPLOAD_PRESET', 'IMAGE_UPLOAD_URL', 'IMAGE_UPLOAD_TIMEOUT',
    'ATELIER_LOGIN_URL', 'RPC_ALLOWED_ORIGINS',
)


class Atelier:
    """Registers the Atelier modules on a Flask app.

    Config keys (all optional):
        features: {'projects': bool, 'projects_public': bool, 'rpc': bool}
        brand_name: site name used in page titles
        project_client_factory: callable returning a ProjectClient
        image_uploader_factory: callable returning an ImageUploadClient
    """

    DEFAULT_FEATURES = {
        'projects': True,
        'projects_public': True,
        'rpc': True,
    }

    def __init__(self, app=None, config=None):
        self._config = dict(config or {})
        self._registered = []
        self.router = None
        self.project_client_factory = None
        self.image_uploader_factory = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        from .core.storage import ImageUploadClient
        from .rpc.router import build_app_router

        self._apply_config_defaults(app)
        self._setup_database_dir(app)
        self._setup_template_loader(app)
        self._setup_template_filters(app)

        self.router = build_app_router()
        self.project_client_factory = self._config.get('project_client_factory') or self._local_project_client
        self.image_uploader_factory = self._config.get('image_uploader_factory') or ImageUploadClient.from_config

        self._register_modules(app)
        self._setup_context_processor(app)
        app.extensions['atelier'] = self

    # ----- setup -----

    def _apply_config_defaults(self, app):
        from .core.config import Config

        for key in CONFIG_DEFAULTS:
            app.config.setdefault(key, getattr(Config, key))
        if not app.config.get('SECRET_KEY') and Config.SECRET_KEY:
            app.config['SECRET_KEY'] = Config.SECRET_KEY
        if self._config.get('brand_name'):
            app.config['BRAND_NAME'] = self._config['brand_name']

    def _setup_database_dir(self, app):
        os.makedirs(app.config['DB_DIR'], exist_ok=True)

    def _setup_template_loader(self, app):
        # App templates take priority over the framework's base templates
        templates_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'templates')
        app.jinja_loader = ChoiceLoader([app.jinja_loader, FileSystemLoader(templates_dir)])

    def _setup_template_filters(self, app):
        from .modules.projects_public.routes import format_project_content, format_project_date

        app.add_template_filter(format_project_date, 'format_project_date')
        app.add_template_filter(format_project_content, 'format_project_content')

    def _features(self):
        features = dict(self.DEFAULT_FEATURES)
        features.update(self._config.get('features') or {})
        return features

    def _register_modules(self, app):
        features = self._features()

        if features.get('projects_public'):
            from .modules.projects_public import projects_public_bp
            app.register_blueprint(projects_public_bp)
            self._registered.append('projects_public')

        if features.get('projects'):
            from .modules.projects import projects_bp
            app.register_blueprint(projects_bp)
            self._registered.append('projects')

        if features.get('rpc'):
            from .rpc import rpc_bp
            app.register_blueprint(rpc_bp)
            CORS(app, resources={r'/api/rpc/*': {'origins': app.config['RPC_ALLOWED_ORIGINS']}},
                 supports_credentials=False)
            self._registered.append('rpc')

    def _setup_context_processor(self, app):
        @app.context_processor
        def inject_atelier():
            return {
                'atelier_config': {'features': self._features()},
                'brand_name': app.config['BRAND_NAME'],
            }

    def _local_project_client(self):
        from .rpc.client import LocalProjectClient
        from .rpc.router import CallContext

        return LocalProjectClient(self.router, CallContext.from_session())

    def get_registered_modules(self):
        return list(self._registered)


__all__ = ['Atelier', '__version__']
