"""
Projects Database
=================

sqlite3 storage for project records. The slug is the lookup key for reads
and writes and never changes once assigned.
"""

import re

from ...core.config import get_config_value
from ...core.database import Database
from ...core.logging_service import logger
from ...models import Project

_SELECT_COLS = 'slug, title, place, client, summary, content, date, thumbnail'


def get_db_config():
    """Get projects database path"""
    return get_config_value('PROJECTS_DB', 'projects.db')


def init_projects_db():
    """Initialize projects database"""
    projects_db = get_db_config()
    Database.ensure_parent_dir(projects_db)

    with Database.connect(projects_db) as conn:
        cursor = conn.cursor()
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS projects (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                slug TEXT NOT NULL UNIQUE,
                title TEXT NOT NULL,
                place TEXT NOT NULL,
                client TEXT NOT NULL,
                summary TEXT NOT NULL,
                content TEXT NOT NULL,
                date TEXT NOT NULL,
                thumbnail TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')
        cursor.execute('CREATE INDEX IF NOT EXISTS idx_projects_slug ON projects(slug)')
        conn.commit()


def _row_to_project(row):
    """Convert a DB row to a Project"""
    return Project.from_dict({
        'slug': row[0], 'title': row[1], 'place': row[2], 'client': row[3],
        'summary': row[4], 'content': row[5], 'date': row[6], 'thumbnail': row[7],
    })


def _date_value(value):
    return value.isoformat() if hasattr(value, 'isoformat') else value


def create_slug(title):
    """Create URL-friendly slug with uniqueness checking"""
    slug = re.sub(r'[^\w\s-]', '', title.lower())
    slug = re.sub(r'[-\s]+', '-', slug)
    slug = slug.strip('-') or 'project'

    base_slug = slug
    counter = 1

    with Database.connect(get_db_config()) as conn:
        cursor = conn.cursor()
        while True:
            cursor.execute('SELECT id FROM projects WHERE slug = ?', (slug,))
            if not cursor.fetchone():
                break
            slug = f"{base_slug}-{counter}"
            counter += 1

    return slug


def get_all_projects_db():
    """Get all projects, most recent first"""
    try:
        with Database.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute(f'SELECT {_SELECT_COLS} FROM projects ORDER BY date DESC, created_at DESC')
            return [_row_to_project(row) for row in cursor.fetchall()]
    except Exception as e:
        logger.error('projects', f"Error getting projects: {e}")
        raise


def get_project_by_slug_db(slug):
    """Get single project by slug, or None"""
    try:
        with Database.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute(f'SELECT {_SELECT_COLS} FROM projects WHERE slug = ?', (slug,))
            row = cursor.fetchone()
            return _row_to_project(row) if row else None
    except Exception as e:
        logger.error('projects', f"Error getting project by slug: {e}", {'slug': slug})
        raise


def create_project_db(title, place, client, summary, content, date, thumbnail, slug=None):
    """Create new project in database; the slug comes from the title unless given"""
    slug = slug or create_slug(title)

    try:
        with Database.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                INSERT INTO projects (slug, title, place, client, summary, content, date, thumbnail)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ''', (slug, title, place, client, summary, content, _date_value(date), thumbnail))
            conn.commit()
    except Exception as e:
        logger.error('projects', f"Error creating project: {e}", {'slug': slug})
        raise

    logger.info('projects', f"Project created: {slug}")
    return get_project_by_slug_db(slug)


def update_project_db(data):
    """Replace every field of the project keyed by data['slug'].

    Returns the stored Project, or None when the slug does not exist.
    """
    slug = data['slug']

    try:
        with Database.connect(get_db_config()) as conn:
            cursor = conn.cursor()
            cursor.execute('''
                UPDATE projects
                SET title = ?, place = ?, client = ?, summary = ?, content = ?,
                    date = ?, thumbnail = ?, updated_at = CURRENT_TIMESTAMP
                WHERE slug = ?
            ''', (data['title'], data['place'], data['client'], data['summary'],
                  data['content'], _date_value(data['date']), data['thumbnail'], slug))
            conn.commit()
            updated = cursor.rowcount > 0
    except Exception as e:
        logger.error('projects', f"Error updating project: {e}", {'slug': slug})
        raise

    if not updated:
        return None
    logger.info('projects', f"Project updated: {slug}")
    return get_project_by_slug_db(slug)
