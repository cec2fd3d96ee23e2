"""Project record shared by the store, the RPC layer and the pages."""

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

Date = date

# Fields the dashboard form edits; slug and thumbnail are handled separately
EDITABLE_FIELDS = ('title', 'place', 'client', 'content', 'date', 'summary')


def parse_date(value) -> Optional[date]:
    """Coerce a stored/serialized date (ISO string, date or datetime) to a date."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass
class Project:
    slug: str = ''
    title: str = ''
    place: str = ''
    client: str = ''
    summary: str = ''
    content: str = ''
    date: Optional[Date] = None
    thumbnail: str = ''

    @classmethod
    def empty(cls) -> "Project":
        """Placeholder rendered when a slug lookup finds nothing."""
        return cls()

    def is_empty(self) -> bool:
        return not self.slug

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        return cls(
            slug=data.get('slug') or '',
            title=data.get('title') or '',
            place=data.get('place') or '',
            client=data.get('client') or '',
            summary=data.get('summary') or '',
            content=data.get('content') or '',
            date=parse_date(data.get('date')),
            thumbnail=data.get('thumbnail') or '',
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe representation (date as ISO-8601)."""
        data = asdict(self)
        data['date'] = self.date.isoformat() if self.date else None
        return data

    def form_defaults(self) -> Dict[str, Any]:
        """Values the edit form starts from."""
        return {field: getattr(self, field) for field in EDITABLE_FIELDS}
