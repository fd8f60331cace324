import re
import unicodedata

from schoolsite import db

SLUG_MAX_LENGTH = 255


def slugify(text, max_length=SLUG_MAX_LENGTH):
    """URL-safe lower-case slug: 'Teknik Komputer & Jaringan' -> 'teknik-komputer-jaringan'"""
    text = unicodedata.normalize('NFKD', text or '').encode('ascii', 'ignore').decode('ascii')
    slug = re.sub(r'[^a-z0-9]+', '-', text.lower()).strip('-')
    slug = slug[:max_length].rstrip('-')
    return slug or 'item'


def _with_suffix(base, counter, max_length):
    suffix = f"-{counter}"
    return f"{base[:max_length - len(suffix)].rstrip('-')}{suffix}"


def unique_slug(model, name, ignore_id=None, column='slug'):
    """Slug for ``name`` not yet used by another ``model`` row.

    Collisions get a numeric suffix: tkj, tkj-1, tkj-2, ...
    ``ignore_id`` excludes the record being edited. The result never exceeds
    the width of the slug column.
    """
    max_length = getattr(model.__table__.c[column].type, 'length', None) or SLUG_MAX_LENGTH
    base = slugify(name, max_length)
    slug_column = getattr(model, column)
    slug = base
    counter = 1
    while True:
        query = db.session.query(model.id).filter(slug_column == slug)
        if ignore_id is not None:
            query = query.filter(model.id != ignore_id)
        if query.first() is None:
            return slug
        slug = _with_suffix(base, counter, max_length)
        counter += 1
