"""Organization structure: merging stored positions with the fixed roster and
writing an edited chart back.

Stored shape (``SchoolProfile(type=ORGANIZATION_STRUCTURE).data``)::

    {"positions": [{"order": 1, "title": ..., "name": ..., "image": ...}, ...]}

Reading goes through :func:`reconcile`, which always yields exactly one entry
per roster position. Saving goes through :func:`commit`, which replaces the
whole stored list at once.
"""
import logging
import re
from dataclasses import dataclass, asdict
from typing import Callable, Dict, Iterable, List, Optional

from schoolsite import db
from schoolsite.models.school_profile import SchoolProfile, ProfileType
from schoolsite.services.organization_layout import get_layout
from schoolsite.services.storage_service import POSITION_IMAGE, UploadBatch, has_file

logger = logging.getLogger(__name__)

IMAGE_FOLDER = 'school_profiles'
TITLE_MAX_LENGTH = 255


@dataclass
class StoredPosition:
    order: int
    title: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None

    def to_dict(self):
        return {'title': self.title, 'name': self.name, 'order': self.order, 'image': self.image}


@dataclass
class ReconciledPosition:
    order: int
    label: str
    row: int
    display_only: bool = False
    title: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None

    @property
    def display_title(self):
        return self.title or self.label

    def to_dict(self):
        return asdict(self)


def _clean_text(value):
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def coerce_order(value):
    """Integer order from stored or submitted data, or None when it is not one"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and re.fullmatch(r'\s*-?\d+\s*', value):
        return int(value)
    return None


def _field(entry, name):
    if isinstance(entry, dict):
        return entry.get(name)
    return getattr(entry, name, None)


def index_by_order(entries, valid_orders, source='stored') -> Dict[int, StoredPosition]:
    """Map order -> StoredPosition, keeping the first entry for each valid order.

    Entries that are not position records, whose order is outside the roster
    or repeats an earlier one are dropped and logged.
    """
    indexed = {}
    if entries is None:
        return indexed
    if not isinstance(entries, (list, tuple)):
        logger.warning(f"Ignoring {source} positions: expected a list, got {type(entries).__name__}")
        return indexed

    for position, entry in enumerate(entries):
        if not isinstance(entry, dict) and not hasattr(entry, 'order'):
            logger.warning(f"Ignoring {source} position #{position}: not a position record")
            continue
        order = coerce_order(_field(entry, 'order'))
        if order is None or order not in valid_orders:
            logger.warning(f"Ignoring {source} position #{position}: order {_field(entry, 'order')!r} is outside the roster")
            continue
        if order in indexed:
            logger.warning(f"Ignoring {source} position #{position}: duplicate order {order}")
            continue
        indexed[order] = StoredPosition(
            order=order,
            title=_clean_text(_field(entry, 'title')),
            name=_clean_text(_field(entry, 'name')),
            image=_clean_text(_field(entry, 'image')),
        )
    return indexed


def reconcile(stored, layout=None) -> List[ReconciledPosition]:
    """Combine stored positions with the roster.

    Always returns one entry per roster position, ascending by order. Missing
    or malformed stored data yields null fields, never an exception.
    """
    layout = layout if layout is not None else get_layout()
    by_order = index_by_order(stored, {p.order for p in layout})

    reconciled = []
    for position in sorted(layout, key=lambda p: p.order):
        match = by_order.get(position.order)
        reconciled.append(ReconciledPosition(
            order=position.order,
            label=position.label,
            row=position.row,
            display_only=position.display_only,
            title=match.title if match else None,
            name=match.name if match else None,
            image=match.image if match else None,
        ))
    return reconciled


def commit(edited: Iterable, previous=None,
           uploads: Optional[Dict[int, object]] = None,
           store: Optional[Callable[[int, object], str]] = None,
           layout=None) -> List[StoredPosition]:
    """Build the stored position list for an edited chart.

    ``edited`` holds entries with ``order``, ``title`` and ``name``;
    ``previous`` is the currently stored list; ``uploads`` maps an order to a
    newly attached image which ``store(order, file)`` turns into a storage
    reference. Positions without a new image keep their previous image; when
    ``previous`` is None the image carried by the edited entry itself is kept.

    Every edited entry inside the roster becomes a stored position, even an
    empty one; entries outside the roster are dropped. Nothing from
    ``previous`` survives except image references. Upload errors propagate.
    """
    layout = layout if layout is not None else get_layout()
    valid_orders = {p.order for p in layout}
    previous_by_order = index_by_order(previous, valid_orders, source='previous')
    uploads = uploads or {}

    committed = {}
    for position, entry in enumerate(edited or []):
        order = coerce_order(_field(entry, 'order'))
        if order is None or order not in valid_orders:
            logger.info(f"Dropping edited position #{position}: order {_field(entry, 'order')!r} is not on the roster")
            continue
        if order in committed:
            logger.warning(f"Dropping edited position #{position}: duplicate order {order}")
            continue

        if previous is None:
            image = _clean_text(_field(entry, 'image'))
        else:
            old = previous_by_order.get(order)
            image = old.image if old else None
        upload = uploads.get(order)
        if has_file(upload):
            if store is None:
                raise ValueError('An image was attached but no storage was provided')
            image = store(order, upload)

        committed[order] = StoredPosition(
            order=order,
            title=_clean_text(_field(entry, 'title')),
            name=_clean_text(_field(entry, 'name')),
            image=image,
        )

    return [committed[order] for order in sorted(committed)]


def orphaned_images(previous, committed: Iterable[StoredPosition]):
    """Image references stored before a save that the saved chart no longer uses"""
    kept = {p.image for p in committed if p.image}
    old = set()
    if isinstance(previous, (list, tuple)):
        for entry in previous:
            image = _clean_text(_field(entry, 'image')) if isinstance(entry, dict) or hasattr(entry, 'image') else None
            if image:
                old.add(image)
    return sorted(old - kept)


_FIELD_PATTERN = re.compile(r'^positions\[(\d+)\]\[(title|name|order|image)\]$')


def parse_position_form(form, files):
    """Turn ``positions[i][field]`` form keys into entries and an upload map.

    Returns ``(title, entries, uploads, errors)`` where ``uploads`` maps an
    order to its attached file and ``errors`` maps field names to messages.
    """
    errors = {}
    title = _clean_text(form.get('title'))
    if title and len(title) > TITLE_MAX_LENGTH:
        errors['title'] = f'The title may not be greater than {TITLE_MAX_LENGTH} characters.'

    rows = {}
    for key in form.keys():
        match = _FIELD_PATTERN.match(key)
        if match and match.group(2) != 'image':
            rows.setdefault(int(match.group(1)), {})[match.group(2)] = form.get(key)

    entries = []
    order_by_index = {}
    for index in sorted(rows):
        row = rows[index]
        raw_order = row.get('order')
        order = coerce_order(raw_order)
        if raw_order not in (None, '') and order is None:
            errors[f'positions.{index}.order'] = 'The order must be an integer.'
            continue
        if order is not None:
            order_by_index[index] = order
        entries.append({'order': order, 'title': row.get('title'), 'name': row.get('name')})

    uploads = {}
    for key in files.keys():
        match = _FIELD_PATTERN.match(key)
        if not match or match.group(2) != 'image':
            continue
        order = order_by_index.get(int(match.group(1)))
        upload = files.get(key)
        if order is not None and order not in uploads and has_file(upload):
            uploads[order] = upload

    if not entries and not errors:
        errors['positions'] = 'At least one position is required.'

    return title, entries, uploads, errors


class OrganizationStructureService:

    @staticmethod
    def stored_positions(profile):
        data = profile.data if profile is not None else None
        if isinstance(data, dict):
            return data.get('positions')
        return None

    @staticmethod
    def get():
        """Section title and the reconciled chart"""
        profile = SchoolProfile.get(ProfileType.ORGANIZATION_STRUCTURE)
        title = profile.title if profile is not None else None
        return title, reconcile(OrganizationStructureService.stored_positions(profile))

    @staticmethod
    def save(title, entries, uploads=None):
        """Replace the stored chart in one transaction.

        New images are written first; if any upload or the database write
        fails, the images written so far are removed and the error is
        re-raised with nothing persisted. Images no longer referenced are
        deleted after the commit.
        """
        profile = SchoolProfile.get_or_new(ProfileType.ORGANIZATION_STRUCTURE)
        previous = OrganizationStructureService.stored_positions(profile)
        batch = UploadBatch()

        def store(order, file):
            return batch.store(file, POSITION_IMAGE, IMAGE_FOLDER, field=f'positions.{order}.image')

        try:
            committed = commit(entries, previous, uploads, store)
            profile.title = title
            profile.data = {'positions': [p.to_dict() for p in committed]}
            db.session.commit()
        except Exception:
            db.session.rollback()
            batch.rollback()
            raise

        for reference in orphaned_images(previous, committed):
            batch.discard(reference)
        batch.commit()
        logger.info(f"Saved organization structure with {len(committed)} positions")
        return committed

    @staticmethod
    def preview(entries):
        """Reconciled view of an unsaved edit, keeping the stored images"""
        profile = SchoolProfile.get(ProfileType.ORGANIZATION_STRUCTURE)
        previous = OrganizationStructureService.stored_positions(profile)
        return reconcile(commit(entries, previous))
