"""Fixed roster of the school's organization chart.

Each position has a stable ``order`` (1..N) that is both its identity and its
rendering sequence, a display ``label`` and the tier (``row``) of the tree it
is drawn in. The roster changes only with a deployment.
"""
from dataclasses import dataclass
from itertools import groupby
from typing import Iterable, List, Tuple


@dataclass(frozen=True)
class Position:
    order: int
    label: str
    row: int
    display_only: bool = False


POSITION_LAYOUT: Tuple[Position, ...] = (
    Position(1, 'Kepala Sekolah', 0),
    Position(2, 'Ketua Komite', 1),
    Position(3, 'Kasubag Tata Usaha', 1),
    Position(4, 'Wakasekbid. Kurikulum', 2),
    Position(5, 'Wakasekbid. Kesiswaan', 2),
    Position(6, 'Wakasekbid. Hubin dan Kemitraan', 2),
    Position(7, 'Wakasekbid. Sarana dan Prasarana', 2),
    Position(8, 'K3K Akuntansi', 3),
    Position(9, 'K3K Perkantoran', 3),
    Position(10, 'K3K Bisnis Ritel', 3),
    Position(11, 'K3K DKV', 3),
    Position(12, 'K3K RPL', 3),
    Position(13, 'Kepala Perpustakaan', 4),
    Position(14, 'Pembina OSIS', 4),
    Position(15, 'Ka. Unit Produksi', 4),
    Position(16, 'Ka. Laboratorium', 4),
    Position(17, 'Wali Kelas', 4, display_only=True),
    Position(18, 'Guru & Tendik', 4, display_only=True),
)


def get_layout() -> Tuple[Position, ...]:
    """The canonical ordered roster"""
    return POSITION_LAYOUT


def position_count() -> int:
    return len(POSITION_LAYOUT)


def layout_rows(positions: Iterable) -> List[list]:
    """Group positions (anything with ``row`` and ``order``) into chart tiers, top first"""
    ordered = sorted(positions, key=lambda p: (p.row, p.order))
    return [list(tier) for _, tier in groupby(ordered, key=lambda p: p.row)]
