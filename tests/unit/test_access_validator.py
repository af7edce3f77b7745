import itertools

import pytest

from entryfs.domain.enums import AccessMode, OpenMode
from entryfs.domain.results import FailureKind
from entryfs.services.access_validator import ensure_legal, is_legal

ILLEGAL = {
    *((AccessMode.NONE, m) for m in OpenMode),
    *((a, OpenMode.NONE) for a in AccessMode),
    (AccessMode.READ, OpenMode.TRUNCATE),
    (AccessMode.READ, OpenMode.APPEND),
}


@pytest.mark.parametrize("access,mode", list(itertools.product(AccessMode, OpenMode)))
def test_is_legal_table(access, mode):
    assert is_legal(access, mode) is ((access, mode) not in ILLEGAL)


def test_table_sizes():
    pairs = list(itertools.product(AccessMode, OpenMode))
    assert len(pairs) == 28
    assert len(ILLEGAL) == 12
    assert sum(is_legal(a, m) for a, m in pairs) == 16


def test_ensure_legal_reports_invalid_mode():
    result = ensure_legal(AccessMode.READ, OpenMode.APPEND)
    assert not result
    assert result.failure.kind is FailureKind.INVALID_MODE
    assert "read/append" in result.failure.message


def test_ensure_legal_passes_legal_pairs():
    assert ensure_legal(AccessMode.WRITE, OpenMode.APPEND).ok
    assert ensure_legal(AccessMode.READ, OpenMode.OPEN).ok
