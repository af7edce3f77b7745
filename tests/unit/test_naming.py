import re
from datetime import datetime

from entryfs.domain.enums import NamingStrategy
from entryfs.services.naming import next_candidate_suffix


def test_integer_strategy_uses_attempt_index():
    assert next_candidate_suffix(0, NamingStrategy.INTEGER) == "0"
    assert next_candidate_suffix(7, NamingStrategy.INTEGER) == "7"


def test_timestamp_strategy_honours_format():
    suffix = next_candidate_suffix(0, NamingStrategy.TIMESTAMP, "%Y")
    assert suffix in {str(datetime.now().year - 1), str(datetime.now().year)}


def test_timestamp_utc_strategy_is_utc():
    assert next_candidate_suffix(0, NamingStrategy.TIMESTAMP_UTC, "%Z") == "UTC"


def test_default_timestamp_format_shape():
    suffix = next_candidate_suffix(0, NamingStrategy.TIMESTAMP)
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}-\d{6}", suffix)


def test_ticks_are_digits_and_non_decreasing():
    a = next_candidate_suffix(0, NamingStrategy.TIMESTAMP_TICKS)
    b = next_candidate_suffix(1, NamingStrategy.TIMESTAMP_TICKS)
    assert a.isdigit() and b.isdigit()
    assert int(b) >= int(a)
