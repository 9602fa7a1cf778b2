from datetime import timedelta

import pytest

from dotday.models import Duration


def test_duration_negation_keeps_unit():
    assert -Duration(15, 'm') == Duration(-15, 'm')


@pytest.mark.parametrize("duration, expected", [
    (Duration(-15, 'm'), timedelta(minutes=-15)),
    (Duration(-1, 'h'), timedelta(hours=-1)),
    (Duration(2, 'w'), timedelta(weeks=2)),
    (Duration(-1, 'M'), timedelta(days=-30)),
])
def test_duration_to_timedelta(duration, expected):
    assert duration.to_timedelta() == expected


def test_duration_isoformat():
    assert Duration(-15, 'm').isoformat() == "-PT15M"
    assert Duration(-1, 'd').isoformat() == "-P1D"


def test_unknown_unit_is_rejected():
    with pytest.raises(ValueError):
        Duration(5, 'x')
