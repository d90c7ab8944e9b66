"""Unit tests for numeric helpers"""

import pytest
from cediwise_budget.utils.number_utils import round_half_up, whole_percent


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.125, 0.13),
        (0.375, 0.38),
        (833.333, 833.33),
        (0.994, 0.99),
        (0.0, 0.0),
    ],
)
def test_round_half_up_two_places(value, expected):
    assert round_half_up(value) == expected


def test_round_half_up_whole_numbers():
    assert round_half_up(12.5, 0) == 13
    assert round_half_up(-2.5, 0) == -2


@pytest.mark.parametrize("share, expected", [(0.125, 13), (0.625, 63), (1 / 3, 33), (0.2, 20)])
def test_whole_percent(share, expected):
    assert whole_percent(share) == expected
