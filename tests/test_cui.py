import pytest

from cui2vec.cui import cui_to_int, int_to_cui, is_cui


@pytest.mark.parametrize(
    "value, cui",
    [
        (0, "C0000000"),
        (5, "C0000005"),
        (39, "C0000039"),
        (1234567, "C1234567"),
        (9999999, "C9999999"),
        (12345678, "C12345678"),
    ],
)
def test_round_trip(value, cui):
    assert int_to_cui(value) == cui
    assert cui_to_int(cui) == value
    assert cui_to_int(int_to_cui(value)) == value
    assert int_to_cui(cui_to_int(cui)) == cui


@pytest.mark.parametrize(
    "cui",
    ["", "C", "C123", "0000005", "D0000005", "c0000005", "C000000X", "C0000005 ", "C012345678", "xC0000005"],
)
def test_invalid_cuis_are_rejected(cui):
    assert not is_cui(cui)
    with pytest.raises(ValueError, match="is not a cui"):
        cui_to_int(cui)


def test_negative_values_are_rejected():
    with pytest.raises(ValueError):
        int_to_cui(-1)
