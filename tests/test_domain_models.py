import pytest

from domain.errors import ClientError, LookupFailure, UNKNOWN, UnknownError
from domain.mapping import favorite_from_clan, normalize_tag
from domain.models import Clan, WarFrequency
from tests.factories import clan_payload, make_clan


def test_clan_from_payload_maps_remote_keys():
    clan = make_clan()
    assert clan.tag == "#2PP"
    assert clan.clan_points == 41234
    assert clan.war_wins == 312
    assert clan.required_trophies == 2400
    assert clan.location_name == "International"
    assert clan.location.is_country is False


def test_clan_optional_fields_absent():
    clan = Clan.from_payload({"tag": "#X", "name": "Bare"})
    assert clan.location is None
    assert clan.location_name is None
    assert clan.type is None
    assert clan.members == 0
    assert clan.war_frequency == "unknown"


def test_malformed_payload_raises_unknown_error():
    with pytest.raises(UnknownError) as exc:
        Clan.from_payload({"name": "no tag"})
    assert exc.value.code == UNKNOWN
    with pytest.raises(UnknownError):
        Clan.from_payload(clan_payload(members="many"))


def test_war_frequency_codes_are_stable():
    assert [m.code for m in WarFrequency] == [0, 1, 2, 3, 4, 5, 6]
    assert WarFrequency.code_for("oncePerWeek") == 3
    assert WarFrequency.code_for("sometimes") == 0
    assert WarFrequency.code_for(None) == 0
    assert WarFrequency.from_code(2) is WarFrequency.MORE_THAN_ONCE_PER_WEEK
    assert WarFrequency.from_code(99) is WarFrequency.UNKNOWN


def test_favorite_projection():
    record = favorite_from_clan(make_clan(warFrequency="never", location=None))
    assert record.id is None
    assert record.tag == "#2PP"
    assert record.location_name is None
    assert record.points == 41234
    assert record.wars_won == 312
    assert record.war_frequency == WarFrequency.NEVER.code
    assert record.type == "inviteOnly"


@pytest.mark.parametrize(
    "query,expected",
    [("#2PP", "#2PP"), ("2pp", "#2PP"), ("  #2p p ", "#2PP"), ("   ", "")],
)
def test_normalize_tag(query, expected):
    assert normalize_tag(query) == expected


def test_client_error_code_is_string():
    err = ClientError(404, "notFound")
    assert isinstance(err, LookupFailure)
    assert err.code == "404"
    assert str(err) == "notFound"
