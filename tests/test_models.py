import dataclasses

import pytest

from iberia_chronos.models import HistoricalEntity, HistoryData, format_year

from conftest import sample_payload


def test_format_year():
    assert format_year(-300) == "300 BC"
    assert format_year(711) == "711 CE"
    assert format_year(0) == "0 CE"


def test_from_mapping_parses_entities():
    data = HistoryData.from_mapping(sample_payload(-218, 2))
    assert data.year == -218
    assert data.label == "218 BC"
    assert [e.name for e in data.entities] == ["Entity 0", "Entity 1"]
    assert data.entities[0].boundary_points[0] == (37.0, -8.0)


def test_from_mapping_blank_label_uses_formatted_year():
    payload = sample_payload(1492)
    payload["label"] = "  "
    assert HistoryData.from_mapping(payload).label == "1492 CE"


def test_integral_float_year_is_accepted():
    payload = sample_payload(711)
    payload["year"] = 711.0
    assert HistoryData.from_mapping(payload).year == 711


def test_records_are_immutable():
    data = HistoryData.from_mapping(sample_payload())
    with pytest.raises(dataclasses.FrozenInstanceError):
        data.label = "changed"
    assert isinstance(data.entities, tuple)
    assert isinstance(data.entities[0].boundary_points, tuple)


def test_to_dict_uses_wire_keys():
    payload = sample_payload(711, 1)
    assert HistoryData.from_mapping(payload).to_dict() == payload


@pytest.mark.parametrize(
    "mutate",
    [
        lambda p: p.pop("entities"),
        lambda p: p.update(entities=[]),
        lambda p: p.update(year="711"),
        lambda p: p.update(year=True),
        lambda p: p["entities"][0].pop("name"),
        lambda p: p["entities"][0].update(color=""),
        lambda p: p["entities"][0].update(description=None),
        lambda p: p["entities"][0].update(boundaryPoints=[[1, 2], [3, 4]]),
        lambda p: p["entities"][0].update(boundaryPoints=[[1, 2, 3], [3, 4], [5, 6]]),
        lambda p: p["entities"][0].update(boundaryPoints=[["a", 2], [3, 4], [5, 6]]),
    ],
)
def test_from_mapping_rejects_malformed(mutate):
    payload = sample_payload(711, 2)
    mutate(payload)
    with pytest.raises(ValueError):
        HistoryData.from_mapping(payload)


def test_entity_from_mapping_rejects_non_object():
    with pytest.raises(ValueError):
        HistoricalEntity.from_mapping(["not", "an", "object"])
