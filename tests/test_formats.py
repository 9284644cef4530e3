import pytest

from ptcltex.errors import UnrecognizedFormat
from ptcltex.formats import (HOUDINI, INTERNAL, detect_format, is_houdini_format,
                             is_internal_format, parse_particle_data)

HOUDINI_DOC = [{"P": [1, 2, 3], "Cd": [0.5, 0.5, 0.5]},
               {"P": [4, 5, 6], "Cd": [1, 0, 0]}]

INTERNAL_DOC = {
    "particles": [
        {"id": "a", "position": [0, 1, 2], "color": [0.1, 0.2, 0.3], "size": 2.5},
        {"position": [3, 4, 5], "color": [1, 1, 1]},
    ],
    "metadata": {"count": 2, "created": "2024-01-01T00:00:00.000Z",
                 "source": "houdini", "optimized": True, "originalCount": 9},
}

BAD_DOCS = [None, 3, "particles", [], {}, [1, 2], {"particles": []},
            [{"P": [1, 2], "Cd": [0, 0, 0]}], [{"P": [1, 2, 3]}],
            {"particles": [{"position": [0, 0, 0]}]}, {"particles": "nope"}]


def test_houdini_scenario():
    c = parse_particle_data(HOUDINI_DOC)
    assert detect_format(HOUDINI_DOC) == HOUDINI
    assert [p.id for p in c] == ["particle_0", "particle_1"]
    assert [p.size for p in c] == [1.0, 1.0]
    assert c[1].position == (4.0, 5.0, 6.0)
    assert c[0].color == (0.5, 0.5, 0.5)
    assert c.source == "houdini"
    assert c.bounds.min == (1.0, 2.0, 3.0) and c.bounds.max == (4.0, 5.0, 6.0)


def test_internal_passthrough():
    c = parse_particle_data(INTERNAL_DOC)
    assert detect_format(INTERNAL_DOC) == INTERNAL
    assert [p.id for p in c] == ["a", "particle_1"]
    assert c[0].size == 2.5 and c[1].size == 1.0
    assert c.created == "2024-01-01T00:00:00.000Z"
    assert c.optimized is True
    assert c.original_count == 9
    assert c.bounds.max == (3.0, 4.0, 5.0)


def test_internal_document_roundtrip():
    c = parse_particle_data(HOUDINI_DOC)
    again = parse_particle_data(c.to_document())
    assert again.points == c.points
    assert again.source == c.source and again.created == c.created


@pytest.mark.parametrize("doc", BAD_DOCS)
def test_unrecognized(doc):
    with pytest.raises(UnrecognizedFormat):
        detect_format(doc)
    with pytest.raises(ValueError):
        parse_particle_data(doc)


@pytest.mark.parametrize("doc", [HOUDINI_DOC, INTERNAL_DOC] + BAD_DOCS)
def test_classification_is_exclusive(doc):
    assert not (is_houdini_format(doc) and is_internal_format(doc))


def test_only_first_record_is_checked_up_front():
    doc = [{"P": [0, 0, 0], "Cd": [1, 1, 1]}, {"P": [1, 1, 1]}]
    assert detect_format(doc) == HOUDINI
    with pytest.raises(UnrecognizedFormat, match="Particle 1"):
        parse_particle_data(doc)

    doc = {"particles": [{"position": [0, 0, 0], "color": [1, 1, 1]},
                         {"position": [1, 1], "color": [1, 1, 1]}]}
    with pytest.raises(UnrecognizedFormat, match="Particle 1"):
        parse_particle_data(doc)


@pytest.mark.parametrize("meta", [[1, 2], "x", {"originalCount": "many", "optimized": "yes",
                                               "created": 5, "bounds": [0, 0]}])
def test_malformed_metadata_is_ignored(meta):
    doc = {"particles": [{"position": [0, 1, 2], "color": [1, 1, 1]},
                         {"position": [2, 3, 4], "color": [0, 0, 0]}],
           "metadata": meta}
    c = parse_particle_data(doc)
    assert len(c) == 2
    assert c.original_count == 2
    assert c.optimized is False
    assert c.bounds.max == (2.0, 3.0, 4.0)
    assert isinstance(c.created, str)
