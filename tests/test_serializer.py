"""JSON form of papers."""

import json

import pytest

from paper_engine.core.serializer import (
    PaperFormatError,
    dumps_paper,
    element_from_dict,
    element_to_dict,
    loads_paper,
    summary_from_json,
)
from paper_engine.core.types import (
    GridSettings,
    GridType,
    Paper,
    Point,
    Rectangle,
    Stroke,
    TextElement,
)


@pytest.fixture
def paper():
    return Paper(
        id="abc123",
        name="Sketch",
        elements=[
            Stroke(id="s1", points=[Point(1, 2, 0.3), Point(3.5, 4, 0.9)], color="#ff0000", width=4),
            Rectangle(id="r1", x=10, y=20, width=30, height=40, color="#00ff00", stroke_width=2),
            TextElement(id="t1", x=5, y=6, content="héllo", font_size=16, color="#000000",
                        font_family="sans-serif"),
        ],
        grid_settings=GridSettings(type=GridType.SQUARE, spacing=25, color="#eeeeee", opacity=0.3),
        created_at=1700000000000,
        updated_at=1700000005000,
    )


def test_round_trip(paper):
    assert loads_paper(dumps_paper(paper)) == paper
    assert loads_paper(dumps_paper(paper, indent=2)) == paper


def test_document_keys(paper):
    data = json.loads(dumps_paper(paper))
    assert set(data) == {"id", "name", "elements", "gridSettings", "createdAt", "updatedAt"}
    assert data["gridSettings"] == {"type": "square", "spacing": 25, "color": "#eeeeee", "opacity": 0.3}


def test_elements_carry_only_their_own_fields(paper):
    stroke, rect, text = (element_to_dict(el) for el in paper.elements)

    assert set(stroke) == {"id", "points", "color", "width"}
    assert stroke["points"][0] == {"x": 1, "y": 2, "pressure": 0.3}
    assert set(rect) == {"id", "x", "y", "width", "height", "color", "strokeWidth", "filled"}
    assert set(text) == {"id", "x", "y", "content", "fontSize", "color", "fontFamily"}


def test_element_shapes_are_recognized():
    assert isinstance(element_from_dict({"id": "a", "points": [], "color": "#000", "width": 1}), Stroke)
    assert isinstance(element_from_dict({
        "id": "b", "x": 0, "y": 0, "width": 5, "height": 5, "color": "#000",
        "strokeWidth": 1, "filled": True,
    }), Rectangle)
    assert isinstance(element_from_dict({
        "id": "c", "x": 0, "y": 0, "content": "hi", "fontSize": 12, "color": "#000",
        "fontFamily": "serif",
    }), TextElement)


def test_missing_pressure_defaults():
    stroke = element_from_dict({"id": "a", "points": [{"x": 1, "y": 1}], "color": "#000", "width": 1})
    assert stroke.points[0].pressure == 0.5


@pytest.mark.parametrize("text", [
    "not json",
    "[]",
    '{"id": "x", "name": "n"}',
    '{"id": "x", "name": "n", "elements": [{"id": "q"}]}',
    '{"id": "x", "name": "n", "elements": [], "gridSettings": {"type": "hexagon"}}',
    '{"id": 5, "name": "n", "elements": []}',
])
def test_malformed_input_raises(text):
    with pytest.raises(PaperFormatError):
        loads_paper(text)


def test_format_error_is_value_error():
    assert issubclass(PaperFormatError, ValueError)


def test_summary(paper):
    info = summary_from_json(dumps_paper(paper))
    assert (info.id, info.name, info.updated_at) == ("abc123", "Sketch", 1700000005000)
