"""Erase-by-rectangle behaviour."""

from paper_engine.core.geometry import erase_elements, erase_stroke, split_points_by_rect
from paper_engine.core.types import Point, Rect, Rectangle, Stroke, TextElement


def make_stroke(coords, element_id="s1"):
    return Stroke(id=element_id, points=[Point(x, y) for x, y in coords], color="#123456", width=3)


def make_rect(x, y, w, h, element_id="r1"):
    return Rectangle(id=element_id, x=x, y=y, width=w, height=h, color="#000000", stroke_width=2)


def make_text(x, y, content, font_size=10, element_id="t1"):
    return TextElement(id=element_id, x=x, y=y, content=content, font_size=font_size,
                       color="#000000", font_family="sans-serif")


def test_split_drops_short_runs():
    points = [Point(0, 0), Point(5, 5), Point(15, 15), Point(25, 25)]
    runs = split_points_by_rect(points, Rect(4, 4, 12, 12))
    assert runs == [[Point(15, 15), Point(25, 25)]]


def test_split_edges_count_as_inside():
    points = [Point(0, 0), Point(1, 1), Point(10, 10), Point(20, 20), Point(21, 21)]
    runs = split_points_by_rect(points, Rect(10, 10, 10, 10))
    # (10, 10) and (20, 20) sit on the edges; the lone (21, 21) is too short to keep
    assert runs == [[Point(0, 0), Point(1, 1)]]


def test_middle_erase_yields_one_stroke_with_two_points():
    stroke = make_stroke([(0, 0), (5, 5), (15, 15), (25, 25)])
    elements, changed = erase_elements([stroke], Rect(4, 4, 12, 12))

    assert changed
    assert len(elements) == 1
    survivor = elements[0]
    assert [(p.x, p.y) for p in survivor.points] == [(15, 15), (25, 25)]
    assert survivor.id != stroke.id
    assert survivor.color == stroke.color
    assert survivor.width == stroke.width


def test_stroke_split_into_two_pieces_with_fresh_ids():
    stroke = make_stroke([(0, 0), (1, 1), (50, 50), (100, 100), (101, 101)])
    pieces, changed = erase_stroke(stroke, Rect(40, 40, 20, 20))

    assert changed
    assert len(pieces) == 2
    assert len({piece.id for piece in pieces} | {stroke.id}) == 3


def test_untouched_stroke_keeps_identity():
    stroke = make_stroke([(0, 0), (1, 1), (2, 2)])
    elements, changed = erase_elements([stroke], Rect(50, 50, 10, 10))

    assert not changed
    assert elements[0] is stroke


def test_fully_erased_stroke_disappears():
    stroke = make_stroke([(10, 10), (12, 12), (14, 14)])
    elements, changed = erase_elements([stroke], Rect(0, 0, 100, 100))

    assert changed
    assert elements == []


def test_rectangle_removed_only_when_contained():
    rect = make_rect(10, 10, 5, 5)

    elements, changed = erase_elements([rect], Rect(0, 0, 100, 100))
    assert changed and elements == []

    elements, changed = erase_elements([rect], Rect(0, 0, 5, 5))
    assert not changed and elements == [rect]


def test_intersecting_rectangle_survives():
    rect = make_rect(10, 10, 50, 50)
    elements, changed = erase_elements([rect], Rect(0, 0, 30, 30))
    assert not changed
    assert elements == [rect]


def test_text_uses_approximate_box():
    # 5 chars * 10 * 0.6 = 30 wide, 10 high
    text = make_text(10, 10, "hello")

    elements, changed = erase_elements([text], Rect(10, 10, 30, 10))
    assert changed and elements == []

    elements, changed = erase_elements([text], Rect(10, 10, 29, 10))
    assert not changed and elements == [text]


def test_survivors_keep_relative_order():
    first = make_rect(0, 0, 10, 10, element_id="a")
    erased = make_rect(200, 200, 5, 5, element_id="b")
    stroke = make_stroke([(300, 0), (300, 10), (300, 20)], element_id="c")
    last = make_text(500, 500, "x", element_id="d")

    elements, changed = erase_elements([first, erased, stroke, last], Rect(190, 190, 20, 20))

    assert changed
    assert [el.id for el in elements] == ["a", "c", "d"]
