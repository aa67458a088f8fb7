"""
Paper renderer - QPainter drawing of grids, elements and previews.

All functions paint in surface coordinates; the caller owns the painter.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from PyQt6.QtCore import QLineF, QPointF, QRectF, Qt
from PyQt6.QtGui import QColor, QFont, QFontMetricsF, QImage, QPainter, QPen

from ..config import Config
from ..core.grid import grid_lines
from ..core.preview import Preview, PreviewKind, RectanglePreview, TextCursor
from ..core.types import Element, ElementKind, GridSettings, Paper, Rect, Rectangle, Stroke, TextElement

logger = logging.getLogger(__name__)

# Preview styling
PREVIEW_DASH_PX = (5.0, 5.0)
CURSOR_COLOR = "#000000"
ERASER_OUTLINE_COLOR = "#d32f2f"
ERASER_OUTLINE_WIDTH = 2.0
ERASER_DASH_PX = (6.0, 4.0)
ERASER_FILL_ALPHA = 0.1


def _to_qrect(rect: Union[Rect, Rectangle]) -> QRectF:
    return QRectF(rect.x, rect.y, rect.width, rect.height)


def _dashed_pen(color: QColor, width: float, dash_px) -> QPen:
    """Pen with a dash pattern given in pixels (Qt measures dashes in pen widths)."""
    pen = QPen(color)
    pen.setWidthF(width)
    unit = max(width, 1.0)
    pen.setDashPattern([length / unit for length in dash_px])
    return pen


def make_font(family: str, font_size: float) -> QFont:
    """Font for a text element; generic CSS family names map to style hints."""
    font = QFont(family)
    if family == "sans-serif":
        font.setStyleHint(QFont.StyleHint.SansSerif)
    elif family == "serif":
        font.setStyleHint(QFont.StyleHint.Serif)
    elif family == "monospace":
        font.setStyleHint(QFont.StyleHint.Monospace)
    font.setPixelSize(max(1, round(font_size)))
    return font


# ==================== Elements ====================

def draw_stroke(painter: QPainter, stroke: Stroke):
    """
    Draw a freehand stroke segment by segment.

    Each segment is as wide as the stroke width scaled by the average
    pressure of its two end points. Strokes with fewer than two points are
    not drawn.
    """
    points = stroke.points
    if len(points) < 2:
        return

    pen = QPen(QColor(stroke.color))
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)

    for p0, p1 in zip(points, points[1:]):
        pressure = (p0.pressure + p1.pressure) / 2.0
        pen.setWidthF(stroke.width * pressure)
        painter.setPen(pen)
        painter.drawLine(QLineF(p0.x, p0.y, p1.x, p1.y))


def draw_rectangle(painter: QPainter, rect: Rectangle):
    color = QColor(rect.color)
    if rect.filled:
        painter.fillRect(_to_qrect(rect), color)
        return

    pen = QPen(color)
    pen.setWidthF(rect.stroke_width)
    painter.setPen(pen)
    painter.setBrush(Qt.BrushStyle.NoBrush)
    painter.drawRect(_to_qrect(rect))


def draw_text_element(painter: QPainter, text: TextElement):
    """Draw text with (x, y) at the top of the line box."""
    font = make_font(text.font_family, text.font_size)
    metrics = QFontMetricsF(font)
    painter.setFont(font)
    painter.setPen(QColor(text.color))
    painter.drawText(QPointF(text.x, text.y + metrics.ascent()), text.content)


def draw_element(painter: QPainter, element: Element):
    if element.kind is ElementKind.STROKE:
        draw_stroke(painter, element)
    elif element.kind is ElementKind.RECTANGLE:
        draw_rectangle(painter, element)
    elif element.kind is ElementKind.TEXT:
        draw_text_element(painter, element)


def draw_grid(painter: QPainter, settings: GridSettings, width: float, height: float):
    lines = grid_lines(settings, width, height)
    if not lines:
        return

    painter.save()
    pen = QPen(QColor(settings.color))
    pen.setWidthF(1.0)
    painter.setPen(pen)
    painter.setOpacity(settings.opacity)
    for x1, y1, x2, y2 in lines:
        painter.drawLine(QLineF(x1, y1, x2, y2))
    painter.restore()


# ==================== Previews ====================

def draw_preview_rectangle(painter: QPainter, preview: RectanglePreview):
    painter.setPen(_dashed_pen(QColor(preview.color), preview.stroke_width, PREVIEW_DASH_PX))
    painter.setBrush(Qt.BrushStyle.NoBrush)
    painter.drawRect(_to_qrect(preview.rect))


def draw_text_cursor(painter: QPainter, cursor: TextCursor):
    pen = QPen(QColor(CURSOR_COLOR))
    pen.setWidthF(1.0)
    painter.setPen(pen)
    painter.drawLine(QLineF(cursor.x, cursor.y, cursor.x, cursor.y + cursor.font_size))


def draw_text_preview(painter: QPainter, text: TextElement):
    """Pending text with the caret after its last character."""
    draw_text_element(painter, text)
    advance = QFontMetricsF(make_font(text.font_family, text.font_size)).horizontalAdvance(text.content)
    draw_text_cursor(painter, TextCursor(text.x + advance, text.y, text.font_size))


def draw_eraser_selection(painter: QPainter, rect: Rect):
    painter.save()
    fill = QColor(ERASER_OUTLINE_COLOR)
    fill.setAlphaF(ERASER_FILL_ALPHA)
    painter.fillRect(_to_qrect(rect), fill)
    painter.setPen(_dashed_pen(QColor(ERASER_OUTLINE_COLOR), ERASER_OUTLINE_WIDTH, ERASER_DASH_PX))
    painter.setBrush(Qt.BrushStyle.NoBrush)
    painter.drawRect(_to_qrect(rect))
    painter.restore()


def draw_preview(painter: QPainter, preview: Preview):
    kind = preview.kind
    if kind is PreviewKind.STROKE:
        draw_stroke(painter, preview.data)
    elif kind is PreviewKind.RECTANGLE:
        draw_preview_rectangle(painter, preview.data)
    elif kind is PreviewKind.TEXT_CURSOR:
        draw_text_cursor(painter, preview.data)
    elif kind is PreviewKind.TEXT_PREVIEW:
        draw_text_preview(painter, preview.data)
    elif kind is PreviewKind.ERASER_SELECTION:
        draw_eraser_selection(painter, preview.data)


# ==================== Whole Paper ====================

def render_paper(
    painter: QPainter,
    paper: Paper,
    width: float,
    height: float,
    preview: Optional[Preview] = None
):
    """Background, grid, elements in paint order, then the live preview."""
    painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
    painter.fillRect(QRectF(0, 0, width, height), QColor(Config.BACKGROUND_COLOR))
    draw_grid(painter, paper.grid_settings, width, height)
    for element in paper.elements:
        draw_element(painter, element)
    if preview is not None:
        draw_preview(painter, preview)


def render_to_image(paper: Paper, width: int, height: int, preview: Optional[Preview] = None) -> QImage:
    """Render a paper into a new ARGB image of the given size."""
    image = QImage(width, height, QImage.Format.Format_ARGB32_Premultiplied)
    image.fill(QColor(Config.BACKGROUND_COLOR))
    painter = QPainter(image)
    try:
        render_paper(painter, paper, width, height, preview)
    finally:
        painter.end()
    return image


def export_png(paper: Paper, path: Path, width: int, height: int) -> bool:
    """
    Save a paper as a PNG file.

    Returns:
        True if the image was written
    """
    image = render_to_image(paper, width, height)
    if not image.save(str(path), "PNG"):
        logger.error(f"Failed to write PNG: {path}")
        return False
    logger.info(f"Exported '{paper.name}' to {path}")
    return True


__all__ = [
    'make_font',
    'draw_stroke',
    'draw_rectangle',
    'draw_text_element',
    'draw_element',
    'draw_grid',
    'draw_preview_rectangle',
    'draw_text_cursor',
    'draw_text_preview',
    'draw_eraser_selection',
    'draw_preview',
    'render_paper',
    'render_to_image',
    'export_png',
]
