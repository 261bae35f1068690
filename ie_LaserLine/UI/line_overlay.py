"""Overlays of a detected laser line for display and inspection."""

from __future__ import annotations

import cv2
import numpy as np
from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QColor, QImage, QPainter, QPen, QPolygonF

from ie_LaserLine.Algorithm.laser_line_algorithm import LaserLine


def draw_laser_line(
    image: np.ndarray,
    line: LaserLine,
    color: tuple[int, int, int] = (0, 255, 0),
) -> np.ndarray:
    """Return a BGR copy of `image` with every valid line point marked."""
    if image.ndim == 2:
        out = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    else:
        out = image[:, :, :3].copy()
    h = out.shape[0]
    for x, y in line.valid_points():
        cx = int(x)
        cy = int(round(float(y)))
        if 0 <= cy < h:
            out[cy, cx] = color
    return out


class LaserLineOverlay:
    """Paints a detected laser line onto a grayscale camera frame."""

    def __init__(self, pen_width: int = 2):
        self.pen_width = pen_width

    def process_frame(
        self,
        frame_bytes: bytes,
        width: int,
        height: int,
        line: LaserLine,
        accent_color: str = "#ff3b30",
    ) -> QImage:
        """Return an ARGB32 QImage of the frame with the line painted in `accent_color`."""
        qimg = QImage(frame_bytes, width, height, width, QImage.Format_Grayscale8).copy()
        qimg = qimg.convertToFormat(QImage.Format_ARGB32)
        pts = [QPointF(float(x), float(y)) for x, y in line.valid_points()]
        if not pts:
            return qimg
        painter = QPainter(qimg)
        try:
            pen = QPen(QColor(accent_color))
            pen.setWidth(self.pen_width)
            pen.setCapStyle(Qt.RoundCap)
            painter.setPen(pen)
            painter.drawPoints(QPolygonF(pts))
        finally:
            painter.end()
        return qimg
