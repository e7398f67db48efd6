"""
Page surfaces used by the table renderer and the document composer.

Coordinates are top-down: ``y`` grows from the top edge of the page towards
the bottom, the way a layout cursor moves. ``ReportLabSurface`` converts to
PDF user space when drawing; ``RecordingSurface`` keeps a log of operations
and is used where no PDF is needed.
"""
from __future__ import annotations

from io import BytesIO
from typing import Any

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

ALIGNMENTS = ("left", "center", "right")

BORDER_COLOR = colors.grey
SHADE_COLOR = colors.HexColor("#f2f2f2")
TEXT_COLOR = colors.black


def leading_for(size: float) -> float:
    return size * 1.2


class PageSurface:
    """Append-only paged drawing surface with a top-down coordinate system."""

    def __init__(self, pagesize: tuple[float, float] = A4, margin: float = 40) -> None:
        self.width, self.height = pagesize
        self.margin = margin
        self.page_number = 1

    @property
    def top(self) -> float:
        return self.margin

    @property
    def bottom(self) -> float:
        return self.height - self.margin

    @property
    def left(self) -> float:
        return self.margin

    @property
    def right(self) -> float:
        return self.width - self.margin

    def wrap_text(self, text: str, width: float, font: str = "Helvetica", size: float = 10) -> list[str]:
        if not text or not text.strip():
            return []
        return simpleSplit(text, font, size, max(width, 1))

    def text_height(self, text: str, width: float, font: str = "Helvetica", size: float = 10) -> float:
        return len(self.wrap_text(text, width, font, size)) * leading_for(size)

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        width: float | None = None,
        align: str = "left",
        font: str = "Helvetica",
        size: float = 10,
        max_lines: int | None = None,
    ) -> float:
        """Draw ``text`` with its top edge at ``y``. Returns the height used."""
        if align not in ALIGNMENTS:
            raise ValueError(f"Unknown alignment: {align}")
        if width is None:
            lines = text.split("\n") if text else []
        else:
            lines = self.wrap_text(text, width, font, size)
        if max_lines is not None:
            lines = lines[:max_lines]
        leading = leading_for(size)
        for index, line in enumerate(lines):
            self._draw_line_of_text(line, x, y + index * leading, width, align, font, size)
        return len(lines) * leading

    def flow_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        width: float,
        align: str = "left",
        font: str = "Helvetica",
        size: float = 10,
    ) -> float:
        """Draw wrapped ``text`` line by line, starting a new page whenever the
        next line would cross the bottom margin. Returns the cursor after it."""
        if align not in ALIGNMENTS:
            raise ValueError(f"Unknown alignment: {align}")
        leading = leading_for(size)
        for line in self.wrap_text(text, width, font, size):
            if y + leading > self.bottom and y > self.top:
                self.new_page()
                y = self.top
            self._draw_line_of_text(line, x, y, width, align, font, size)
            y += leading
        return y

    def new_page(self) -> None:
        self.page_number += 1
        self._start_page()

    def _start_page(self) -> None:
        raise NotImplementedError

    def _draw_line_of_text(
        self, line: str, x: float, y: float, width: float | None, align: str, font: str, size: float
    ) -> None:
        raise NotImplementedError

    def draw_rect(
        self, x: float, y: float, width: float, height: float, *, fill: Any = None, stroke: bool = True
    ) -> None:
        raise NotImplementedError

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        raise NotImplementedError

    def draw_image(self, image: Any, x: float, y: float, width: float, height: float) -> None:
        raise NotImplementedError

    def finish(self) -> bytes:
        raise NotImplementedError


class ReportLabSurface(PageSurface):
    def __init__(
        self,
        pagesize: tuple[float, float] = A4,
        margin: float = 40,
        *,
        title: str | None = None,
        author: str | None = None,
    ) -> None:
        super().__init__(pagesize, margin)
        self._buffer = BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=pagesize)
        if title:
            self._canvas.setTitle(title)
        if author:
            self._canvas.setAuthor(author)

    def _y(self, y: float) -> float:
        return self.height - y

    def _start_page(self) -> None:
        self._canvas.showPage()

    def _draw_line_of_text(
        self, line: str, x: float, y: float, width: float | None, align: str, font: str, size: float
    ) -> None:
        c = self._canvas
        c.setFont(font, size)
        c.setFillColor(TEXT_COLOR)
        baseline = self._y(y + size)
        if align == "center" and width is not None:
            c.drawCentredString(x + width / 2, baseline, line)
        elif align == "right" and width is not None:
            c.drawRightString(x + width, baseline, line)
        else:
            c.drawString(x, baseline, line)

    def draw_rect(
        self, x: float, y: float, width: float, height: float, *, fill: Any = None, stroke: bool = True
    ) -> None:
        c = self._canvas
        c.saveState()
        c.setStrokeColor(BORDER_COLOR)
        c.setLineWidth(0.5)
        if fill is not None:
            c.setFillColor(fill)
        c.rect(x, self._y(y + height), width, height, stroke=int(stroke), fill=int(fill is not None))
        c.restoreState()

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        c = self._canvas
        c.saveState()
        c.setStrokeColor(BORDER_COLOR)
        c.setLineWidth(0.5)
        c.line(x1, self._y(y1), x2, self._y(y2))
        c.restoreState()

    def draw_image(self, image: Any, x: float, y: float, width: float, height: float) -> None:
        self._canvas.drawImage(
            image,
            x,
            self._y(y + height),
            width=width,
            height=height,
            preserveAspectRatio=True,
            mask="auto",
        )

    def finish(self) -> bytes:
        self._canvas.save()
        data = self._buffer.getvalue()
        self._buffer.close()
        return data


class RecordingSurface(PageSurface):
    """
    Headless surface: records every drawing call as ``(page, op, details)``.
    Text is measured with the same font metrics as the PDF surface, so
    layouts (wrapping, page breaks) match what ``ReportLabSurface`` produces.
    """

    def __init__(self, pagesize: tuple[float, float] = A4, margin: float = 40) -> None:
        super().__init__(pagesize, margin)
        self.operations: list[tuple[int, str, dict[str, Any]]] = []
        self.finished = False

    def _record(self, op: str, **details: Any) -> None:
        self.operations.append((self.page_number, op, details))

    def _start_page(self) -> None:
        self._record("new_page")

    def _draw_line_of_text(
        self, line: str, x: float, y: float, width: float | None, align: str, font: str, size: float
    ) -> None:
        self._record("text", text=line, x=x, y=y, width=width, align=align, font=font, size=size)

    def draw_rect(
        self, x: float, y: float, width: float, height: float, *, fill: Any = None, stroke: bool = True
    ) -> None:
        self._record("rect", x=x, y=y, width=width, height=height, fill=fill, stroke=stroke)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._record("line", x1=x1, y1=y1, x2=x2, y2=y2)

    def draw_image(self, image: Any, x: float, y: float, width: float, height: float) -> None:
        self._record("image", x=x, y=y, width=width, height=height)

    def finish(self) -> bytes:
        self.finished = True
        return b""

    def texts(self, page: int | None = None) -> list[str]:
        return [
            details["text"]
            for page_no, op, details in self.operations
            if op == "text" and (page is None or page_no == page)
        ]

    def ops(self, op: str) -> list[tuple[int, dict[str, Any]]]:
        return [(page_no, details) for page_no, kind, details in self.operations if kind == op]
