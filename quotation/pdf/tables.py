from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from .surface import SHADE_COLOR, PageSurface, leading_for

FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
FONT_SIZE = 9
TITLE_FONT_SIZE = 10

TITLE_HEIGHT = 20
MIN_HEADER_HEIGHT = 20
MIN_ROW_HEIGHT = 24
CELL_PADDING_X = 4
CELL_PADDING_Y = 4


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    width: float
    align: str = "left"


@dataclass
class TableSpec:
    columns: Sequence[Column]
    rows: Sequence[Mapping[str, Any]] = field(default_factory=list)
    title: str | None = None

    @property
    def width(self) -> float:
        return sum(column.width for column in self.columns)


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass
class _RowLayout:
    texts: list[str]
    height: float
    max_lines: int | None


def _measure_row(
    surface: PageSurface,
    texts: list[str],
    columns: Sequence[Column],
    font: str,
    min_height: float,
    max_height: float | None = None,
) -> _RowLayout:
    leading = leading_for(FONT_SIZE)
    line_counts = [
        len(surface.wrap_text(text, column.width - 2 * CELL_PADDING_X, font, FONT_SIZE))
        for text, column in zip(texts, columns)
    ]
    tallest = max(line_counts, default=0)
    height = max(min_height, tallest * leading + 2 * CELL_PADDING_Y)
    max_lines = None
    if max_height is not None and height > max_height:
        # Row cannot fit on an empty page: keep the lines that do.
        max_lines = max(1, int((max_height - 2 * CELL_PADDING_Y) // leading))
        height = min(max_height, max(min_height, max_lines * leading + 2 * CELL_PADDING_Y))
    return _RowLayout(texts=texts, height=height, max_lines=max_lines)


def _draw_row(
    surface: PageSurface,
    x: float,
    top: float,
    row: _RowLayout,
    columns: Sequence[Column],
    font: str,
    fill: Any = None,
) -> None:
    leading = leading_for(FONT_SIZE)
    cell_x = x
    for text, column in zip(row.texts, columns):
        surface.draw_rect(cell_x, top, column.width, row.height, fill=fill)
        inner_width = column.width - 2 * CELL_PADDING_X
        lines = len(surface.wrap_text(text, inner_width, font, FONT_SIZE))
        if row.max_lines is not None:
            lines = min(lines, row.max_lines)
        text_top = top + (row.height - lines * leading) / 2
        surface.draw_text(
            text,
            cell_x + CELL_PADDING_X,
            text_top,
            width=inner_width,
            align=column.align,
            font=font,
            size=FONT_SIZE,
            max_lines=row.max_lines,
        )
        cell_x += column.width


def draw_table(
    surface: PageSurface,
    table: TableSpec,
    y: float,
    *,
    x: float | None = None,
    repeat_title_on_break: bool = True,
) -> float:
    """
    Draw a bordered table with an optional shaded title bar and a header row,
    starting at ``y``. Rows that do not fit above the bottom margin move to a
    new page, where the header (and the title, if ``repeat_title_on_break``)
    is drawn again. Returns the cursor just below the last row.
    """
    x = surface.left if x is None else x
    columns = list(table.columns)
    total_width = table.width
    header = _measure_row(surface, [column.label for column in columns], columns, BOLD_FONT, MIN_HEADER_HEIGHT)
    repeat_title = bool(table.title) and repeat_title_on_break

    def draw_title(top: float) -> float:
        surface.draw_rect(x, top, total_width, TITLE_HEIGHT, fill=SHADE_COLOR)
        surface.draw_text(
            table.title or "",
            x,
            top + (TITLE_HEIGHT - leading_for(TITLE_FONT_SIZE)) / 2,
            width=total_width,
            align="center",
            font=BOLD_FONT,
            size=TITLE_FONT_SIZE,
            max_lines=1,
        )
        return top + TITLE_HEIGHT

    def draw_header(top: float) -> float:
        _draw_row(surface, x, top, header, columns, BOLD_FONT, fill=SHADE_COLOR)
        return top + header.height

    def continue_on_new_page() -> float:
        surface.new_page()
        top = surface.top
        if repeat_title:
            top = draw_title(top)
        return top

    if table.title:
        if y + TITLE_HEIGHT + header.height >= surface.bottom:
            surface.new_page()
            y = surface.top
        y = draw_title(y)

    if y + header.height >= surface.bottom:
        y = continue_on_new_page()
    y = draw_header(y)

    room = surface.bottom - surface.top - header.height - (TITLE_HEIGHT if repeat_title else 0) - 1
    for row in table.rows:
        texts = [cell_text(row.get(column.key)) for column in columns]
        layout = _measure_row(surface, texts, columns, FONT, MIN_ROW_HEIGHT, room)
        if y + layout.height >= surface.bottom:
            y = draw_header(continue_on_new_page())
        _draw_row(surface, x, y, layout, columns, FONT)
        y += layout.height
    return y
