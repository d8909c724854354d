"""Backend-independent vector scene graph with a deterministic SVG writer."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union
from xml.sax.saxutils import escape

CANVAS_WIDTH = 240
CANVAS_HEIGHT = 320
GRID_UNIT = 18
INK = "#121212"
PAPER = "#ffffff"
FAINT = "#e5e5e5"


def fmt(value: float) -> str:
    """Fixed-precision number formatting so identical scenes serialise identically."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def hsl_color(hue: float, saturation: float = 82, lightness: float = 46) -> str:
    normalised = int(math.floor((((hue % 360) + 360) % 360) + 0.5))
    return f"hsl({normalised}, {fmt(saturation)}%, {fmt(lightness)}%)"


@dataclass(frozen=True)
class Rotate:
    angle: float
    cx: float = 0.0
    cy: float = 0.0

    def to_svg(self) -> str:
        return f"rotate({fmt(self.angle)} {fmt(self.cx)} {fmt(self.cy)})"


@dataclass(frozen=True)
class Translate:
    dx: float
    dy: float

    def to_svg(self) -> str:
        return f"translate({fmt(self.dx)} {fmt(self.dy)})"


Transform = Union[Rotate, Translate]


def _paint(
    fill: Optional[str],
    stroke: Optional[str],
    stroke_width: Optional[float],
    opacity: Optional[float] = None,
    transform: Optional[Transform] = None,
) -> str:
    parts = [f'fill="{fill or "none"}"']
    if stroke is not None:
        parts.append(f'stroke="{stroke}"')
    if stroke_width is not None:
        parts.append(f'stroke-width="{fmt(stroke_width)}"')
    if opacity is not None:
        parts.append(f'opacity="{fmt(opacity)}"')
    if transform is not None:
        parts.append(f'transform="{transform.to_svg()}"')
    return " ".join(parts)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[float] = None
    opacity: Optional[float] = None
    transform: Optional[Transform] = None

    def to_svg(self) -> str:
        paint = _paint(self.fill, self.stroke, self.stroke_width, self.opacity, self.transform)
        return (
            f'<rect x="{fmt(self.x)}" y="{fmt(self.y)}" width="{fmt(max(self.width, 0.0))}" '
            f'height="{fmt(max(self.height, 0.0))}" {paint}/>'
        )


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[float] = None
    dasharray: Optional[str] = None

    def to_svg(self) -> str:
        paint = _paint(self.fill, self.stroke, self.stroke_width)
        dash = f' stroke-dasharray="{self.dasharray}"' if self.dasharray else ""
        return (
            f'<circle cx="{fmt(self.cx)}" cy="{fmt(self.cy)}" r="{fmt(max(self.r, 0.0))}" '
            f"{paint}{dash}/>"
        )


@dataclass(frozen=True)
class Polygon:
    points: tuple[tuple[float, float], ...]
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: Optional[float] = None

    def to_svg(self) -> str:
        coords = " ".join(f"{fmt(x)},{fmt(y)}" for x, y in self.points)
        return f'<polygon points="{coords}" {_paint(self.fill, self.stroke, self.stroke_width)}/>'


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str = INK
    stroke_width: float = 0.5

    def to_svg(self) -> str:
        return (
            f'<line x1="{fmt(self.x1)}" y1="{fmt(self.y1)}" x2="{fmt(self.x2)}" '
            f'y2="{fmt(self.y2)}" stroke="{self.stroke}" stroke-width="{fmt(self.stroke_width)}"/>'
        )


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    content: str
    font_size: float = 7
    font_weight: str = "900"
    font_family: str = "'Jost', sans-serif"
    fill: str = INK

    def to_svg(self) -> str:
        return (
            f'<text x="{fmt(self.x)}" y="{fmt(self.y)}" font-family="{escape(self.font_family)}" '
            f'font-weight="{self.font_weight}" font-size="{fmt(self.font_size)}" '
            f'fill="{self.fill}">{escape(self.content)}</text>'
        )


@dataclass(frozen=True)
class Group:
    children: tuple["Element", ...] = ()
    transform: Optional[Transform] = None

    def to_svg(self) -> str:
        attrs = f' transform="{self.transform.to_svg()}"' if self.transform is not None else ""
        inner = "".join(child.to_svg() for child in self.children)
        return f"<g{attrs}>{inner}</g>"


Element = Union[Rect, Circle, Polygon, Line, Text, Group]


def iter_primitives(elements: tuple[Element, ...] | list[Element]) -> Iterator[Element]:
    """Depth-first walk yielding leaf primitives, skipping group containers."""
    for element in elements:
        if isinstance(element, Group):
            yield from iter_primitives(element.children)
        else:
            yield element


@dataclass(frozen=True)
class Scene:
    elements: tuple[Element, ...] = ()
    width: int = CANVAS_WIDTH
    height: int = CANVAS_HEIGHT
    background: str = PAPER
    signature: Optional[str] = None
    placeholder: bool = False
    metadata: dict[str, object] = field(default_factory=dict, compare=False, hash=False)

    def primitives(self) -> list[Element]:
        return list(iter_primitives(self.elements))

    def to_svg(self) -> str:
        body = "".join(element.to_svg() for element in self.elements)
        signature = ""
        if self.signature:
            signature = Text(x=8, y=self.height - 7, content=self.signature).to_svg()
        frame = Rect(0, 0, self.width, self.height, stroke=INK, stroke_width=2).to_svg()
        return (
            '<svg xmlns="http://www.w3.org/2000/svg" '
            f'viewBox="0 0 {self.width} {self.height}" width="{self.width}" '
            f'height="{self.height}" preserveAspectRatio="xMidYMid meet" '
            'shape-rendering="geometricPrecision">'
            f"{Rect(0, 0, self.width, self.height, fill=self.background).to_svg()}"
            f"{body}{signature}{frame}</svg>"
        )


def swiss_rule(x1: float, y1: float, x2: float, y2: float) -> Line:
    return Line(x1, y1, x2, y2, stroke=INK, stroke_width=0.5)


def stripe_pattern(
    x: float,
    y: float,
    width: float,
    height: float,
    color: str,
    *,
    vertical: bool = False,
    density: float = 4,
) -> Group:
    """Hatch of half-density bars on every other step of ``density``."""
    bars: list[Element] = []
    if vertical:
        count = int(math.floor(width / density))
        for index in range(0, count, 2):
            bars.append(Rect(x + index * density, y, density / 2, height, fill=color))
    else:
        count = int(math.floor(height / density))
        for index in range(0, count, 2):
            bars.append(Rect(x, y + index * density, width, density / 2, fill=color))
    return Group(tuple(bars))


def dot_grid(
    x: float,
    y: float,
    width: float,
    height: float,
    color: str,
    *,
    density: float = 12,
    radius: float = 1.5,
) -> Group:
    """Checkerboard of small dots centred in each ``density`` cell."""
    dots: list[Element] = []
    cols = int(math.floor(width / density))
    rows = int(math.floor(height / density))
    for row in range(rows):
        for col in range(cols):
            if (row + col) % 2 == 0:
                dots.append(
                    Circle(
                        x + col * density + density / 2,
                        y + row * density + density / 2,
                        radius,
                        fill=color,
                    )
                )
    return Group(tuple(dots))
