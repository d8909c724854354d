"""The ten poster archetypes.

Every template is a pure function of a :class:`SessionIdentity`: the three
palette hues choose the colours and ``identity.seed`` drives every geometric
decision through :func:`rng_range`/:func:`srandom` with small per-decision
offsets. Templates return a flat list of scene elements laid out on the
240x320 canvas; the composition director frames and serialises them.

The first five encode one harmony rule each; the last five are freer
generative layouts built from the same palette.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from ..app.models import SessionIdentity
from .prng import rng_range, seeded_shuffle, srandom
from .scene import (
    CANVAS_HEIGHT as CH,
    CANVAS_WIDTH as CW,
    FAINT,
    GRID_UNIT as G,
    INK,
    Circle,
    Element,
    Group,
    Polygon,
    Rect,
    Rotate,
    Translate,
    dot_grid,
    hsl_color,
    stripe_pattern,
    swiss_rule,
)

# Base offset for colour-order shuffles; keeps them clear of the geometry draws.
SHUFFLE_OFFSET = 40


@dataclass(frozen=True)
class Paint:
    """Maps a palette hue to a fill at the poster's fixed saturation/lightness."""

    saturation: float = 82.0
    lightness: float = 46.0

    def __call__(self, hue: float) -> str:
        return hsl_color(hue, self.saturation, self.lightness)


DEFAULT_PAINT = Paint()

Archetype = Callable[[SessionIdentity, Paint], list[Element]]


def complementary_split(identity: SessionIdentity, paint: Paint = DEFAULT_PAINT) -> list[Element]:
    p, s, a = identity.palette
    seed = identity.seed
    vertical = srandom(seed) > 0.5
    ratio = rng_range(seed + 1, 0.4, 0.7)
    m = rng_range(seed + 2, G, G * 2)

    if vertical:
        split_x = CW * ratio
        return [
            Rect(m, m, split_x - m - 2, CH - m * 2, fill=paint(p)),
            Rect(split_x + 2, m, CW - split_x - m - 2, CH - m * 2, fill=paint(s)),
            Rect(split_x - G, CH - m - G * 2, G * 2, G * 2, fill=paint(a)),
            swiss_rule(m, CH - m / 2, CW - m, CH - m / 2),
        ]
    split_y = CH * ratio
    return [
        Rect(m, m, CW - m * 2, split_y - m - 2, fill=paint(p)),
        Rect(m, split_y + 2, CW - m * 2, CH - split_y - m - 2, fill=paint(s)),
        Rect(CW - m - G * 2, split_y - G, G * 2, G * 2, fill=paint(a)),
        swiss_rule(m / 2, split_y, CW - m / 2, split_y),
    ]


def analogous_bands(identity: SessionIdentity, paint: Paint = DEFAULT_PAINT) -> list[Element]:
    seed = identity.seed
    m = rng_range(seed, G, G * 3)
    width = CW - m * 2
    total = CH * rng_range(seed + 1, 0.5, 0.75)
    top = (CH - total) / 2
    h1 = total * rng_range(seed + 2, 0.2, 0.5)
    h2 = total * rng_range(seed + 3, 0.2, 0.4)
    h3 = total - h1 - h2
    first, second, third = seeded_shuffle(identity.palette, seed + SHUFFLE_OFFSET)

    elements: list[Element] = [
        Rect(m, top, width, h1, fill=paint(first)),
        Rect(m, top + h1, width, h2, fill=paint(second)),
        Rect(m, top + h1 + h2, width, h3, fill=paint(third)),
        Rect(m, top, width, total, stroke=INK, stroke_width=1),
    ]
    if srandom(seed + 5) > 0.5:
        elements.append(swiss_rule(m, top + h1, CW - m, top + h1))
    else:
        elements.append(swiss_rule(CW / 2, G, CW / 2, CH - G))
    return elements


def split_t_layout(identity: SessionIdentity, paint: Paint = DEFAULT_PAINT) -> list[Element]:
    p, s, a = identity.palette
    seed = identity.seed
    m = G * 1.5
    flip = srandom(seed) > 0.5
    big_w = CW * rng_range(seed + 1, 0.4, 0.6)

    x_big = CW - m - big_w if flip else m
    x_small = m if flip else m + big_w + 2
    w_small = CW - m * 2 - big_w - 2
    total = CH - m * 3
    split_y = m + total * rng_range(seed + 2, 0.3, 0.7)
    lower_h = total + m - split_y - 1

    elements: list[Element] = [
        Rect(x_big, m, big_w, total, fill=paint(p)),
        Rect(x_small, m, w_small, split_y - m - 1, fill=paint(s)),
    ]
    if srandom(seed + 3) > 0.7:
        elements.append(stripe_pattern(x_small, split_y + 1, w_small, lower_h, paint(a), density=3))
    else:
        elements.append(Rect(x_small, split_y + 1, w_small, lower_h, fill=paint(a)))
    elements.append(swiss_rule(0, split_y, CW, split_y))
    return elements


def triadic_field(identity: SessionIdentity, paint: Paint = DEFAULT_PAINT) -> list[Element]:
    p, s, a = identity.palette
    seed = identity.seed
    field_h = CH * rng_range(seed, 0.4, 0.7)
    field_on_top = srandom(seed + 1) > 0.5
    field_y = 0 if field_on_top else CH - field_h
    size = CW * rng_range(seed + 2, 0.4, 0.6)
    cx = CW * rng_range(seed + 3, 0.3, 0.7)
    cy = field_h + (CH - field_h) / 2 if field_on_top else (CH - field_h) / 2
    edge_y = field_h if field_on_top else CH - field_h

    elements: list[Element] = [Rect(0, field_y, CW, field_h, fill=paint(p))]
    if srandom(seed + 4) > 0.3:
        half = size / 2
        elements.append(
            Polygon(
                ((cx, cy - half), (cx - half, cy + half), (cx + half, cy + half)),
                fill=paint(s),
            )
        )
    else:
        elements.append(Circle(cx, cy, size / 2, fill=paint(s)))
    elements.append(
        Circle(
            CW - G if field_on_top else G,
            CH - G if field_on_top else G,
            G / 1.5,
            fill=paint(a),
        )
    )
    elements.append(swiss_rule(0, edge_y, CW, edge_y))
    return elements


def square_quadrants(identity: SessionIdentity, paint: Paint = DEFAULT_PAINT) -> list[Element]:
    p, s, a = identity.palette
    seed = identity.seed
    size = CW * rng_range(seed, 0.4, 0.7)
    half = size / 2
    x0 = CW / 2 - half
    y0 = CH / 2 - half
    fills = seeded_shuffle((p, s, a, a + 40), seed + SHUFFLE_OFFSET)
    off_x = rng_range(seed + 2, -20, 20)
    off_y = rng_range(seed + 3, -20, 20)

    block = Group(
        (
            Rect(x0, y0, half, half, fill=paint(fills[0])),
            Rect(x0 + half, y0, half, half, fill=paint(fills[1])),
            Rect(x0, y0 + half, half, half, fill=paint(fills[2])),
            Rect(x0 + half, y0 + half, half, half, fill=paint(fills[3])),
            Rect(x0, y0, size, size, stroke=INK, stroke_width=1),
        ),
        transform=Translate(off_x, off_y),
    )
    return [
        block,
        swiss_rule(x0 + half + off_x, 0, x0 + half + off_x, CH),
        swiss_rule(0, y0 + half + off_y, CW, y0 + half + off_y),
    ]


def totem_stack(identity: SessionIdentity, paint: Paint = DEFAULT_PAINT) -> list[Element]:
    seed = identity.seed
    palette = identity.palette
    width = CW * rng_range(seed, 0.3, 0.5)
    x = (CW - width) / 2
    parts = int(math.floor(rng_range(seed + 1, 3, 6)))
    weights = [rng_range(seed + 30 + index, 1, 3) for index in range(parts)]
    unit = (CH - G * 4) / sum(weights)

    elements: list[Element] = []
    y = G * 2
    for index, weight in enumerate(weights):
        height = math.floor(weight * unit)
        color = paint(palette[index % 3])
        kind = srandom(seed + index + 10)
        if kind > 0.6:
            elements.append(Rect(x, y, width, height - 2, fill=color))
        elif kind > 0.3:
            elements.append(stripe_pattern(x, y, width, height - 2, color, density=3))
        else:
            size = min(width, height - 2)
            cx = x + width / 2
            cy = y + (height - 2) / 2
            if srandom(seed + index + 20) > 0.5:
                elements.append(Circle(cx, cy, size / 2, fill=color))
            else:
                elements.append(
                    Rect(
                        cx - size / 2,
                        cy - size / 2,
                        size,
                        size,
                        fill=color,
                        transform=Rotate(45, cx, cy),
                    )
                )
        y += height
    elements.append(swiss_rule(CW / 2, 0, CW / 2, CH))
    return elements


def orbital_rings(identity: SessionIdentity, paint: Paint = DEFAULT_PAINT) -> list[Element]:
    p, s, a = identity.palette
    seed = identity.seed
    cx = CW / 2
    cy = CH / 2
    core = CW * rng_range(seed, 0.15, 0.35)
    orbit = core + rng_range(seed + 1, 20, 50)
    satellite = rng_range(seed + 2, 10, 30)
    angle = rng_range(seed + 3, 0, math.pi * 2)
    sx = cx + math.cos(angle) * orbit
    sy = cy + math.sin(angle) * orbit

    elements: list[Element] = [
        Circle(cx, cy, orbit, stroke=paint(s), stroke_width=1, dasharray="4 4"),
        Circle(cx, cy, core, fill=paint(p)),
    ]
    if srandom(seed + 4) > 0.5:
        elements.append(Circle(sx, sy, satellite, fill=paint(a)))
    else:
        elements.append(
            Rect(sx - satellite, sy - satellite, satellite * 2, satellite * 2, fill=paint(a))
        )
    elements.append(swiss_rule(cx - core * 2, cy, cx + core * 2, cy))
    elements.append(swiss_rule(cx, cy - core * 2, cx, cy + core * 2))
    return elements


def gridnik_cells(identity: SessionIdentity, paint: Paint = DEFAULT_PAINT) -> list[Element]:
    p, s, a = identity.palette
    seed = identity.seed
    cols = int(math.floor(rng_range(seed, 3, 5)))
    rows = int(math.floor(rng_range(seed + 1, 4, 6)))
    margin = G * 2
    cell_w = (CW - margin * 2) / cols
    cell_h = (CH - margin * 2) / rows

    elements: list[Element] = []
    for row in range(rows):
        for col in range(cols):
            draw = srandom(seed + row * 10 + col + 100)
            x = margin + col * cell_w
            y = margin + row * cell_h
            w = cell_w - 2
            h = cell_h - 2
            if draw > 0.85:
                elements.append(Rect(x, y, w, h, fill=paint(p)))
            elif draw > 0.7:
                elements.append(dot_grid(x, y, w, h, paint(s), density=6))
            elif draw > 0.6:
                elements.append(Circle(x + w / 2, y + h / 2, min(w, h) / 3, fill=paint(a)))
            elif draw < 0.2:
                elements.append(Rect(x, y, w, h, stroke=FAINT, stroke_width=1))
    return elements


def cantilever_block(identity: SessionIdentity, paint: Paint = DEFAULT_PAINT) -> list[Element]:
    p, s, a = identity.palette
    seed = identity.seed
    top_h = CH * rng_range(seed, 0.5, 0.7)
    bottom_h = CH - top_h - G * 2
    anchor_w = CW - G * 4
    anchor_x = G * 2
    float_size = G * rng_range(seed + 1, 3, 5)
    float_x = anchor_x + anchor_w * srandom(seed + 2)
    float_y = top_h - float_size - G

    elements: list[Element] = [
        Rect(anchor_x, top_h, anchor_w, bottom_h, fill=paint(p)),
        Rect(anchor_x, top_h + G, anchor_w, G, fill=paint(s)),
    ]
    if srandom(seed + 3) > 0.5:
        elements.append(Circle(float_x, float_y + float_size / 2, float_size / 2, fill=paint(a)))
    else:
        elements.append(Rect(float_x - float_size / 2, float_y, float_size, float_size, fill=paint(a)))
    elements.append(swiss_rule(anchor_x, top_h, anchor_x + anchor_w, top_h))
    elements.append(swiss_rule(float_x, G, float_x, CH - G))
    return elements


def constructivist_beam(identity: SessionIdentity, paint: Paint = DEFAULT_PAINT) -> list[Element]:
    p, s, a = identity.palette
    seed = identity.seed
    y_left = CH * rng_range(seed, 0.2, 0.5)
    y_right = CH * rng_range(seed + 1, 0.6, 0.9)
    beam_angle = rng_range(seed + 2, -30, 30)
    beam_x = CW * rng_range(seed + 3, 0.2, 0.8)
    beam_w = rng_range(seed + 4, 20, 50)

    beam = Group(
        (
            Rect(beam_x, -50, beam_w, CH + 100, fill=paint(s), opacity=0.9),
            stripe_pattern(beam_x + 5, -50, beam_w / 2, CH + 100, paint(a), vertical=True, density=3),
        ),
        transform=Rotate(beam_angle, beam_x, CH / 2),
    )
    return [
        Polygon(((0, y_left), (CW, y_right), (CW, CH), (0, CH)), fill=paint(p)),
        beam,
        Circle(
            CW * rng_range(seed + 5, 0.2, 0.8),
            CH * rng_range(seed + 6, 0.2, 0.8),
            G * 2,
            fill=paint(a),
        ),
    ]


ARCHETYPES: tuple[Archetype, ...] = (
    complementary_split,
    analogous_bands,
    split_t_layout,
    triadic_field,
    square_quadrants,
    totem_stack,
    orbital_rings,
    gridnik_cells,
    cantilever_block,
    constructivist_beam,
)

ARCHETYPE_NAMES: tuple[str, ...] = (
    "complementary",
    "analogous",
    "split",
    "triadic",
    "square",
    "totem",
    "orbital",
    "gridnik",
    "cantilever",
    "constructivist",
)


def archetype_name(index: int) -> str:
    return ARCHETYPE_NAMES[index % len(ARCHETYPE_NAMES)]
