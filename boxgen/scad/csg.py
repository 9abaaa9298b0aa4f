"""
CSG capability — a small immutable solid tree rendered to OpenSCAD.

Solids are built from a handful of primitives (extruded 2-D profile,
cylinder/cone, cuboid) and combined with ``union`` / ``subtract`` and
rigid transforms.  Nothing is evaluated in Python: ``to_scad`` emits the
tree as OpenSCAD source and the ``openscad`` CLI (see ``compiler``) does
the boolean work.

2-D profiles are plain vertex lists.  Rounded rectangles are computed
with Shapely (``buffer`` of a shrunken box), so the SCAD output only
needs ``polygon`` + ``linear_extrude`` for every prism.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator

from shapely.geometry import box as shapely_box


# ── Solid node ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Solid:
    """One node of the CSG tree.

    Attributes
    ----------
    kind     : "extrude", "cylinder", "cuboid", "union", "difference",
               "translate" or "rotate".
    args     : primitive / transform arguments (read-only by convention).
    children : operand solids for booleans and transforms.
    label    : optional comment emitted in the SCAD source.
    """

    kind: str
    args: dict = field(default_factory=dict)
    children: tuple[Solid, ...] = ()
    label: str = ""

    def walk(self) -> Iterator[Solid]:
        """Depth-first iteration over this node and all descendants."""
        yield self
        for child in self.children:
            yield from child.walk()

    def count(self, kind: str | None = None, label: str | None = None) -> int:
        """Number of nodes matching *kind* and/or *label*."""
        return sum(
            1 for n in self.walk()
            if (kind is None or n.kind == kind) and (label is None or n.label == label)
        )


# ── 2-D profiles ────────────────────────────────────────────────────


def safe_radius(size_a: float, size_b: float, desired: float) -> float:
    """Clamp a corner radius so it never exceeds half the smaller side."""
    limit = max(0.0, min(size_a, size_b) / 2 - 0.01)
    return min(max(0.0, desired), limit)


def rounded_rectangle(size_x: float, size_y: float, radius: float, segments: int = 32) -> list[list[float]]:
    """CCW rounded rectangle centred on the origin."""
    if size_x <= 0 or size_y <= 0:
        raise ValueError(f"rounded_rectangle needs a positive size, got {size_x:.3f} x {size_y:.3f}")
    r = safe_radius(size_x, size_y, radius)
    hx, hy = size_x / 2, size_y / 2
    if r <= 0:
        return [[-hx, -hy], [hx, -hy], [hx, hy], [-hx, hy]]
    core = shapely_box(-hx + r, -hy + r, hx - r, hy - r)
    rounded = core.buffer(r, quad_segs=max(1, segments // 4))
    return [[x, y] for x, y in list(rounded.exterior.coords)[:-1]]


# ── primitives ──────────────────────────────────────────────────────


def extrude_profile(profile: list[list[float]], height: float, *, center: bool = False, label: str = "") -> Solid:
    """Extrude a 2-D *profile* along +Z by *height*.

    With *center* the prism spans ``-height/2 .. height/2``.
    """
    if len(profile) < 3:
        raise ValueError("extrude_profile needs at least 3 vertices")
    if height <= 0:
        raise ValueError(f"extrude_profile needs a positive height, got {height:.3f}")
    solid = Solid("extrude", {"points": [list(p) for p in profile], "height": height}, label=label)
    if center:
        solid = translate((0, 0, -height / 2), solid)
    return solid


def rounded_prism(size_x: float, size_y: float, size_z: float, radius: float, *, label: str = "") -> Solid:
    """Rounded-rectangle prism centred on the origin in all three axes."""
    return extrude_profile(rounded_rectangle(size_x, size_y, radius), size_z, center=True, label=label)


def cylinder(radius: float, height: float, *, segments: int = 32, label: str = "") -> Solid:
    """Z-axis cylinder centred on the origin."""
    return cone(radius, radius, height, segments=segments, label=label)


def cone(r_bottom: float, r_top: float, height: float, *, segments: int = 32, label: str = "") -> Solid:
    """Z-axis frustum centred on the origin (bottom at −height/2)."""
    if height <= 0 or r_bottom < 0 or r_top < 0:
        raise ValueError(f"invalid cone r1={r_bottom:.3f} r2={r_top:.3f} h={height:.3f}")
    return Solid(
        "cylinder",
        {"r1": r_bottom, "r2": r_top, "height": height, "segments": segments},
        label=label,
    )


def cuboid(size: tuple[float, float, float], *, label: str = "") -> Solid:
    """Axis-aligned box centred on the origin."""
    if min(size) <= 0:
        raise ValueError(f"cuboid needs a positive size, got {size!r}")
    return Solid("cuboid", {"size": tuple(size)}, label=label)


# ── booleans and transforms ─────────────────────────────────────────


def union(*solids: Solid, label: str = "") -> Solid:
    solids = tuple(s for s in solids if s is not None)
    if not solids:
        raise ValueError("union of nothing")
    if len(solids) == 1 and not label:
        return solids[0]
    return Solid("union", children=solids, label=label)


def subtract(base: Solid, *cuts: Solid, label: str = "") -> Solid:
    """*base* minus every solid in *cuts*."""
    cuts = tuple(c for c in cuts if c is not None)
    if not cuts:
        return base
    return Solid("difference", children=(base, *cuts), label=label)


def translate(offset: tuple[float, float, float], solid: Solid) -> Solid:
    return Solid("translate", {"v": tuple(offset)}, children=(solid,))


def rotate(angles_deg: tuple[float, float, float], solid: Solid) -> Solid:
    """Rotate about X, then Y, then Z (degrees)."""
    return Solid("rotate", {"a": tuple(angles_deg)}, children=(solid,))


# ── SCAD rendering ──────────────────────────────────────────────────


def _num(v: float) -> str:
    if not math.isfinite(v):
        raise ValueError(f"non-finite value in geometry: {v!r}")
    return f"{v:.3f}"


def _vec(values) -> str:
    return "[" + ", ".join(_num(v) for v in values) + "]"


def _numbers(value) -> Iterator[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        yield value
    elif isinstance(value, (list, tuple)):
        for v in value:
            yield from _numbers(v)


def check_finite(solid: Solid) -> Solid:
    """Raise ``ValueError`` if any node carries a NaN/inf argument."""
    for node in solid.walk():
        for key, value in node.args.items():
            if any(not math.isfinite(v) for v in _numbers(value)):
                raise ValueError(f"non-finite '{key}' in {node.kind} node {node.label!r}")
    return solid


def _fmt_poly(pts: list[list[float]]) -> str:
    """Format polygon vertices for an OpenSCAD ``polygon()`` call."""
    return ", ".join(f"[{_num(x)}, {_num(y)}]" for x, y in pts)


def _lines(node: Solid, indent: str) -> list[str]:
    out: list[str] = []
    if node.label:
        out.append(f"{indent}// {node.label}")
    a = node.args
    if node.kind == "extrude":
        out += [
            f"{indent}linear_extrude(height = {_num(a['height'])})",
            f"{indent}    polygon(points = [{_fmt_poly(a['points'])}]);",
        ]
    elif node.kind == "cylinder":
        out.append(
            f"{indent}cylinder(h = {_num(a['height'])}, r1 = {_num(a['r1'])}, "
            f"r2 = {_num(a['r2'])}, center = true, $fn = {a['segments']});"
        )
    elif node.kind == "cuboid":
        out.append(f"{indent}cube({_vec(a['size'])}, center = true);")
    elif node.kind in ("union", "difference"):
        out.append(f"{indent}{node.kind}() {{")
        for child in node.children:
            out += _lines(child, indent + "    ")
        out.append(f"{indent}}}")
    elif node.kind in ("translate", "rotate"):
        key = "v" if node.kind == "translate" else "a"
        out.append(f"{indent}{node.kind}({_vec(a[key])})")
        out += _lines(node.children[0], indent + "    ")
    else:
        raise ValueError(f"unknown solid kind '{node.kind}'")
    return out


def to_scad(solid: Solid, title: str = "") -> str:
    """Render *solid* as a standalone OpenSCAD file."""
    lines: list[str] = []
    if title:
        lines.append(f"// {title}")
    lines.append("// Auto-generated by boxgen")
    lines.append("")
    lines += _lines(solid, "")
    return "\n".join(lines) + "\n"
