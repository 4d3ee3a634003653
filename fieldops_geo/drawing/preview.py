"""Live preview primitives for a drawing session.

Uses the same primitive types as the render projection so the map draws a
draft exactly like a stored feature, plus the drawing aids: one marker per
polygon vertex (the latest one highlighted for a short window after it is
tapped) and a marker on a circle's centre.
"""

from __future__ import annotations

from fieldops_geo.core.constants import (
    CENTER_MARKER_SIZE,
    DRAWING_CENTER_COLOR,
    FILL_COLOR,
    LATEST_VERTEX_COLOR,
    LATEST_VERTEX_SIZE,
    SAVED_CENTER_COLOR,
    STROKE_COLOR,
    STROKE_WIDTH,
    VERTEX_COLOR,
    VERTEX_SIZE,
)
from fieldops_geo.drawing.states import Drawing, Editing, SessionState, ShapeKind
from fieldops_geo.engine.render import (
    CirclePrimitive,
    MarkerPrimitive,
    PolygonPrimitive,
    RenderPrimitive,
    project_feature,
)
from fieldops_geo.models.coordinates import LatLng
from fieldops_geo.models.geometry import Circle

DRAFT_KEY = "draft"


def build_preview(
    state: SessionState,
    *,
    now: float,
    highlight_s: float,
    style: dict[str, object],
) -> list[RenderPrimitive]:
    """Primitives to draw for ``state`` at clock reading ``now``."""
    if isinstance(state, Drawing):
        if state.shape_kind is ShapeKind.POLYGON:
            return _polygon_preview(state, now=now, highlight_s=highlight_s, style=style)
        return _circle_preview(state, style=style)
    if isinstance(state, Editing):
        return _editing_preview(state)
    return []


def _polygon_preview(
    state: Drawing,
    *,
    now: float,
    highlight_s: float,
    style: dict[str, object],
) -> list[RenderPrimitive]:
    if not state.points:
        return []
    primitives: list[RenderPrimitive] = [
        PolygonPrimitive(
            key=f"{PolygonPrimitive.kind}-{DRAFT_KEY}",
            feature_id=None,
            outline=state.points,
            stroke_color=str(style[STROKE_COLOR]),
            stroke_width=float(style[STROKE_WIDTH]),  # type: ignore[arg-type]
            fill_color=str(style[FILL_COLOR]),
        )
    ]
    highlighted = (
        state.last_added_at is not None and now - state.last_added_at < highlight_s
    )
    latest = len(state.points) - 1
    for index, point in enumerate(state.points):
        is_latest = highlighted and index == latest
        primitives.append(
            MarkerPrimitive(
                key=f"vertex-{index}",
                feature_id=None,
                position=point,
                color=LATEST_VERTEX_COLOR if is_latest else VERTEX_COLOR,
                size=LATEST_VERTEX_SIZE if is_latest else VERTEX_SIZE,
                title=f"Point {index + 1}",
            )
        )
    return primitives


def _circle_preview(state: Drawing, *, style: dict[str, object]) -> list[RenderPrimitive]:
    if state.center is None or state.radius_m is None:
        return []
    return [
        CirclePrimitive(
            key=f"{CirclePrimitive.kind}-{DRAFT_KEY}",
            feature_id=None,
            center=state.center,
            radius_m=state.radius_m,
            stroke_color=str(style[STROKE_COLOR]),
            stroke_width=float(style[STROKE_WIDTH]),  # type: ignore[arg-type]
            fill_color=str(style[FILL_COLOR]),
        ),
        _center_marker(state.center, DRAWING_CENTER_COLOR),
    ]


def _editing_preview(state: Editing) -> list[RenderPrimitive]:
    primitives: list[RenderPrimitive] = []
    projected = project_feature(state.draft)
    if projected is not None:
        primitives.append(projected)
    geometry = state.draft.geometry
    if isinstance(geometry, Circle):
        primitives.append(_center_marker(geometry.center.swap(), SAVED_CENTER_COLOR))
    return primitives


def _center_marker(center: LatLng, color: str) -> MarkerPrimitive:
    return MarkerPrimitive(
        key=f"center-{DRAFT_KEY}",
        feature_id=None,
        position=center,
        color=color,
        size=CENTER_MARKER_SIZE,
        title="Circle Center",
    )
