"""Drawing session: the modal controller behind the geofence editor.

One ``DrawingSession`` per editor screen. It turns map taps into a draft
feature and hands the finished draft to a ``GeofenceStore``::

    session = DrawingSession("worksite-1")
    session.start_drawing(ShapeKind.POLYGON)
    for tap in taps:
        session.on_map_tap(tap)
    session.complete_drawing()
    geofence_id = await session.save("North gate", "", store=store)

Every operation is checked against the current state. Map taps outside
``Drawing`` are ignored, cancelling from ``Idle`` does nothing, and every
other operation that does not apply raises ``InvalidTransitionError``
without touching the state.

``save`` is the only suspension point. A store failure raises
``PersistenceError`` and leaves the session in the very same ``Editing``
state, so the operator can retry with the same draft. Only one save runs
at a time; a second ``save`` while one is in flight raises
``InvalidTransitionError``. If the session moves on while a save is in
flight, the finished save leaves the newer state alone.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, NoReturn

from fieldops_geo.core.config import EngineConfig
from fieldops_geo.core.constants import (
    DRAFT_FILL_COLOR,
    DRAFT_STROKE_COLOR,
    DRAFT_STROKE_WIDTH,
    FILL_COLOR,
    METERS_PER_DEGREE,
    MIN_POLYGON_DISTINCT_POINTS,
    STROKE_COLOR,
    STROKE_WIDTH,
)
from fieldops_geo.core.exceptions import (
    DraftDetailsError,
    IncompleteShape,
    InvalidGeometry,
    InvalidTransitionError,
    PersistenceError,
)
from fieldops_geo.drawing.preview import DRAFT_KEY, build_preview
from fieldops_geo.drawing.states import Drawing, Editing, Idle, SessionState, ShapeKind
from fieldops_geo.engine.measure import Region, focus_region
from fieldops_geo.engine.transform import (
    circle_feature,
    feature_to_geofence_payload,
    geofence_to_feature,
    polygon_feature,
    to_native,
)
from fieldops_geo.models.coordinates import LatLng
from fieldops_geo.models.feature import Feature
from fieldops_geo.models.geometry import Circle, Polygon

if TYPE_CHECKING:
    from fieldops_geo.drawing.store import GeofenceStore
    from fieldops_geo.engine.render import RenderPrimitive

logger = logging.getLogger("fieldops_geo.drawing.machine")

DRAFT_STYLE: dict[str, object] = {
    STROKE_COLOR: DRAFT_STROKE_COLOR,
    STROKE_WIDTH: DRAFT_STROKE_WIDTH,
    FILL_COLOR: DRAFT_FILL_COLOR,
}


def circle_radius_m(center: LatLng, edge: LatLng) -> float:
    """Planar distance in metres between two taps.

    Treats a degree of latitude and of longitude as the same length, which
    overstates east-west distance away from the equator.
    """
    return math.hypot(edge.latitude - center.latitude, edge.longitude - center.longitude) * (
        METERS_PER_DEGREE
    )


class DrawingSession:
    """Modal drawing controller for one worksite.

    Args:
        worksite_id: Worksite new geofences are attached to.
        config: Engine configuration; defaults to ``EngineConfig()``.
        clock: Monotonic clock in seconds, used for the vertex highlight
            and feedback expiry.
        style: Overrides for the draft's stroke and fill.
        initial_geofence: A stored geofence record to open for editing.
            The session starts in ``Editing`` with that shape.
    """

    def __init__(
        self,
        worksite_id: str,
        *,
        config: EngineConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        style: Mapping[str, object] | None = None,
        initial_geofence: Mapping[str, Any] | None = None,
    ) -> None:
        self.worksite_id = worksite_id
        self._config = config or EngineConfig()
        self._clock = clock
        self._style: dict[str, object] = {**DRAFT_STYLE, **(style or {})}
        self._state: SessionState = Idle()
        self._feedback: tuple[str, float] | None = None
        self._saving: Editing | None = None
        if initial_geofence is not None:
            self._open(initial_geofence)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def draft(self) -> Feature | None:
        """The draft feature while editing, else ``None``."""
        if isinstance(self._state, Editing):
            return self._state.draft
        return None

    @property
    def feedback(self) -> str | None:
        """Latest operator message, or ``None`` once it has expired."""
        if self._feedback is None:
            return None
        message, shown_at = self._feedback
        if self._clock() - shown_at >= self._config.feedback_display_s:
            return None
        return message

    def focus_region(self) -> Region | None:
        """Map region framing the draft while editing, else ``None``."""
        draft = self.draft
        if draft is None:
            return None
        return focus_region(draft, min_delta=self._config.focus_min_delta_deg)

    def preview(self, now: float | None = None) -> list[RenderPrimitive]:
        """Primitives for the live preview at clock reading ``now``."""
        return build_preview(
            self._state,
            now=self._clock() if now is None else now,
            highlight_s=self._config.vertex_highlight_s,
            style=self._style,
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start_drawing(self, shape_kind: ShapeKind | str) -> None:
        """Begin drawing ``shape_kind`` with no points.

        Allowed from ``Idle``, and from ``Drawing`` to restart with another
        shape.
        """
        kind = ShapeKind(shape_kind)
        if isinstance(self._state, Editing):
            self._reject("start_drawing")
        self._transition(Drawing(kind), "start_drawing")

    def on_map_tap(self, coordinate: LatLng) -> None:
        """Add a polygon vertex, or set a circle's centre then its radius."""
        state = self._state
        if not isinstance(state, Drawing):
            logger.debug("Ignoring map tap | state=%s", type(state).__name__)
            return

        if state.shape_kind is ShapeKind.POLYGON:
            points = (*state.points, coordinate)
            self._state = Drawing(
                state.shape_kind,
                points=points,
                last_added_at=self._clock(),
                base=state.base,
            )
            self._say(
                f"Point {len(points)} added at "
                f"{coordinate.latitude:.5f}, {coordinate.longitude:.5f}"
            )
            return

        if state.center is None:
            self._state = Drawing(
                state.shape_kind,
                center=coordinate,
                radius_m=self._config.default_circle_radius_m,
                base=state.base,
            )
            self._say(f"Center set at {coordinate.latitude:.5f}, {coordinate.longitude:.5f}")
            return

        radius = circle_radius_m(state.center, coordinate)
        self._state = Drawing(
            state.shape_kind, center=state.center, radius_m=radius, base=state.base
        )
        self._say(f"Radius set to {round(radius)} meters")

    def complete_drawing(self) -> Feature:
        """Finish the shape and move to ``Editing``.

        Returns:
            The draft feature.

        Raises:
            IncompleteShape: Fewer than 3 polygon points, or no circle centre.
            InvalidGeometry: The shape cannot be built (e.g. a zero radius).
            InvalidTransitionError: Not currently drawing.
        """
        state = self._state
        if not isinstance(state, Drawing):
            self._reject("complete_drawing")

        if state.base is not None:
            draft_id = state.base.id
            properties: dict[str, object] = dict(state.base.properties)
        else:
            draft_id = DRAFT_KEY
            properties = {
                "name": self._config.default_geofence_name,
                "description": "",
                **self._style,
            }
        if state.shape_kind is ShapeKind.POLYGON:
            if state.point_count < MIN_POLYGON_DISTINCT_POINTS:
                msg = (
                    f"Polygon needs at least {MIN_POLYGON_DISTINCT_POINTS} points, "
                    f"has {state.point_count}"
                )
                raise IncompleteShape(msg)
            draft = polygon_feature(draft_id, state.points, properties)
        else:
            if state.center is None or state.radius_m is None:
                msg = "Circle needs a centre before it can be completed"
                raise IncompleteShape(msg)
            draft = circle_feature(draft_id, state.center, state.radius_m, properties)

        self._transition(Editing(draft, previous=state), "complete_drawing")
        self._say("Now editing geofence details - add a name and description")
        return draft

    def cancel_drawing(self) -> None:
        """Discard everything in progress and return to ``Idle``."""
        if isinstance(self._state, Idle):
            return
        self._transition(Idle(), "cancel_drawing")
        self._feedback = None

    def reset_points(self) -> None:
        """Clear the points or circle draft, keeping the shape kind."""
        state = self._state
        if not isinstance(state, Drawing):
            self._reject("reset_points")
        self._transition(Drawing(state.shape_kind, base=state.base), "reset_points")

    def redraw(self) -> None:
        """Go back from ``Editing`` to the drawing the draft came from."""
        state = self._state
        if not isinstance(state, Editing):
            self._reject("redraw")
        self._transition(state.previous, "redraw")

    async def save(self, name: str, description: str = "", *, store: GeofenceStore) -> str:
        """Attach details to the draft and persist it.

        Returns:
            The id assigned by ``store``.

        Raises:
            DraftDetailsError: ``name`` is blank.
            PersistenceError: The store failed. The session stays in the
                same ``Editing`` state so the save can be retried.
            InvalidTransitionError: Not currently editing, or another save
                is still in flight.
        """
        state = self._state
        if not isinstance(state, Editing):
            self._reject("save")
        if self._saving is not None:
            msg = "Cannot save while a previous save is in flight"
            raise InvalidTransitionError(msg)
        if not name or not name.strip():
            msg = "Geofence name is required"
            raise DraftDetailsError(msg)

        feature = state.draft.with_properties(name=name.strip(), description=description.strip())
        payload = feature_to_geofence_payload(feature, self.worksite_id)

        self._saving = state
        try:
            geofence_id = await store.create(payload)
        except Exception as exc:
            logger.warning(
                "Geofence save failed | worksite=%s | type=%s | error=%s",
                self.worksite_id,
                payload["type"],
                exc,
            )
            msg = f"Saving geofence failed: {exc}"
            raise PersistenceError(msg) from exc
        finally:
            self._saving = None

        if self._state is not state:
            logger.info(
                "Geofence saved after session moved on | id=%s | state=%s",
                geofence_id,
                type(self._state).__name__,
            )
            return geofence_id

        self._transition(Idle(), "save")
        self._say(f"Geofence '{name.strip()}' saved")
        return geofence_id

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _open(self, record: Mapping[str, Any]) -> None:
        draft = geofence_to_feature(record)
        geometry = draft.geometry
        if isinstance(geometry, Polygon):
            previous = Drawing(
                ShapeKind.POLYGON,
                points=tuple(to_native(geometry.outer_ring[:-1])),
                base=draft,
            )
        elif isinstance(geometry, Circle):
            previous = Drawing(
                ShapeKind.CIRCLE,
                center=geometry.center.swap(),
                radius_m=geometry.radius,
                base=draft,
            )
        else:
            msg = f"Geofence {draft.id!r} cannot be edited as a {geometry.type}"
            raise InvalidGeometry(msg)
        self._transition(Editing(draft, previous=previous), "open")

    def _transition(self, new_state: SessionState, event: str) -> None:
        logger.info(
            "Drawing session transition | worksite=%s | event=%s | %s -> %s",
            self.worksite_id,
            event,
            type(self._state).__name__,
            type(new_state).__name__,
        )
        self._state = new_state

    def _reject(self, operation: str) -> NoReturn:
        msg = f"Cannot {operation} while {type(self._state).__name__}"
        raise InvalidTransitionError(msg)

    def _say(self, message: str) -> None:
        self._feedback = (message, self._clock())
