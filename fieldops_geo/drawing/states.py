"""Drawing session states.

A session is always in exactly one of three states, each an immutable
value. Transitions replace the state object rather than mutating it, so a
caller holding an old state (an in-flight save, for example) can tell that
the session has moved on by comparing identity.

- ``Idle``: nothing being drawn; map taps are ignored.
- ``Drawing``: collecting taps for a polygon or a circle.
- ``Editing``: a finished draft waiting for a name and a save.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from fieldops_geo.models.coordinates import LatLng
from fieldops_geo.models.feature import Feature


class ShapeKind(enum.Enum):
    """Shape a session draws. Values match the stored geofence ``type``."""

    POLYGON = "polygon"
    CIRCLE = "circle"


@dataclass(frozen=True, slots=True)
class Idle:
    pass


@dataclass(frozen=True, slots=True)
class Drawing:
    """Collecting map taps.

    Attributes:
        shape_kind: Polygon or circle.
        points: Polygon vertices in tap order (native order).
        center: Circle centre, once tapped.
        radius_m: Circle radius in metres, once the centre is set.
        last_added_at: Clock reading of the most recent polygon vertex,
            used to highlight it in the preview.
        base: The stored geofence being redrawn, if any. Its id and
            properties carry over to the completed draft.
    """

    shape_kind: ShapeKind
    points: tuple[LatLng, ...] = ()
    center: LatLng | None = None
    radius_m: float | None = None
    last_added_at: float | None = None
    base: Feature | None = field(default=None, compare=False)

    @property
    def point_count(self) -> int:
        return len(self.points)


@dataclass(frozen=True, slots=True)
class Editing:
    """A completed draft awaiting details and a save.

    Attributes:
        draft: The draft feature, in interchange order, styled.
        previous: The drawing it was completed from, restored by ``redraw``.
    """

    draft: Feature
    previous: Drawing = field(compare=False)


SessionState = Idle | Drawing | Editing
