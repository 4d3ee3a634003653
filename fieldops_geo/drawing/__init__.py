"""Interactive geofence drawing: session state machine, preview, persistence."""

from fieldops_geo.drawing.machine import DrawingSession
from fieldops_geo.drawing.states import Drawing, Editing, Idle, SessionState, ShapeKind
from fieldops_geo.drawing.store import GeofenceStore, InMemoryGeofenceStore

__all__ = [
    "Drawing",
    "DrawingSession",
    "Editing",
    "GeofenceStore",
    "Idle",
    "InMemoryGeofenceStore",
    "SessionState",
    "ShapeKind",
]
