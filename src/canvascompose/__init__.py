"""canvascompose — timeline-synchronized canvas composition.

Place image and video items on a 2D canvas, give each a time window,
and drive a shared playback clock that decides which items are rendered.
Rendering, uploads and widget wiring are left to collaborators; this
package owns the data model, the clock and the visibility/geometry rules.
"""

from .clock import ManualScheduler, Phase, PlaybackClock, PlaybackState
from .composition import Composition
from .editor import Editor, RenderFrame, TimelineView
from .errors import CompositionError, NotFound, ValidationError
from .geometry import GeometryEditor
from .media import MediaItem, MediaKind
from .selection import Selection
from .timeline import TimelineScale
from .visibility import is_visible, resolve_render_set

__all__ = [
    "Composition",
    "CompositionError",
    "Editor",
    "GeometryEditor",
    "ManualScheduler",
    "MediaItem",
    "MediaKind",
    "NotFound",
    "Phase",
    "PlaybackClock",
    "PlaybackState",
    "RenderFrame",
    "Selection",
    "TimelineScale",
    "TimelineView",
    "ValidationError",
    "is_visible",
    "resolve_render_set",
]
