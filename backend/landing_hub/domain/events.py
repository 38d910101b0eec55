"""
Domain events.

Events are plain dataclasses sent over blinker signals; handlers are
connected explicitly in ``landing_hub.application.handlers``.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from blinker import Namespace

_signals = Namespace()

profile_image_changed = _signals.signal("profile-image-changed")
lead_captured = _signals.signal("lead-captured")


@dataclass(frozen=True)
class ProfileImageChanged:
    user_id: int
    headshot_ref: Optional[str]


@dataclass(frozen=True)
class LeadCaptured:
    page_id: str
    lead_id: str
    lead_data: Dict[str, Any] = field(default_factory=dict)


_SIGNAL_BY_EVENT = {
    ProfileImageChanged: profile_image_changed,
    LeadCaptured: lead_captured,
}


def publish(event) -> list:
    """Dispatch synchronously; returns ``[(handler, result), ...]``."""
    signal = _SIGNAL_BY_EVENT[type(event)]
    return signal.send(event)
