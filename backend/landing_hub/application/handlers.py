"""
Consumers of domain events.

``register_handlers`` connects them to the blinker signals; dispatch is
synchronous, so the handler's result (or exception) reaches the publisher.
"""
from flask import current_app

from landing_hub.application.analytics.record_event import record_conversion
from landing_hub.application.profiles.sync_images import sync_profile_images
from landing_hub.domain import events


def on_profile_image_changed(event: events.ProfileImageChanged) -> int:
    return sync_profile_images(user_id=event.user_id, headshot_ref=event.headshot_ref)


def on_lead_captured(event: events.LeadCaptured):
    current_app.logger.info("Lead %s captured on page %s", event.lead_id, event.page_id)
    return record_conversion(event.page_id, lead_id=event.lead_id)


def register_handlers() -> None:
    # weak=False: module-level functions, connected once per process
    events.profile_image_changed.connect(on_profile_image_changed, weak=False)
    events.lead_captured.connect(on_lead_captured, weak=False)
