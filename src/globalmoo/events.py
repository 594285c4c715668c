"""Webhook payload decoding."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from globalmoo.exceptions import InvalidArgumentError
from globalmoo.models import Event

logger = logging.getLogger(__name__)


def parse_webhook_event(payload: str | bytes) -> Event:
    """Decode a webhook body into an :class:`Event`.

    The body is first checked as a plain JSON object: it must carry an ``id``
    and a string ``name``. Only then is it decoded into the full record.

    Raises:
        InvalidArgumentError: If the payload is not valid JSON or not an event.
    """

    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(
            "payload", "failed to parse webhook payload as valid JSON"
        ) from e

    if not isinstance(data, dict) or "id" not in data or "name" not in data:
        raise InvalidArgumentError("payload", "the payload does not appear to be a valid event")
    if not isinstance(data["name"], str) or not data["name"]:
        raise InvalidArgumentError("payload", "the 'name' property must be a non-empty string")

    try:
        event = Event.model_validate(data)
    except ValidationError as e:
        raise InvalidArgumentError("payload", f"failed to decode webhook event: {e}") from e

    logger.debug("Decoded webhook event", extra={"event_id": event.id, "event_name": event.name})
    return event
