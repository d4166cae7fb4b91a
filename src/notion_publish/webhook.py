# ABOUTME: Handles inbound Notion change notifications.
# ABOUTME: Authenticates the shared secret, then runs a single-page or full sync.

import hmac
import logging
from typing import Any, Mapping

from requests.structures import CaseInsensitiveDict

from .config import PublishConfig
from .sync import Publisher

logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Webhook-Secret"


def is_authorized(config: PublishConfig, headers: Mapping[str, str]) -> bool:
    """Compare the secret header with the configured secret.

    Always False when no secret is configured.
    """
    expected = config.webhook_secret or ""
    provided = CaseInsensitiveDict(headers).get(SECRET_HEADER) or ""
    if not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def extract_page_id(payload: Any) -> str | None:
    """Find a page ID in the payload shapes Notion automations send.

    Recognised shapes:
        {"pageId": "..."}
        {"event": {"target": {"id": "..."}}}
        {"events": [{"data": {"id": "..."}}, ...]}   (first event only)
    """
    if not isinstance(payload, dict):
        return None

    page_id = payload.get("pageId")
    if isinstance(page_id, str) and page_id:
        return page_id

    event = payload.get("event")
    if isinstance(event, dict):
        target = event.get("target")
        if isinstance(target, dict) and isinstance(target.get("id"), str) and target["id"]:
            return target["id"]

    events = payload.get("events")
    if isinstance(events, list) and events:
        first = events[0]
        data = first.get("data") if isinstance(first, dict) else None
        if isinstance(data, dict) and isinstance(data.get("id"), str) and data["id"]:
            return data["id"]

    return None


def handle_notification(
    config: PublishConfig,
    headers: Mapping[str, str],
    payload: Any,
    publisher: Publisher | None = None,
) -> tuple[int, dict[str, Any]]:
    """Process one webhook delivery.

    Returns:
        HTTP status code and JSON-serializable response body.
    """
    if not is_authorized(config, headers):
        logger.warning("Rejected webhook delivery with missing or invalid secret")
        return 401, {"success": False, "message": "Unauthorized"}

    try:
        publisher = publisher or Publisher(config)
        page_id = extract_page_id(payload)

        if page_id:
            logger.info(f"Webhook requested sync of page {page_id}")
            result = publisher.publish_page(page_id)
        else:
            logger.info("Webhook carried no page ID, running full database sync")
            result = publisher.publish_all()

    except Exception as e:
        logger.exception("Webhook handling failed")
        return 500, {
            "success": False,
            "message": "Webhook handling failed",
            "errors": [str(e) or type(e).__name__],
        }

    return (200 if result.success else 500), result.to_dict()
