import base64
import json
import logging
from typing import Any, Dict, Optional

from . import catalog
from . import config as cfg
from .data_access import ScheduleStore, UnknownDayError, load_schedule
from .intents import UnknownIntentError, route
from .session import ConversationSession
from .utils import Reply, TurnRequest, build_response, get_session_data

logger = logging.getLogger()
logger.setLevel(cfg.LOG_LEVEL)

# Loaded once per container; a bad schedule fails the cold start
STORE: ScheduleStore = load_schedule()

JSON_HEADERS = {"Content-Type": "application/json"}


def _log_turn(request: TurnRequest, action: str, session: ConversationSession, extra: Optional[Dict[str, Any]] = None) -> None:
    payload = {
        "action": action,
        "intent": request.intent,
        "session": request.session_name,
        "session_data": session.to_data(),
    }
    if extra:
        payload.update(extra)
    logger.info("turn: %s", json.dumps(payload, default=str)[:8000])


def handle_turn(event: Dict[str, Any], store: Optional[ScheduleStore] = None) -> Dict[str, Any]:
    """Answer one webhook request with a webhook response body."""
    store = STORE if store is None else store
    request = TurnRequest.from_event(event)
    session = ConversationSession.from_data(get_session_data(event))
    try:
        reply = route(request, session, store)
    except (UnknownDayError, UnknownIntentError) as e:
        logger.exception("Turn failed for intent %r: %s", request.intent, e)
        reply = Reply.close(catalog.TURN_FAILED)
        _log_turn(request, "turn_failed", session, {"error": str(e)})
    else:
        _log_turn(request, reply.type.value, session, {"terminal": reply.terminal})
    return build_response(reply, request.session_name, session.to_data())


def _decode_body(event: Dict[str, Any]) -> Dict[str, Any]:
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    data = json.loads(body) if isinstance(body, str) else body
    if not isinstance(data, dict):
        raise ValueError("Webhook body must be a JSON object")
    return data


# Dialogflow webhook entrypoint (direct invoke or API Gateway proxy)

def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    if cfg.DEBUG_LOGGING:
        logger.debug("Event: %s", json.dumps(event))

    if "body" not in event:
        response = handle_turn(event)
        if cfg.DEBUG_LOGGING:
            logger.debug("Response: %s", json.dumps(response))
        return response

    try:
        webhook_request = _decode_body(event)
    except ValueError as e:
        # json.JSONDecodeError and binascii.Error are both ValueErrors
        logger.warning("Rejecting malformed webhook body: %s", e)
        return {
            "statusCode": 400,
            "headers": JSON_HEADERS,
            "body": json.dumps({"error": "invalid_request", "detail": str(e)}),
        }
    response = handle_turn(webhook_request)
    if cfg.DEBUG_LOGGING:
        logger.debug("Response: %s", json.dumps(response))
    return {"statusCode": 200, "headers": JSON_HEADERS, "body": json.dumps(response)}
