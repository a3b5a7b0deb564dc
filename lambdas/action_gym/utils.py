import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional
from zoneinfo import ZoneInfo

from . import config as cfg

logger = logging.getLogger(__name__)

SESSION_CONTEXT = "_actions_on_google"
SCREEN_OUTPUT = "actions.capability.SCREEN_OUTPUT"
REGISTER_UPDATE_INTENT = "actions.intent.REGISTER_UPDATE"
REGISTER_UPDATE_VALUE_TYPE = "type.googleapis.com/google.actions.v2.RegisterUpdateValue"
# Rich responses must open with a simple response; the helper replaces it
HELPER_PLACEHOLDER = "PLACEHOLDER"


# --- Request parsing ---

def get_intent_name(event: Dict[str, Any]) -> str:
    return (event.get("queryResult", {}).get("intent", {}) or {}).get("displayName", "")


def get_parameters(event: Dict[str, Any]) -> Dict[str, Any]:
    return event.get("queryResult", {}).get("parameters", {}) or {}


def _platform_payload(event: Dict[str, Any]) -> Dict[str, Any]:
    return (event.get("originalDetectIntentRequest", {}) or {}).get("payload", {}) or {}


def parse_argument_value(arg: Dict[str, Any]) -> Any:
    if "extension" in arg:
        return arg["extension"]
    if "boolValue" in arg:
        return bool(arg["boolValue"])
    if "intValue" in arg:
        try:
            return int(arg["intValue"])
        except (TypeError, ValueError):
            return arg["intValue"]
    if "floatValue" in arg:
        return arg["floatValue"]
    if "textValue" in arg:
        return arg["textValue"]
    for key in ("datetimeValue", "placeValue", "structuredValue"):
        if key in arg:
            return arg[key]
    # Present but untyped: the argument itself is the value
    return arg


def get_arguments(event: Dict[str, Any]) -> Dict[str, Any]:
    inputs = _platform_payload(event).get("inputs") or []
    if not inputs:
        return {}
    args: Dict[str, Any] = {}
    for arg in inputs[0].get("arguments") or []:
        name = arg.get("name")
        if name:
            args[name] = parse_argument_value(arg)
    return args


def has_screen(event: Dict[str, Any]) -> bool:
    capabilities = (_platform_payload(event).get("surface", {}) or {}).get("capabilities") or []
    return any(c.get("name") == SCREEN_OUTPUT for c in capabilities)


def get_session_name(event: Dict[str, Any]) -> str:
    return event.get("session", "") or ""


def get_session_data(event: Dict[str, Any]) -> Dict[str, Any]:
    for ctx in event.get("queryResult", {}).get("outputContexts", []) or []:
        if not (ctx.get("name") or "").endswith(f"/contexts/{SESSION_CONTEXT}"):
            continue
        raw = (ctx.get("parameters") or {}).get("data")
        if not raw:
            return {}
        try:
            data = json.loads(raw) if isinstance(raw, str) else raw
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable session data: %r", raw)
            return {}
        return data if isinstance(data, dict) else {}
    return {}


def gym_timezone() -> tzinfo:
    if cfg.GYM_TIMEZONE.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(cfg.GYM_TIMEZONE)


@dataclass(frozen=True)
class TurnRequest:
    intent: str
    parameters: Mapping[str, Any] = field(default_factory=dict)
    arguments: Mapping[str, Any] = field(default_factory=dict)
    has_screen: bool = False
    session_name: str = ""
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_event(cls, event: Dict[str, Any], received_at: Optional[datetime] = None) -> "TurnRequest":
        return cls(
            intent=get_intent_name(event),
            parameters=get_parameters(event),
            arguments=get_arguments(event),
            has_screen=has_screen(event),
            session_name=get_session_name(event),
            received_at=received_at or datetime.now(gym_timezone()),
        )


# --- Replies ---

class ReplyType(Enum):
    ASK = "ask"
    CLOSE = "close"
    REGISTER_UPDATE = "register_update"
    NO_OP = "no_op"


@dataclass(frozen=True)
class UpdateRegistrationRequest:
    target_intent: str
    frequency: str = "DAILY"


@dataclass(frozen=True)
class Reply:
    type: ReplyType
    messages: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    registration: Optional[UpdateRegistrationRequest] = None

    @property
    def terminal(self) -> bool:
        return self.type is ReplyType.CLOSE

    @classmethod
    def ask(cls, message: str, suggestions: Optional[List[str]] = None) -> "Reply":
        return cls(ReplyType.ASK, [message], list(suggestions or []))

    @classmethod
    def close(cls, message: str) -> "Reply":
        return cls(ReplyType.CLOSE, [message])

    @classmethod
    def register_update(cls, request: UpdateRegistrationRequest) -> "Reply":
        return cls(ReplyType.REGISTER_UPDATE, registration=request)

    @classmethod
    def no_op(cls) -> "Reply":
        return cls(ReplyType.NO_OP)


# --- Response building ---

def build_simple_response(text: str) -> Dict[str, Any]:
    return {"simpleResponse": {"textToSpeech": text}}


def build_register_update(request: UpdateRegistrationRequest) -> Dict[str, Any]:
    return {
        "intent": REGISTER_UPDATE_INTENT,
        "data": {
            "@type": REGISTER_UPDATE_VALUE_TYPE,
            "intent": request.target_intent,
            "triggerContext": {"timeContext": {"frequency": request.frequency}},
        },
    }


def build_session_context(session_name: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": f"{session_name}/contexts/{SESSION_CONTEXT}",
        "lifespanCount": cfg.SESSION_CONTEXT_LIFESPAN,
        "parameters": {"data": json.dumps(data)},
    }


def build_response(reply: Reply, session_name: str, session_data: Dict[str, Any]) -> Dict[str, Any]:
    resp: Dict[str, Any] = {}
    if session_name:
        resp["outputContexts"] = [build_session_context(session_name, session_data)]
    if reply.type is ReplyType.NO_OP:
        return resp

    items = [build_simple_response(m) for m in reply.messages]
    google: Dict[str, Any] = {"expectUserResponse": not reply.terminal}
    if reply.registration is not None:
        google["systemIntent"] = build_register_update(reply.registration)
        if not items:
            items = [build_simple_response(HELPER_PLACEHOLDER)]
    rich: Dict[str, Any] = {"items": items}
    if reply.suggestions:
        rich["suggestions"] = [{"title": s} for s in reply.suggestions]
    google["richResponse"] = rich

    if reply.messages:
        resp["fulfillmentText"] = " ".join(reply.messages)
    resp["payload"] = {"google": google}
    return resp
