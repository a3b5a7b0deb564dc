import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

from . import catalog
from .catalog import Suggestion
from .data_access import ScheduleStore, day_name, normalize_day
from .session import FALLBACK_INTENT, ConversationSession, normalize
from .utils import Reply, TurnRequest, UpdateRegistrationRequest

logger = logging.getLogger(__name__)


class Intent(str, Enum):
    WELCOME = "Welcome"
    QUIT = "Quit"
    HOURS = "Hours"
    CLASS_LIST = "Class List"
    NO_INPUT = "No Input"
    FALLBACK = FALLBACK_INTENT
    SETUP_UPDATES = "Setup Updates"
    CONFIRM_UPDATES = "Confirm Updates"


class UnknownIntentError(LookupError):
    def __init__(self, name: str):
        super().__init__(f"No handler for intent {name!r}")
        self.name = name


Handler = Callable[[TurnRequest, ConversationSession, ScheduleStore], Reply]


def _ask(request: TurnRequest, message: str, *suggestions: str) -> Reply:
    return Reply.ask(message, list(suggestions) if request.has_screen else None)


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def welcome(request: TurnRequest, session: ConversationSession, store: ScheduleStore) -> Reply:
    return _ask(request, catalog.WELCOME, Suggestion.HOURS, Suggestion.CLASSES)


def quit_conversation(request: TurnRequest, session: ConversationSession, store: ScheduleStore) -> Reply:
    return Reply.close(catalog.GOODBYE)


def hours(request: TurnRequest, session: ConversationSession, store: ScheduleStore) -> Reply:
    return _ask(request, catalog.HOURS, Suggestion.CLASSES)


def class_list(request: TurnRequest, session: ConversationSession, store: ScheduleStore) -> Reply:
    day = normalize_day(request.parameters.get("day")) or day_name(request.received_at)
    message = catalog.CLASSES_INTRO.format(day=day, classes=store.describe_classes(day))
    # Set when the turn was started from a daily update notification
    if request.arguments.get("UPDATES"):
        return Reply.close(message + catalog.CLASSES_UPDATE_OUTRO)
    return _ask(request, message + catalog.CLASSES_OPT_IN, Suggestion.DAILY, Suggestion.HOURS)


def no_input(request: TurnRequest, session: ConversationSession, store: ScheduleStore) -> Reply:
    reprompt_count = _as_int(request.arguments.get("REPROMPT_COUNT"))
    if reprompt_count == 0:
        return Reply.ask(catalog.NO_INPUT_FIRST)
    if reprompt_count == 1:
        return Reply.ask(catalog.NO_INPUT_SECOND)
    if request.arguments.get("IS_FINAL_REPROMPT"):
        return Reply.close(catalog.NO_INPUT_FINAL)
    # Leave the platform's default reprompt behaviour in charge
    return Reply.no_op()


def fallback(request: TurnRequest, session: ConversationSession, store: ScheduleStore) -> Reply:
    session.fallback_count = (session.fallback_count or 0) + 1
    if session.fallback_count == 1:
        return Reply.ask(catalog.FALLBACK_FIRST)
    if session.fallback_count == 2:
        return Reply.ask(catalog.FALLBACK_SECOND)
    return Reply.close(catalog.FALLBACK_FINAL)


def setup_updates(request: TurnRequest, session: ConversationSession, store: ScheduleStore) -> Reply:
    return Reply.register_update(UpdateRegistrationRequest(target_intent=Intent.CLASS_LIST.value, frequency="DAILY"))


def confirm_updates(request: TurnRequest, session: ConversationSession, store: ScheduleStore) -> Reply:
    registered = request.arguments.get("REGISTER_UPDATE")
    if isinstance(registered, dict) and registered.get("status") == "OK":
        message = catalog.UPDATES_CONFIRMED
    else:
        message = catalog.UPDATES_DECLINED
    return _ask(request, message, Suggestion.HOURS, Suggestion.CLASSES)


ROUTES: Dict[Intent, Handler] = {
    Intent.WELCOME: welcome,
    Intent.QUIT: quit_conversation,
    Intent.HOURS: hours,
    Intent.CLASS_LIST: class_list,
    Intent.NO_INPUT: no_input,
    Intent.FALLBACK: fallback,
    Intent.SETUP_UPDATES: setup_updates,
    Intent.CONFIRM_UPDATES: confirm_updates,
}

_missing = set(Intent) - set(ROUTES)
if _missing:
    raise RuntimeError(f"Intents without a handler: {sorted(i.value for i in _missing)}")


def resolve_intent(name: str) -> Intent:
    try:
        return Intent(name)
    except ValueError:
        raise UnknownIntentError(name) from None


def route(request: TurnRequest, session: ConversationSession, store: ScheduleStore) -> Reply:
    """Run the session pre-step for every turn, then dispatch to the intent's handler."""
    normalize(session, request.intent)
    intent = resolve_intent(request.intent)
    logger.debug("Dispatching %s (fallbackCount=%s)", intent.value, session.fallback_count)
    return ROUTES[intent](request, session, store)
