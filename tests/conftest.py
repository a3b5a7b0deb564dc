import json
from datetime import datetime, timezone

import pytest

from lambdas.action_gym.data_access import parse_schedule
from lambdas.action_gym.utils import TurnRequest

SESSION = "projects/action-gym/agent/sessions/abc123"

SCHEDULE = {
    "days": {
        "Sunday": [],
        "Monday": [{"name": "Spin", "startTime": "6:00am"}],
        "Tuesday": [
            {"name": "Yoga", "startTime": "7:00am"},
            {"name": "Kickboxing", "startTime": "5:30pm"},
            {"name": "Yoga", "startTime": "7:00am"},
        ],
        "Wednesday": [
            {"name": "Spin", "startTime": "6:00am"},
            {"name": "Zumba", "startTime": "6:00pm"},
        ],
        "Thursday": [{"name": "Bootcamp", "startTime": "12:00pm"}],
        "Friday": [{"name": "Pilates", "startTime": "12:00pm"}],
        "Saturday": [{"name": "Zumba", "startTime": "10:00am"}],
    }
}

# 2024-03-06 is a Wednesday
WEDNESDAY = datetime(2024, 3, 6, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return parse_schedule(SCHEDULE)


def make_request(intent, parameters=None, arguments=None, screen=True, received_at=WEDNESDAY):
    return TurnRequest(
        intent=intent,
        parameters=parameters or {},
        arguments=arguments or {},
        has_screen=screen,
        session_name=SESSION,
        received_at=received_at,
    )


def make_event(intent, parameters=None, arguments=None, screen=True, session_data=None):
    """Dialogflow v2 webhook request with an Actions on Google payload."""
    capabilities = [{"name": "actions.capability.AUDIO_OUTPUT"}]
    if screen:
        capabilities.append({"name": "actions.capability.SCREEN_OUTPUT"})
    contexts = []
    if session_data is not None:
        contexts.append({
            "name": f"{SESSION}/contexts/_actions_on_google",
            "lifespanCount": 99,
            "parameters": {"data": json.dumps(session_data)},
        })
    return {
        "responseId": "resp-1",
        "session": SESSION,
        "queryResult": {
            "queryText": "GOOGLE_ASSISTANT_WELCOME",
            "parameters": parameters or {},
            "intent": {"name": f"projects/action-gym/agent/intents/{intent}", "displayName": intent},
            "outputContexts": contexts,
        },
        "originalDetectIntentRequest": {
            "source": "google",
            "version": "2",
            "payload": {
                "inputs": [{"intent": "actions.intent.TEXT", "arguments": arguments or []}],
                "surface": {"capabilities": capabilities},
                "conversation": {"conversationId": "abc123", "type": "ACTIVE"},
            },
        },
    }
