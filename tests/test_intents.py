import unittest
from datetime import datetime, timezone

import pytest

from lambdas.action_gym import catalog
from lambdas.action_gym.catalog import Suggestion
from lambdas.action_gym.data_access import UnknownDayError, parse_schedule
from lambdas.action_gym.intents import ROUTES, Intent, UnknownIntentError, route
from lambdas.action_gym.session import ConversationSession
from lambdas.action_gym.utils import ReplyType

from conftest import SCHEDULE, make_request


class TestIntentRouting(unittest.TestCase):
    def setUp(self):
        self.store = parse_schedule(SCHEDULE)
        self.session = ConversationSession()

    def turn(self, intent, **kwargs):
        return route(make_request(intent, **kwargs), self.session, self.store)

    def test_every_intent_has_a_handler(self):
        self.assertEqual(set(ROUTES), set(Intent))

    def test_unknown_intent_raises(self):
        with self.assertRaises(UnknownIntentError):
            self.turn("Default Welcome Intent")

    def test_welcome_with_and_without_screen(self):
        reply = self.turn("Welcome")
        self.assertEqual(reply.type, ReplyType.ASK)
        self.assertEqual(reply.messages, [catalog.WELCOME])
        self.assertEqual(reply.suggestions, [Suggestion.HOURS, Suggestion.CLASSES])
        self.assertEqual(self.turn("Welcome", screen=False).suggestions, [])

    def test_quit_closes(self):
        reply = self.turn("Quit")
        self.assertTrue(reply.terminal)
        self.assertEqual(reply.messages, ["Great chatting with you!"])

    def test_hours(self):
        reply = self.turn("Hours")
        self.assertFalse(reply.terminal)
        self.assertIn("5am - 10pm", reply.messages[0])
        self.assertEqual(reply.suggestions, [Suggestion.CLASSES])

    def test_class_list_defaults_to_today(self):
        reply = self.turn("Class List")
        self.assertTrue(reply.messages[0].startswith(
            "On Wednesday we offer the following classes: Spin at 6:00am, Zumba at 6:00pm. "
        ))

    def test_class_list_empty_day_parameter_defaults_to_today(self):
        reply = self.turn("Class List", parameters={"day": ""})
        self.assertIn("On Wednesday", reply.messages[0])

    def test_class_list_named_day_is_deduplicated(self):
        reply = self.turn("Class List", parameters={"day": "Tuesday"})
        self.assertIn("Yoga at 7:00am, Kickboxing at 5:30pm. ", reply.messages[0])
        self.assertEqual(reply.messages[0].count("Yoga at 7:00am"), 1)

    def test_class_list_offers_daily_reminders(self):
        reply = self.turn("Class List", parameters={"day": "Monday"})
        self.assertEqual(reply.type, ReplyType.ASK)
        self.assertTrue(reply.messages[0].endswith(catalog.CLASSES_OPT_IN))
        self.assertEqual(reply.suggestions, [Suggestion.DAILY, Suggestion.HOURS])

    def test_class_list_from_daily_update_closes(self):
        reply = self.turn("Class List", arguments={"UPDATES": "Class List"})
        self.assertTrue(reply.terminal)
        self.assertTrue(reply.messages[0].endswith("Hope to see you soon at Action Gym!"))
        self.assertEqual(reply.suggestions, [])

    def test_class_list_unknown_day_propagates(self):
        with self.assertRaises(UnknownDayError):
            self.turn("Class List", parameters={"day": "Someday"})

    def test_no_input_stages(self):
        first = self.turn("No Input", arguments={"REPROMPT_COUNT": 0})
        self.assertEqual((first.type, first.messages), (ReplyType.ASK, [catalog.NO_INPUT_FIRST]))
        second = self.turn("No Input", arguments={"REPROMPT_COUNT": 1})
        self.assertEqual((second.type, second.messages), (ReplyType.ASK, [catalog.NO_INPUT_SECOND]))
        final = self.turn("No Input", arguments={"REPROMPT_COUNT": 2, "IS_FINAL_REPROMPT": True})
        self.assertTrue(final.terminal)
        self.assertEqual(final.messages, [catalog.NO_INPUT_FINAL])

    def test_no_input_count_as_text(self):
        reply = self.turn("No Input", arguments={"REPROMPT_COUNT": "1"})
        self.assertEqual(reply.messages, [catalog.NO_INPUT_SECOND])

    def test_no_input_unmatched_is_no_op(self):
        reply = self.turn("No Input", arguments={"REPROMPT_COUNT": 2})
        self.assertEqual(reply.type, ReplyType.NO_OP)
        self.assertEqual(reply.messages, [])
        self.assertEqual(self.turn("No Input").type, ReplyType.NO_OP)

    def test_fallback_escalates_then_closes(self):
        replies = [self.turn("Fallback") for _ in range(3)]
        self.assertEqual([r.messages[0] for r in replies],
                         [catalog.FALLBACK_FIRST, catalog.FALLBACK_SECOND, catalog.FALLBACK_FINAL])
        self.assertEqual([r.terminal for r in replies], [False, False, True])
        self.assertEqual(self.session.fallback_count, 3)

    def test_other_intent_resets_fallback_count(self):
        self.turn("Fallback")
        self.turn("Fallback")
        self.turn("Welcome")
        self.assertEqual(self.session.fallback_count, 0)
        self.assertEqual(self.turn("Fallback").messages, [catalog.FALLBACK_FIRST])

    def test_setup_updates_requests_daily_registration(self):
        reply = self.turn("Setup Updates")
        self.assertEqual(reply.type, ReplyType.REGISTER_UPDATE)
        self.assertFalse(reply.terminal)
        self.assertEqual(reply.registration.target_intent, "Class List")
        self.assertEqual(reply.registration.frequency, "DAILY")

    def test_confirm_updates(self):
        ok = self.turn("Confirm Updates", arguments={"REGISTER_UPDATE": {"status": "OK"}})
        self.assertEqual(ok.messages, [catalog.UPDATES_CONFIRMED])
        self.assertEqual(ok.suggestions, [Suggestion.HOURS, Suggestion.CLASSES])
        cancelled = self.turn("Confirm Updates", arguments={"REGISTER_UPDATE": {"status": "CANCELLED"}})
        self.assertEqual(cancelled.messages, [catalog.UPDATES_DECLINED])
        missing = self.turn("Confirm Updates", screen=False)
        self.assertEqual(missing.messages, [catalog.UPDATES_DECLINED])
        self.assertEqual(missing.suggestions, [])


@pytest.mark.parametrize(
    "moment,day",
    [
        (datetime(2024, 3, 3, tzinfo=timezone.utc), "Sunday"),
        (datetime(2024, 3, 4, tzinfo=timezone.utc), "Monday"),
        (datetime(2024, 3, 6, 23, 59, tzinfo=timezone.utc), "Wednesday"),
        (datetime(2024, 3, 9, tzinfo=timezone.utc), "Saturday"),
    ],
)
def test_class_list_uses_receive_day(store, moment, day):
    reply = route(make_request("Class List", received_at=moment), ConversationSession(), store)
    assert reply.messages[0].startswith(f"On {day} we offer")


if __name__ == "__main__":
    unittest.main()
