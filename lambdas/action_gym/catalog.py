# Suggestion chip titles
class Suggestion:
    HOURS = "Ask about hours"
    CLASSES = "Learn about classes"
    DAILY = "Send daily reminders"


# Sunday first, matching the schedule file keys
DAYS = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

WELCOME = (
    "Welcome to Action Gym, your local gym here to support your health goals. "
    "You can ask me about our hours or what classes we offer each day."
)
GOODBYE = "Great chatting with you!"
HOURS = (
    "Our free weights and machines are available from 5am - 10pm, "
    "seven days a week. Can I help you with anything else?"
)

CLASSES_INTRO = "On {day} we offer the following classes: {classes}. "
CLASSES_UPDATE_OUTRO = "Hope to see you soon at Action Gym!"
CLASSES_OPT_IN = (
    "Would you like me to send you daily reminders of upcoming classes, "
    "or can I help you with anything else?"
)

NO_INPUT_FIRST = "Sorry, I can't hear you."
NO_INPUT_SECOND = "I'm sorry, I still can't hear you."
NO_INPUT_FINAL = "I'm sorry, I'm having trouble here. Maybe we should try this again later."

FALLBACK_FIRST = "Sorry, what was that?"
FALLBACK_SECOND = "I didn't quite get that. I can tell you our hours or what classes we offer each day."
FALLBACK_FINAL = "Sorry, I'm still having trouble. So let's stop here for now. Bye."

UPDATES_CONFIRMED = (
    "Gotcha, I'll send you an update everyday with the list of classes. "
    "Can I help you with anything else?"
)
UPDATES_DECLINED = "I won't send you daily reminders. Can I help you with anything else?"

TURN_FAILED = "Sorry, something went wrong on my end. Please try again later."
