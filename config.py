# All keyword lists and constants used across the application
import os

from dotenv import load_dotenv

load_dotenv()

ENGLISH_URGENCY_KEYWORDS = [
    "urgent", "asap", "immediately", "now", "emergency", "danger",
    "help", "unsafe", "harass", "threat", "violence", "kill", "hurry", "extremely"
]

CEBUANO_URGENCY_KEYWORDS = [
    "tabang", "karon", "karon dayon", "palihog dali", "paspas", "hinay-hinay",
    "peligro", "hulga", "pagdali"
]

TAGALOG_URGENCY_KEYWORDS = [
    "tulong", "ngayon", "agad", "madali", "delikado", "banta"
]

URGENCY_KEYWORDS = tuple(
    ENGLISH_URGENCY_KEYWORDS + CEBUANO_URGENCY_KEYWORDS + TAGALOG_URGENCY_KEYWORDS
)

# Downstream tiers are tuned against raw (unnormalized) lexicon sums
CRITICAL_SCORE_THRESHOLD = -2

# Free-text fields of a complaint record, in the order the narrative is picked from
COMPLAINT_TEXT_FIELDS = (
    "concernDescription", "incidentDescription", "facilityDescription",
    "concernFeedback", "otherDescription", "additionalContext",
    "additionalNotes", "impactExperience", "facilitySafety"
)
CLOSED_STATUSES = {"resolved", "closed"}
SNIPPET_LENGTH = 120
MAX_URGENT_QUEUE_LIMIT = 200

LEXICON_SOURCE = os.getenv("LEXICON_SOURCE", "datasets/vader_lexicon.txt")
LEXICON_FETCH_TIMEOUT = float(os.getenv("LEXICON_FETCH_TIMEOUT", 10))
KEYWORD_MATCH_MODE = os.getenv("KEYWORD_MATCH_MODE", "substring")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", 8000))
