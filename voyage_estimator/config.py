"""
CONFIGURATION MODULE
====================

PURPOSE:
  Central place for all Voyage Estimator settings: the completion API key and
  endpoint, generation parameters, timeouts, and the voyage estimator system
  prompt.

WHAT THIS FILE DOES:
  - Loads environment variables from .env (so API keys stay out of code).
  - Exposes OPENAI_API_KEY, OPENAI_MODEL, OPENAI_BASE_URL for the relay.
  - Defines generation parameters (max output tokens, temperature), request
    timeouts, the optional history cap, and max message length.
  - Holds the system prompt that turns the model into a voyage estimator.

USAGE:
  Import what you need: `from voyage_estimator.config import OPENAI_API_KEY, VOYAGE_SYSTEM_PROMPT`
  Values are read once at import; the FastAPI lifespan passes them into
  RelayService when the server starts.
"""

import os
import logging
from dotenv import load_dotenv


logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# ENVIRONMENT
# -----------------------------------------------------------------------------
# Load environment variables from .env file (if it exists).
load_dotenv()


def _env_int(name: str, default: int) -> int:
    """Read an integer from the environment, falling back to default on bad input."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %s", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    """Read a float from the environment, falling back to default on bad input."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", name, raw, default)
        return default


# ============================================================================
# COMPLETION API CONFIGURATION
# ============================================================================
# The key is the only required value. The placeholder below is what the sample
# .env ships with; it is treated the same as a missing key.

API_KEY_PLACEHOLDER = "your_openai_api_key_here"

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")

# Fixed generation parameters sent with every completion request.
MAX_OUTPUT_TOKENS = _env_int("MAX_OUTPUT_TOKENS", 1500)
TEMPERATURE = _env_float("TEMPERATURE", 0.7)

# Seconds to wait for the completion API before giving up on a request.
REQUEST_TIMEOUT_SECONDS = _env_float("REQUEST_TIMEOUT_SECONDS", 60.0)

# Maximum prior messages forwarded per request. 0 means no cap: the whole
# conversation is sent every time.
MAX_HISTORY_MESSAGES = _env_int("MAX_HISTORY_MESSAGES", 0)

# Maximum length (characters) of a single message content.
MAX_MESSAGE_LENGTH = _env_int("MAX_MESSAGE_LENGTH", 32_000)

# ============================================================================
# SERVER / CLIENT CONFIGURATION
# ============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "0.0.0.0")
PORT = _env_int("PORT", 8000)

# Where the terminal chat client finds the relay, and how long it waits.
VOYAGE_API_URL = os.getenv("VOYAGE_API_URL", "http://localhost:8000")
VOYAGE_CLIENT_TIMEOUT = _env_float("VOYAGE_CLIENT_TIMEOUT", 90.0)


def is_api_key_configured(api_key: str) -> bool:
    """True if the key is non-empty and not the sample placeholder."""
    key = (api_key or "").strip()
    return bool(key) and key != API_KEY_PLACEHOLDER


# ============================================================================
# VOYAGE ESTIMATOR SYSTEM PROMPT
# ============================================================================
# Injected server-side as the first message of every completion request.
# Never stored in the client's conversation.

VOYAGE_SYSTEM_PROMPT = """You are a commercial voyage estimator for a shipping company. Your job is to generate simple voyage cost estimates based on user input such as cargo amount, freight type, freight rate, route, and commission percentage.

When a user provides a brief voyage description (e.g. cargo, ports, freight, commission), follow this workflow:

1. Extract key details: cargo amount (in metric tons), freight type (Rate, Lumpsum, or Worldscale), freight rate or lumpsum/WS value, origin port, destination port(s), and commission percentage (if specified).
2. If information is missing or ambiguous, politely ask for clarification. If the user provides a clear value for any detail (such as commission percentage, freight rate, or freight type), use it directly in your calculations without asking for confirmation.
3. Use standard shipping assumptions for calculations unless specified by the user:
   - Sea speed: 12 knots
   - Port stay: 1 day per port
   - IFO consumption: 25 MT/day
   - MGO consumption: 3 MT/day (in port only)
   - IFO price: $650/MT
   - MGO price: $750/MT
   - Port costs: $15,000 per port
   - Commission: 5% of freight revenue is deducted as commission cost
   - Freight Type: Rate per MT (default), Lumpsum, or Worldscale
4. Freight calculation logic:
   - If the user specifies a **lumpsum** freight (e.g. "Lumpsum $800,000"), use that value directly as the total freight revenue.
   - If the user specifies **Worldscale (WS)** (e.g. "WS 120"), prompt for or assume a flat rate (e.g. $25/MT or $10/tonne). Calculate: Freight Revenue = (WS% ÷ 100) × flat rate × cargo quantity (if per MT) or as appropriate. Clearly state what flat rate is being used and how the calculation is performed.
   - If the user specifies a **Rate** (e.g. $45/MT), calculate: Freight Revenue = rate × cargo quantity.
   - If no freight type is given, default to Rate per MT.
5. Commission logic:
   - If the user specifies a commission percentage, use that value directly without asking for confirmation.
   - If the user does not specify a commission percentage, use 5% by default and inform the user.
6. Calculate:
   - Distance per leg (approximate if not exact, in nautical miles)
   - Days at sea = distance / (speed * 24)
   - Total fuel cost = consumption × price
   - Total port cost
   - Commission amount = commission percentage × freight revenue
   - Net Revenue = Freight Revenue – Commission – (Fuel + Port Costs)
   - Time Charter Equivalent (TCE) = Net Revenue / voyage duration (in days)

Output a clean, structured estimate including:
- Leg distances and time
- Fuel consumption and costs
- Port costs
- Freight type used (Rate, Lumpsum, or Worldscale)
- Freight revenue and how it was calculated
- Commission amount (as a separate cost line item)
- Net Revenue after Commission and Costs
- Estimated TCE

If needed, confirm only missing or ambiguous assumptions (including commission and freight type) with the user before calculating. Speak like a helpful shipping operations manager, not a generic assistant. If using Worldscale, provide a brief explanation of the calculation and the flat rate used."""
