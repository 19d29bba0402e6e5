import json
import logging
import re
import time
from datetime import date
from json import JSONDecodeError
from typing import Dict, List, Optional, Tuple

from openai import OpenAI

from dailycook.domain.errors import ExternalSourceFailure
from dailycook.utilities.config import OPENAI_API_KEY, OPENAI_MODEL, PRICE_LOOKUP_TIMEOUT, DEFAULT_CURRENCY
from dailycook.utilities.constants import AI_PRICE_PROMPT

logger = logging.getLogger(__name__)


# === Helper: Get OpenAI Client ===
def get_openai_client() -> Optional[OpenAI]:
    """Return an OpenAI client if OPENAI_API_KEY is set, otherwise None."""
    if not OPENAI_API_KEY:
        return None
    return OpenAI(api_key=OPENAI_API_KEY, timeout=PRICE_LOOKUP_TIMEOUT, max_retries=0)


# === Price Estimation ===
def fetch_market_prices(client: OpenAI, ingredients: List[Tuple[str, Optional[str]]],
                        model: str = OPENAI_MODEL, retry_count: int = 2,
                        timeout: float = PRICE_LOOKUP_TIMEOUT) -> Dict[str, dict]:
    """Ask the model for today's retail price of each (name, unit) pair.

    All attempts together stay within 'timeout' seconds; each request gets
    what is left of it.

    Returns {lower-cased name: {"pricePerUnit", "unit", "currency", "source"}}.
    Raises ExternalSourceFailure once every attempt failed or time ran out.
    """
    if not ingredients:
        return {}

    list_text = "\n".join(
        f"{idx}. {name}{f' ({unit})' if unit else ''}" for idx, (name, unit) in enumerate(ingredients, start=1)
    )
    prompt = AI_PRICE_PROMPT.format(today=date.today().isoformat(), ingredients=list_text)

    deadline = time.monotonic() + timeout
    last_error: Optional[Exception] = None
    for attempt in range(retry_count + 1):
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        try:
            response = client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                timeout=remaining,
            )
            text = (response.choices[0].message.content or "").strip()
            return _parse_prices(text)
        except Exception as e:
            last_error = e
            logger.warning("AI price estimate attempt %d/%d failed: %s", attempt + 1, retry_count + 1, e)
    if last_error is None:
        raise ExternalSourceFailure("ai", f"no time left for a price estimate within {timeout}s")
    raise ExternalSourceFailure("ai", f"price estimate failed: {last_error}")


def _parse_prices(text: str) -> Dict[str, dict]:
    if not text:
        raise ValueError("AI returned empty price data")
    try:
        parsed = json.loads(text)
    except JSONDecodeError:
        candidate = _extract_json_by_balancing(_remove_trailing_commas(_strip_code_fences(text)))
        if not candidate:
            raise ValueError("AI output is not valid JSON and no JSON substring found")
        parsed = json.loads(_remove_trailing_commas(candidate))

    if isinstance(parsed, list):
        entries = parsed
    elif isinstance(parsed, dict) and isinstance(parsed.get("prices"), list):
        entries = parsed["prices"]
    else:
        raise ValueError("AI returned an unexpected price payload")

    prices = {}
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("name"):
            continue
        value = entry.get("pricePerUnit")
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            continue
        prices[str(entry["name"]).strip().lower()] = {
            "pricePerUnit": value,
            "unit": entry.get("unit"),
            "currency": entry.get("currency") or DEFAULT_CURRENCY,
            "source": entry.get("source"),
        }
    return prices


# === Text Cleaning Helpers ===
def _strip_code_fences(text: str) -> str:
    """Remove common markdown code fences and leading/trailing whitespace."""
    text = re.sub(r"```(?:json)?\n(.*?)```", r"\1", text, flags=re.S)
    text = re.sub(r"^```|```$", "", text)
    return text.strip()


def _remove_trailing_commas(text: str) -> str:
    """Remove common trailing commas in JSON-like text to help json.loads succeed."""
    return re.sub(r",\s*(\}|\])", r"\1", text)


def _extract_json_by_balancing(text: str) -> Optional[str]:
    """Extract the first JSON object/array by balancing braces/brackets."""
    start = None
    stack = []
    in_string = False
    escape = False

    for i, ch in enumerate(text):
        if ch == '"' and not escape:
            in_string = not in_string
        if in_string and ch == "\\" and not escape:
            escape = True
            continue
        else:
            escape = False

        if not in_string:
            if ch in "{[":
                if start is None:
                    start = i
                stack.append(ch)
            elif ch in "}]":
                if not stack:
                    continue
                opening = stack.pop()
                if (opening == "{" and ch != "}") or (opening == "[" and ch != "]"):
                    return None
                if not stack and start is not None:
                    return text[start:i + 1]
    return None
