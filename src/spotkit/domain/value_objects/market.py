"""Market (country) codes."""

import re

from spotkit.domain.exceptions import ValidationError

FROM_TOKEN = "from_token"

_COUNTRY_CODE = re.compile(r"^[A-Z]{2}$")


def normalize_market(market: str | None) -> str | None:
    """Validate a market and return it in the form the API expects.

    Accepts ISO 3166-1 alpha-2 codes in any case ("us" -> "US") and the special value
    "from_token", which tells the API to use the country of the logged-in user.

    Raises:
        ValidationError: If the value is neither
    """
    if market is None:
        return None
    value = market.strip()
    if value.lower() == FROM_TOKEN:
        return FROM_TOKEN
    value = value.upper()
    if not _COUNTRY_CODE.match(value):
        raise ValidationError(f"Invalid market: {market!r}. Use an ISO 3166-1 alpha-2 code")
    return value
