"""Portal session tokens.

The landing page of the portal embeds two numeric JavaScript variables,
``request`` and ``state``, that must be posted back with every data
request. They are re-derived on every poll cycle and never cached.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

from swu2influx.exceptions import ProtocolError

_REQUEST_RE = re.compile(r"var request = (\d+);")
_STATE_RE = re.compile(r"var state = (\d+);")


class SessionTokens(BaseModel):
    """Request/state token pair scraped from the landing page.

    Parameters
    ----------
    request_id : str
        Value of the page's ``request`` variable.
    state_id : str
        Value of the page's ``state`` variable.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    request_id: str = Field(min_length=1, pattern=r"^\d+$")
    state_id: str = Field(min_length=1, pattern=r"^\d+$")

    def as_form(self) -> dict[str, str]:
        """Form body expected by the data endpoint."""
        return {"request": self.request_id, "state": self.state_id}


def parse_session_tokens(html: str) -> SessionTokens:
    """Extract the session tokens from the landing page body.

    Raises :class:`ProtocolError` when either assignment is missing.
    """
    request_match = _REQUEST_RE.search(html)
    state_match = _STATE_RE.search(html)
    if request_match is None or state_match is None:
        missing = [
            name for name, match in (("request", request_match), ("state", state_match)) if match is None
        ]
        raise ProtocolError(f"Landing page does not define {', '.join(missing)} token")
    return SessionTokens(request_id=request_match.group(1), state_id=state_match.group(1))
