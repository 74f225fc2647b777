from __future__ import annotations

import pytest
from pydantic import ValidationError

from swu2influx.exceptions import ProtocolError
from swu2influx.session import SessionTokens, parse_session_tokens

LANDING_PAGE = """<!DOCTYPE html>
<html>
<head>
<script type="text/javascript">
    var request = 123;
    var state = 456;
    var map;
</script>
</head>
<body onload="load()"><div id="map"></div></body>
</html>
"""


def test_parse_session_tokens() -> None:
    tokens = parse_session_tokens(LANDING_PAGE)

    assert tokens == SessionTokens(request_id="123", state_id="456")
    assert tokens.as_form() == {"request": "123", "state": "456"}


@pytest.mark.parametrize(
    ("page", "missing"),
    [
        ("var state = 456;", "request"),
        ("var request = 123;", "state"),
        ("<html></html>", "request, state"),
        ("var request = ;\nvar state = abc;", "request, state"),
    ],
)
def test_parse_session_tokens_missing_raises(page: str, missing: str) -> None:
    with pytest.raises(ProtocolError, match=missing):
        parse_session_tokens(page)


def test_session_tokens_must_be_digits() -> None:
    with pytest.raises(ValidationError):
        SessionTokens(request_id="", state_id="456")
    with pytest.raises(ValidationError):
        SessionTokens(request_id="12a", state_id="456")
