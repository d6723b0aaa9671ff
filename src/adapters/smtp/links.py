"""Confirmation link and message body shared by the email adapters."""

from urllib.parse import urlencode, urlsplit, urlunsplit

CONFIRMATION_SUBJECT = "Account confirmation"

CONFIRMATION_BODY = """Thank you for registering, {first_name}!

You have to confirm your email address. Please click on the link below.

{link}

Thanks."""


def confirmation_link(base_url: str, token: str) -> str:
    """Append ``confirmation=<token>`` to the base URL, keeping its own query."""
    parts = urlsplit(base_url)
    query = urlencode({"confirmation": token})
    if parts.query:
        query = f"{parts.query}&{query}"
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
