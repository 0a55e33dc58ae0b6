"""Email format validation."""

import re

# RFC 5322 derived, ASCII only, lowercase (applied after normalization).
# IP-literal domains such as user@[127.0.0.1] are rejected.
EMAIL_FORMAT = re.compile(
    r"\A[a-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\Z"
)
