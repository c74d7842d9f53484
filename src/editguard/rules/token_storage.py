# SPDX-License-Identifier: MIT
"""Rule 10: local-storage-tokens — credentials written to browser localStorage."""

from __future__ import annotations

from editguard.rules.base import SubstringRule

LOCAL_STORAGE_RULE = SubstringRule(
    id="local-storage-tokens",
    substrings=("localStorage.setItem",),
    reminder="""\
Security warning: data written with localStorage.setItem() is readable by any
script running on the page, so a single XSS bug exposes every token stored
there. Do not keep session tokens, API keys or other credentials in
localStorage. Let the server set them as httpOnly, Secure, SameSite cookies.

Unsafe:
  localStorage.setItem('authToken', token)

Safe:
  Set-Cookie: session=<token>; HttpOnly; Secure; SameSite=Strict
""",
)
