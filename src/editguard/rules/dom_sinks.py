# SPDX-License-Identifier: MIT
"""Rules 5-7: DOM HTML injection sinks (React, document.write, innerHTML)."""

from __future__ import annotations

from editguard.rules.base import SubstringRule

DANGEROUSLY_SET_HTML_RULE = SubstringRule(
    id="react-dangerously-set-html",
    substrings=("dangerouslySetInnerHTML",),
    reminder="""\
Security warning: dangerouslySetInnerHTML can introduce XSS when the HTML comes
from an untrusted source. Sanitize it with a library such as DOMPurify, or
render the content as text instead.

Safe:
  <div dangerouslySetInnerHTML={{ __html: DOMPurify.sanitize(html) }} />
""",
)

DOCUMENT_WRITE_RULE = SubstringRule(
    id="document-write-xss",
    substrings=("document.write",),
    reminder="""\
Security warning: document.write() can be exploited for XSS and hurts page
performance. Build the DOM with createElement() and appendChild() instead.
""",
)

INNER_HTML_RULE = SubstringRule(
    id="innerhtml-xss",
    substrings=(".innerHTML =", ".innerHTML="),
    reminder="""\
Security warning: assigning untrusted content to innerHTML can lead to XSS.
Use textContent for plain text, or sanitize the HTML with a library such as
DOMPurify before assigning it.

Unsafe:
  el.innerHTML = comment.body

Safe:
  el.textContent = comment.body
""",
)
