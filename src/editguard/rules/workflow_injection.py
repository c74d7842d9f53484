# SPDX-License-Identifier: MIT
"""Rule 1: github-actions-workflow — any edit to a GitHub Actions workflow file."""

from __future__ import annotations

from editguard.rules.base import PathRule

_WORKFLOW_DIR = ".github/workflows/"
_WORKFLOW_EXTENSIONS = (".yml", ".yaml")


def is_workflow_file(path: str) -> bool:
    """Check if a path points at a GitHub Actions workflow definition."""
    normalized = path.replace("\\", "/")
    return _WORKFLOW_DIR in normalized and normalized.endswith(_WORKFLOW_EXTENSIONS)


_REMINDER = """\
You are editing a GitHub Actions workflow file. Be aware of these security risks:

1. **Command injection**: never interpolate untrusted input directly into `run:` commands.
   Attacker-controlled values include:
   - github.event.issue.title / github.event.issue.body
   - github.event.pull_request.title / github.event.pull_request.body
   - github.event.comment.body
   - github.event.review.body / github.event.review_comment.body
   - github.event.commits.*.message / github.event.head_commit.message
   - github.event.head_commit.author.email / github.event.head_commit.author.name
   - github.event.pull_request.head.ref / github.head_ref

2. **Use environment variables**: pass untrusted input through `env:` and quote it.

Unsafe:
  run: echo "${{ github.event.issue.title }}"

Safe:
  env:
    TITLE: ${{ github.event.issue.title }}
  run: echo "$TITLE"

Reference: https://github.blog/security/vulnerability-research/how-to-catch-github-actions-workflow-injections-before-attackers-do/
"""

WORKFLOW_RULE = PathRule(
    id="github-actions-workflow",
    path_check=is_workflow_file,
    reminder=_REMINDER,
)
