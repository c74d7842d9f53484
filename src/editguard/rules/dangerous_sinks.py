# SPDX-License-Identifier: MIT
"""Rules 2-4, 8-9: code execution and deserialization sinks (JS and Python)."""

from __future__ import annotations

from editguard.rules.base import SubstringRule

CHILD_PROCESS_RULE = SubstringRule(
    id="child-process-exec",
    substrings=("child_process.exec", "exec(", "execSync("),
    reminder="""\
Security warning: child_process.exec() runs its argument through a shell and is
open to command injection when any part of the command comes from user input.

Prefer execFile() with an argument array, which does not spawn a shell:

Unsafe:
  exec(`convert ${userFile} out.png`)

Safe:
  execFile('convert', [userFile, 'out.png'])

Only use exec() when you genuinely need shell features and every input is trusted.
""",
)

NEW_FUNCTION_RULE = SubstringRule(
    id="new-function-injection",
    substrings=("new Function",),
    reminder="""\
Security warning: `new Function()` with dynamic strings compiles arbitrary code
and is equivalent to eval(). Consider a lookup table, a parser, or a
non-evaluating alternative. Only use it if the source text is fully trusted.
""",
)

EVAL_RULE = SubstringRule(
    id="eval-injection",
    substrings=("eval(",),
    reminder="""\
Security warning: eval() executes arbitrary code and is a major security risk.
Use JSON.parse() for data or json.loads() in Python, or an explicit parser for
expressions. Only use eval() if you truly need to evaluate trusted code.

Unsafe:
  const config = eval(responseText)

Safe:
  const config = JSON.parse(responseText)
""",
)

PICKLE_RULE = SubstringRule(
    id="pickle-deserialization",
    substrings=("pickle",),
    reminder="""\
Security warning: unpickling untrusted data can lead to arbitrary code
execution. Use json or another data-only format for anything that crosses a
trust boundary. Only unpickle data you produced yourself.
""",
)

OS_SYSTEM_RULE = SubstringRule(
    id="os-system-injection",
    substrings=("os.system", "from os import system"),
    reminder="""\
Security warning: os.system() passes its argument to the shell and is open to
command injection. Use subprocess.run() with an argument list instead.

Unsafe:
  os.system(f"tar xf {archive}")

Safe:
  subprocess.run(["tar", "xf", archive], check=True)
""",
)
