"""Commit message placeholder expansion."""

import re

_PLACEHOLDER = re.compile(r"%[%bBpP]")


def expand_message_placeholders(message: str, *, branch: str, parent: str) -> str:
    """Expand placeholders in a merge or squash commit message.

    %b  branch name (feature/login)
    %B  full ref name (refs/heads/feature/login)
    %p  parent branch name (develop)
    %P  full parent ref name (refs/heads/develop)
    %%  literal percent sign

    Expansion is a single left-to-right pass, so `%%b` yields a literal `%b`.
    """
    replacements = {
        "%%": "%",
        "%b": branch,
        "%B": f"refs/heads/{branch}",
        "%p": parent,
        "%P": f"refs/heads/{parent}",
    }
    return _PLACEHOLDER.sub(lambda match: replacements[match.group(0)], message)
