import re
import logging

import messages
from constants import ALLOWED_COMMANDS, BLOCKED_COMMANDS, BLOCKED

logger = logging.getLogger(__name__)

ALLOWED_PATTERN = re.compile(r"^(\s*(" + "|".join(ALLOWED_COMMANDS) + r")\s+)", re.IGNORECASE)


def validate_and_extract_command(query):
    """Classify a raw SQL string by its leading keyword.

    Returns 'SELECT' or 'INSERT' for allowed statements, BLOCKED for a
    denylisted mutating command, and None for anything else. Only the
    prefix is inspected; the statement body is never parsed.
    """
    if not query:
        return None
    trimmed_query = query.strip()

    match = ALLOWED_PATTERN.match(trimmed_query)
    if match:
        return match.group(2).upper()

    uppercase_query = trimmed_query.upper()
    for command in BLOCKED_COMMANDS:
        if uppercase_query.startswith(command + " "):
            logger.warning(messages.log_security_blocked(command))
            return BLOCKED

    return None
