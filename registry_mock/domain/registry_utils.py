import logging
import re
from typing import Iterable, List, Optional

import semver

logger = logging.getLogger(__name__)


def dasherize(value: str) -> str:
    """
    Lower-case a display name and join its words with dashes
    ("John Doe" -> "john-doe").
    """
    return re.sub(r"[\s_]+", "-", value.strip()).lower()


def match_text(value: str, keyword: Optional[str], match_type: Optional[str]) -> bool:
    """
    Apply the crate list text matching rules to a single value.

    "FirstLetter" compares only the first character; anything else is a
    substring match. Both ignore case.
    """
    if not keyword:
        return False

    v = value.lower()
    k = keyword.lower()

    if match_type == "FirstLetter":
        return bool(v) and v[0] == k[0]

    return k in v


def parse_version(num: str) -> Optional[semver.Version]:
    try:
        return semver.Version.parse(num)
    except ValueError as e_invalid:
        logger.warning(f"Invalid version number: '{num}' -> {e_invalid}")
        return None


def highest_version(nums: Iterable[str], stable_only: bool = False) -> Optional[str]:
    """
    Pick the highest version number from `nums` by semver precedence.

    Numbers that cannot be parsed are skipped. With `stable_only`,
    pre-releases (e.g. '2.0.0-beta.1') are ignored as well.

    Returns:
        The original string of the highest version, or None if no
        candidate remains.
    """
    latest_parsed = None
    latest_num: Optional[str] = None

    for num in nums:
        parsed = parse_version(num)
        if parsed is None:
            continue
        if stable_only and parsed.prerelease is not None:
            continue
        if latest_parsed is None or parsed > latest_parsed:
            latest_parsed = parsed
            latest_num = num

    return latest_num


def is_truthy(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() not in ("", "0", "false", "no", "off")


def unique(items: Iterable) -> List:
    """Order-preserving de-duplication."""
    seen = set()
    result = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result
