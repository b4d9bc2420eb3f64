"""
Attraction name normalization.

Turns a display name into the stable lowercase id used as the
attraction's natural key and as the duplicate-lookup compare value.
"""

import re

# Lithuanian accented letters and the ASCII space. Matches are removed,
# not folded to their base letter, so existing ids stay stable.
STRIPPED_CHARS = re.compile("[ĄąČčĖ-ęĮįŠšŪūŲųžſ ]")


def to_id(name: str) -> str:
    """
    Normalize a display name into an attraction id.

    Only apply once, at record creation: the result is stable only for
    inputs that no longer contain stripped characters.
    """
    return STRIPPED_CHARS.sub("", name).lower()
