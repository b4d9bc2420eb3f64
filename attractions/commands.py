"""
Operator commands for the attraction sync service.

Commands are single lines of text:

    merge <external_db> [<image_endpoint>]   Sync the cache into external_db;
                                             POST images to image_endpoint if
                                             given, otherwise save them locally
    initialize <external_db>                 Seed duplicate-lookup titles from
                                             the attractions in external_db

Each command returns a human-readable status string.
"""

import logging
import sys
from typing import Callable, TextIO

from .errors import StorageFault
from .services.attraction_sync import AttractionSync

logger = logging.getLogger(__name__)


def handle_command(command: str, sync: AttractionSync) -> str:
    """Parse and run one command line, returning its status string."""
    parts = command.split()
    if not parts:
        return "Command not recognized"

    name = parts[0]

    if name == "merge":
        if len(parts) < 2:
            return "No destination db provided"
        endpoint = parts[2] if len(parts) > 2 else None
        try:
            return sync.merge(parts[1], endpoint).status()
        except StorageFault as e:
            logger.error(f"Merge into {parts[1]} aborted: {e.message}")
            return f"Failed to merge: {e.message}"

    if name == "initialize":
        if len(parts) < 2:
            return "No destination db provided"
        try:
            sync.initialize_titles(parts[1])
        except StorageFault as e:
            logger.error(f"Initialize from {parts[1]} failed: {e.message}")
            return f"Failed to initialize: {e.message}"
        return "Done"

    return "Command not recognized"


def listen_for_commands(
    sync: AttractionSync,
    stream: TextIO = sys.stdin,
    output: Callable[[str], None] = print,
) -> None:
    """Run commands read line by line from stream until it is exhausted."""
    for line in stream:
        line = line.strip()
        if not line:
            continue
        output(handle_command(line, sync))
