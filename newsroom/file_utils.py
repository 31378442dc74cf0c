"""
File utility functions for the newsroom site.
Common JSON and timestamp helpers shared by the stores and the service.
"""
import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def load_json_file(filepath: str, default: Dict[str, Any]) -> Dict[str, Any]:
    """
    Load a JSON file with a default fallback.

    Args:
        filepath: Path to the JSON file
        default: Default value if file doesn't exist

    Returns:
        Loaded JSON data or default value

    Raises:
        OSError: If the file exists but cannot be read
        ValueError: If the file content is not valid JSON
    """
    if os.path.exists(filepath):
        with open(filepath, 'r', encoding='utf-8') as f:
            return json.load(f)
    return default


def save_json_file(filepath: str, data: Dict[str, Any], ensure_dir: bool = True) -> None:
    """
    Save data to a JSON file, replacing any previous content.

    Args:
        filepath: Path to save the JSON file
        data: Data to save
        ensure_dir: Whether to create parent directory if it doesn't exist
    """
    # Encode before opening so an unserializable document leaves the file intact
    content = json.dumps(data, indent=2, ensure_ascii=False)
    directory = os.path.dirname(filepath)
    if ensure_dir and directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, 'w', encoding='utf-8') as f:
        f.write(content)


def get_utc_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Get a UTC timestamp in ISO format.

    Args:
        moment: Datetime to format (defaults to now)

    Returns:
        ISO formatted timestamp string with a Z suffix instead of +00:00
    """
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_utc_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO timestamp written by get_utc_timestamp (or any ISO-8601 string).

    Naive values are taken as UTC. Returns None for anything unparseable.
    """
    if not isinstance(value, str) or not value:
        return None
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
