"""
JSON serialization of search results.
"""

import json
from pathlib import Path
from typing import Union
import logging

from ..models import SearchResult

logger = logging.getLogger(__name__)


def result_to_json(result: SearchResult, indent: bool = False) -> str:
    """
    Serialize a search result.

    Args:
        result: Result to serialize
        indent: Pretty-print with two-space indentation

    Returns:
        JSON string with camelCase field names
    """
    return json.dumps(
        result.to_dict(),
        indent=2 if indent else None,
        ensure_ascii=False
    )


def export_to_json(
    result: SearchResult,
    output_path: Union[str, Path],
    indent: bool = True
) -> Path:
    """
    Export a search result to a JSON file.

    Args:
        result: Result to export
        output_path: Path for output file
        indent: Pretty-print the JSON

    Returns:
        Path to exported file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(result_to_json(result, indent=indent))

    logger.info(f"Exported JSON: {output_path}")
    return output_path
