"""
Sanitises tweet JSON down to a whitelist of fields
"""
import copy
import json
import sys
import traceback
from typing import Any, Dict, Union

from path_tree import Node, PathTree


def project_json(raw_json: Union[str, bytes], tree: PathTree) -> str:
    """
    Strip a raw tweet down to the fields in the tree

    Never raises for bad input: anything that can't be parsed as a JSON
    object comes back as an error envelope, so callers always get valid,
    displayable JSON.

    Args:
        raw_json: The tweet's raw JSON text (bytes are decoded as UTF-8)
        tree: Fields to keep, from build_path_tree()

    Returns:
        The sanitised JSON text, or {"error": ..., "stacktrace": ...}
    """
    try:
        document = json.loads(raw_json)
        if not isinstance(document, dict):
            raise ValueError(
                f"Expected a JSON object but got {type(document).__name__}"
            )
        return to_json(project_document(document, tree))
    except (ValueError, TypeError, RecursionError) as e:
        print(f"✗ Could not sanitise JSON: {e}", file=sys.stderr)
        return error_envelope(e)


def project_document(document: Dict[str, Any], tree: PathTree) -> Dict[str, Any]:
    """
    Build a pruned copy of a parsed JSON object

    The input is never modified. Arrays reached through a nested path have
    each of their object elements filtered with the same sub-tree; scalars
    and nested arrays inside them pass through untouched.

    Args:
        document: Parsed JSON object
        tree: Fields to keep

    Returns:
        A new object holding only the whitelisted fields
    """
    result = _filter(document, tree)

    # Extended-mode tweets carry "full_text" instead of "text"; copy it
    # across for consumers still expecting "text". Top level only.
    if "text" not in result and "full_text" in result:
        result["text"] = copy.deepcopy(result["full_text"])

    return result


def _filter(document: Dict[str, Any], tree: PathTree) -> Dict[str, Any]:
    result = {}
    for field, value in document.items():
        entry = tree.get(field)
        if entry is None:
            continue
        if isinstance(entry, Node):
            result[field] = _project_value(value, entry.children)
        else:
            result[field] = copy.deepcopy(value)
    return result


def _project_value(value: Any, tree: PathTree) -> Any:
    if isinstance(value, dict):
        return _filter(value, tree)
    if isinstance(value, list):
        return [
            _filter(item, tree) if isinstance(item, dict) else copy.deepcopy(item)
            for item in value
        ]
    return value


def error_envelope(error: BaseException) -> str:
    """Describe a failure as a JSON object with its message and stack trace"""
    stacktrace = "".join(
        traceback.format_exception(type(error), error, error.__traceback__)
    )
    return to_json({"error": str(error), "stacktrace": stacktrace})


def to_json(document: Any) -> str:
    """
    Serialise compactly, one document per line

    Raises:
        ValueError: For NaN or Infinity, which aren't valid JSON
    """
    return json.dumps(document, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
