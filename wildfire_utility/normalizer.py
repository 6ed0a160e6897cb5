#!/usr/bin/env python3
"""
Response normalization for WildFire XML envelopes

A WildFire response looks like:

    <?xml version="1.0" encoding="UTF-8"?>
    <wildfire>
        <get-verdict-info>
            <sha256>abc123...</sha256>
            <verdict>0</verdict>
            <md5>def456...</md5>
        </get-verdict-info>
    </wildfire>

and is reduced to a flat ``{field: display string}`` mapping of the result
section, with the verdict code replaced by its label and the HTTP status
message merged in.
"""

import json
import logging
import re
from typing import Any, Dict, Optional, Tuple
from xml.parsers.expat import ExpatError

import xmltodict

from .exceptions import ResponseFormatError
from .schemas import VERDICT_CODES, STATUS_MESSAGES, UNKNOWN_STATUS_MESSAGE

logger = logging.getLogger(__name__)

XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>\s*")
ERROR_MESSAGE_TAG = "error-message"


def strip_declaration(xml_text: str) -> str:
    """Remove the leading <?xml ...?> declaration node, if any"""
    return XML_DECLARATION.sub("", xml_text, count=1)


def parse_envelope(xml_text: str) -> Dict[str, Any]:
    """
    Convert an XML envelope to a nested mapping without its root element

    Raises:
        ResponseFormatError: If the document is not well-formed
    """
    body = strip_declaration(xml_text)
    try:
        document = xmltodict.parse(body)
    except ExpatError as e:
        raise ResponseFormatError(f"Malformed XML response: {e}") from e

    # A document has exactly one root; <wildfire/> with no children parses to None
    root = next(iter(document.values()), None)
    if not isinstance(root, dict):
        return {}
    return root


def display_value(value: Any) -> str:
    """Render a parsed XML value as a single display string"""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        return ", ".join(display_value(item) for item in value)
    if isinstance(value, dict):
        if "#text" in value:
            return display_value(value["#text"])
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def verdict_label(code: str) -> str:
    """Map a numeric verdict code to its label"""
    try:
        return VERDICT_CODES[int(code)]
    except (KeyError, ValueError):
        logger.warning(f"Unknown verdict code: {code!r}")
        return f"Unknown verdict code ({code})"


def status_entry(status_code: int) -> Tuple[str, str]:
    """Key/value pair describing an HTTP status code"""
    return (f"HTTP Response '{status_code}'",
            STATUS_MESSAGES.get(status_code, UNKNOWN_STATUS_MESSAGE))


def extract_section(xml_text: str, result_tag: str) -> Dict[str, str]:
    """
    Flatten the section named result_tag into field -> display string

    Raises:
        ResponseFormatError: If the document is malformed or the section is missing
    """
    envelope = parse_envelope(xml_text)
    if result_tag not in envelope:
        raise ResponseFormatError(f"Response is missing the '{result_tag}' section")

    section = envelope[result_tag]
    if isinstance(section, list):
        # Only one result per request is expected; keep the first
        section = section[0]
    if not isinstance(section, dict):
        return {}

    fields: Dict[str, str] = {}
    for key, value in section.items():
        if key.startswith("@") or key == "#text":
            continue
        if key == "verdict":
            fields[key] = verdict_label(display_value(value))
        else:
            fields[key] = display_value(value)
    return fields


def extract_error_message(xml_text: str) -> Optional[str]:
    """Best-effort lookup of <error-message> in an error body"""
    if not xml_text or not xml_text.lstrip().startswith("<"):
        return None
    try:
        envelope = parse_envelope(xml_text)
    except ResponseFormatError:
        return None
    message = envelope.get(ERROR_MESSAGE_TAG)
    if message is None:
        return None
    return display_value(message) or None


def normalize_response(xml_text: str, result_tag: str, status_code: int) -> Dict[str, str]:
    """
    Normalize an API response into a flat record

    Args:
        xml_text: Raw response body
        result_tag: Name of the result section, e.g. "upload-file-info"
        status_code: HTTP status code of the response

    Returns:
        Ordered mapping of field name to display string, ending with the
        HTTP status entry. Non-success responses carry only the status
        entry (plus the server's error message, when it sent one).

    Raises:
        ResponseFormatError: If a successful response cannot be parsed
    """
    fields: Dict[str, str] = {}
    if 200 <= status_code < 300:
        fields.update(extract_section(xml_text, result_tag))
    else:
        message = extract_error_message(xml_text)
        if message:
            fields["Error Message"] = message

    key, value = status_entry(status_code)
    fields[key] = value
    return fields
