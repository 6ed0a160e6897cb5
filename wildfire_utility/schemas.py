#!/usr/bin/env python3
"""
Data schemas and lookup tables for the WildFire utility
Every API operation is described here: which endpoint it calls, which form field
carries its value and which section of the XML response holds its result.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any
from enum import Enum


class ApiOption(str, Enum):
    """API operation selected on the command line"""
    SUBMIT_FILE = "submitFile"
    SUBMIT_FOLDER = "submitFolder"
    SUBMIT_LINK = "submitLink"
    SUBMIT_LINKFILE = "submitLinkfile"
    VERDICT_HASH = "verdictHash"
    VERDICT_HASHFILE = "verdictHashfile"
    VERDICT_LINK = "verdictLink"
    VERDICT_LINKFILE = "verdictLinkfile"
    VERDICT_LOGFILE = "verdictLogfile"


SUBMIT_FILE_URL = "publicapi/submit/file"
SUBMIT_LINK_URL = "publicapi/submit/link"
GET_VERDICT_URL = "publicapi/get/verdict"

UPLOAD_FILE_TAG = "upload-file-info"
SUBMIT_LINK_TAG = "submit-link-info"
GET_VERDICT_TAG = "get-verdict-info"

RESOURCE_URLS: Dict[ApiOption, str] = {
    ApiOption.SUBMIT_FILE: SUBMIT_FILE_URL,
    ApiOption.SUBMIT_FOLDER: SUBMIT_FILE_URL,
    ApiOption.SUBMIT_LINK: SUBMIT_LINK_URL,
    ApiOption.SUBMIT_LINKFILE: SUBMIT_LINK_URL,
    ApiOption.VERDICT_HASH: GET_VERDICT_URL,
    ApiOption.VERDICT_HASHFILE: GET_VERDICT_URL,
    ApiOption.VERDICT_LINK: GET_VERDICT_URL,
    ApiOption.VERDICT_LINKFILE: GET_VERDICT_URL,
    ApiOption.VERDICT_LOGFILE: GET_VERDICT_URL,
}

RESOURCE_TAGS: Dict[ApiOption, str] = {
    ApiOption.SUBMIT_FILE: UPLOAD_FILE_TAG,
    ApiOption.SUBMIT_FOLDER: UPLOAD_FILE_TAG,
    ApiOption.SUBMIT_LINK: SUBMIT_LINK_TAG,
    ApiOption.SUBMIT_LINKFILE: SUBMIT_LINK_TAG,
    ApiOption.VERDICT_HASH: GET_VERDICT_TAG,
    ApiOption.VERDICT_HASHFILE: GET_VERDICT_TAG,
    ApiOption.VERDICT_LINK: GET_VERDICT_TAG,
    ApiOption.VERDICT_LINKFILE: GET_VERDICT_TAG,
    ApiOption.VERDICT_LOGFILE: GET_VERDICT_TAG,
}

# Form field carrying the value; file uploads use "file" as a multipart file part
FORM_FIELDS: Dict[ApiOption, str] = {
    ApiOption.SUBMIT_FILE: "file",
    ApiOption.SUBMIT_FOLDER: "file",
    ApiOption.SUBMIT_LINK: "link",
    ApiOption.SUBMIT_LINKFILE: "link",
    ApiOption.VERDICT_HASH: "hash",
    ApiOption.VERDICT_HASHFILE: "hash",
    ApiOption.VERDICT_LINK: "url",
    ApiOption.VERDICT_LINKFILE: "url",
    ApiOption.VERDICT_LOGFILE: "hash",
}

VERDICT_CODES: Dict[int, str] = {
    0: "Benign",
    1: "Malware",
    2: "Grayware",
    4: "Phishing",
    5: "C2",
    -100: "Pending; the file exists, but there is currently no verdict.",
    -101: "Error",
    -102: "Unknown; Cannot find file record in the database.",
    -103: "Invalid hash value.",
}

STATUS_MESSAGES: Dict[int, str] = {
    200: "OK; Successful call.",
    401: "Unauthorized; Invalid API key. Ensure that the API key is correct.",
    403: "Forbidden; Permission denied.",
    404: "Not Found; The file or report was not found.",
    405: "Method Not Allowed; Invalid request method. Ensure you are using POST for all calls except '/test/pe'.",
    413: "Request Entity Too Large; File size over maximum limit.",
    418: "Unsupported File Type; File type is not supported.",
    419: ("Max Request Reached; The maximum number of uploads per day has been exceeded. "
          "If you continue to make API requests, you will receive this error until the daily "
          "limit resets at 23:59:00 UTC."),
    420: "Insufficient Arguments; Ensure the request has the required request parameters.",
    421: "Invalid Argument; Ensure the request is properly constructed.",
    422: ("Unprocessable Entity; The provided file or URL cannot be processed. Possible reasons include: "
          "(1) The specified URL cannot be downloaded, or (2) The specified file has formatting errors "
          "or invalid content."),
    500: "Internal Error; Internal error.",
    513: "File Upload Failed; File upload failed.",
}

UNKNOWN_STATUS_MESSAGE = "Unrecognized status code."

PARAMETER_COLUMN = "Parameter"
PARAMETER_ERROR = "Parameter Error"
REQUEST_ERROR = "Request Error"
RESPONSE_ERROR = "Response Error"


@dataclass
class ApiResult:
    """Normalized result for one parameter (file path, link or hash)"""
    parameter: str
    fields: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def error(cls, parameter: str, kind: str, message: str) -> 'ApiResult':
        """Result that records why a parameter was skipped"""
        return cls(parameter=parameter, fields={kind: message})

    @property
    def verdict(self) -> str:
        return self.fields.get("verdict", "")

    def to_dict(self) -> Dict[str, Any]:
        """Flat row for CSV output"""
        row: Dict[str, Any] = {PARAMETER_COLUMN: self.parameter}
        row.update(self.fields)
        return row

    def lines(self) -> List[str]:
        """Console block for this result"""
        output = [f"{PARAMETER_COLUMN}: {self.parameter}"]
        for key, value in self.fields.items():
            output.append(f"\t{key}: {value}")
        return output
