#!/usr/bin/env python3
"""
Dispatcher for WildFire API operations
Validates the parameter for the selected operation, expands folders and line
files into individual items and calls the API once per item, in order.
"""

import csv
import logging
import os
import re
from typing import Iterable, Iterator, Optional

from .exceptions import WildFireError, WildFireRequestError, ResponseFormatError
from .report import ReportAggregator
from .schemas import (
    ApiOption, ApiResult, PARAMETER_ERROR, REQUEST_ERROR, RESPONSE_ERROR
)
from .wildfire_client import WildFireClient

logger = logging.getLogger(__name__)

HASH_PATTERN = re.compile(r"^(?:[A-F0-9]{32}|[A-F0-9]{64})$", re.IGNORECASE)
LINK_PATTERN = re.compile(
    r"^(?:http(s)?://)?[\w.-]+(?:\.[\w.-]+)+[\w\-._~:/?#\[\]@!$&'()*+,;=.]+$",
    re.IGNORECASE
)

FILE_NOT_FOUND = "File not found."
FOLDER_NOT_FOUND = "Folder not found."
INVALID_LINK = "Invalid link format."
INVALID_HASH = "Invalid hash format."
NO_HASH_COLUMN = "No sha256 column in log file."

LOG_HASH_COLUMN = "sha256"


def check_hash_format(file_hash: str) -> bool:
    """True for an MD5 (32) or SHA-256 (64) hex digest"""
    return bool(HASH_PATTERN.match(file_hash))


def check_link_format(link: str) -> bool:
    """True for an http(s) link or a bare host[/path]"""
    return bool(LINK_PATTERN.match(link))


def read_lines(path: str) -> Iterator[str]:
    """Non-blank, non-comment lines of a text file, stripped; undecodable bytes become U+FFFD"""
    with open(path, encoding="utf-8", errors="replace") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                yield line


def list_folder(path: str) -> Iterator[str]:
    """Regular files directly inside a folder, sorted by name"""
    for name in sorted(os.listdir(path)):
        full_path = os.path.join(path, name)
        if os.path.isfile(full_path):
            yield os.path.abspath(full_path)


class Dispatcher:
    """Runs one CLI-selected operation and collects its results"""

    def __init__(self, client: WildFireClient):
        self.client = client

    def run(self, option: ApiOption, value: str,
            report: Optional[ReportAggregator] = None) -> ReportAggregator:
        """
        Execute an API operation

        Args:
            option: Selected API operation
            value: File, folder, link, hash or line file given on the command line
            report: Aggregator to add results to (a new one if None)

        Returns:
            The aggregator holding one result per item
        """
        report = report if report is not None else ReportAggregator()
        logger.info(f"Running {option.value} for {value}")

        if option == ApiOption.SUBMIT_FILE:
            if os.path.isfile(value):
                self._call(report, option, os.path.abspath(value))
            else:
                self._reject(report, value, FILE_NOT_FOUND)

        elif option == ApiOption.SUBMIT_FOLDER:
            if os.path.isdir(value):
                for file_path in list_folder(value):
                    self._call(report, option, file_path)
            else:
                self._reject(report, value, FOLDER_NOT_FOUND)

        elif option in (ApiOption.SUBMIT_LINK, ApiOption.VERDICT_LINK):
            self._call_links(report, option, [value])

        elif option in (ApiOption.SUBMIT_LINKFILE, ApiOption.VERDICT_LINKFILE):
            if os.path.isfile(value):
                self._call_links(report, option, read_lines(value))
            else:
                self._reject(report, value, FILE_NOT_FOUND)

        elif option == ApiOption.VERDICT_HASH:
            self._call_hashes(report, option, [value])

        elif option == ApiOption.VERDICT_HASHFILE:
            if os.path.isfile(value):
                self._call_hashes(report, option, read_lines(value))
            else:
                self._reject(report, value, FILE_NOT_FOUND)

        elif option == ApiOption.VERDICT_LOGFILE:
            if os.path.isfile(value):
                self._call_logfile(report, option, value)
            else:
                self._reject(report, value, FILE_NOT_FOUND)

        else:
            raise WildFireError(f"Unsupported API option: {option}")

        logger.info(f"{option.value} finished with {len(report)} result(s)")
        return report

    def _call_links(self, report: ReportAggregator, option: ApiOption, links: Iterable[str]):
        for link in links:
            if check_link_format(link):
                self._call(report, option, link)
            else:
                self._reject(report, link, INVALID_LINK)

    def _call_hashes(self, report: ReportAggregator, option: ApiOption, hashes: Iterable[str]):
        for file_hash in hashes:
            if check_hash_format(file_hash):
                self._call(report, option, file_hash)
            else:
                self._reject(report, file_hash, INVALID_HASH)

    def _call_logfile(self, report: ReportAggregator, option: ApiOption, path: str):
        """Verdicts for every sha256 recorded by an earlier submit run"""
        with open(path, newline="", encoding="utf-8", errors="replace") as f:
            reader = csv.DictReader(f)
            if LOG_HASH_COLUMN not in (reader.fieldnames or []):
                self._reject(report, path, NO_HASH_COLUMN)
                return
            hashes = [row[LOG_HASH_COLUMN].strip() for row in reader if row.get(LOG_HASH_COLUMN)]
        self._call_hashes(report, option, hashes)

    def _call(self, report: ReportAggregator, option: ApiOption, value: str):
        try:
            report.add(self.client.call(option, value))
        except WildFireRequestError as e:
            logger.error(f"Request for {value} failed: {e}")
            report.add(ApiResult.error(value, REQUEST_ERROR, str(e)))
        except ResponseFormatError as e:
            logger.error(f"Response for {value} could not be read: {e}")
            report.add(ApiResult.error(value, RESPONSE_ERROR, str(e)))
        except OSError as e:
            logger.error(f"Could not read {value}: {e}")
            report.add(ApiResult.error(value, PARAMETER_ERROR, str(e)))

    def _reject(self, report: ReportAggregator, value: str, message: str):
        logger.warning(f"Skipping {value!r}: {message}")
        report.add(ApiResult.error(value, PARAMETER_ERROR, message))
