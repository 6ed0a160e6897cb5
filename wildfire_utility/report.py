#!/usr/bin/env python3
"""
Result aggregation for console and CSV output
"""

import csv
import logging
import os
from typing import Any, Dict, Iterator, List

from .schemas import ApiResult, PARAMETER_COLUMN

logger = logging.getLogger(__name__)


class ReportAggregator:
    """Accumulates one ApiResult per submitted parameter, in submission order"""

    def __init__(self):
        self.results: List[ApiResult] = []

    def add(self, result: ApiResult):
        self.results.append(result)

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[ApiResult]:
        return iter(self.results)

    def columns(self) -> List[str]:
        """Parameter column followed by every field name, in first-seen order"""
        columns = [PARAMETER_COLUMN]
        for result in self.results:
            for key in result.fields:
                if key not in columns:
                    columns.append(key)
        return columns

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [result.to_dict() for result in self.results]

    def render(self) -> str:
        """Console output: one block per parameter, each followed by a blank line"""
        return "".join("\n".join(result.lines()) + "\n\n" for result in self.results)

    def write_csv(self, path: str, append: bool = False):
        """
        Write results as CSV

        Args:
            path: Output file
            append: Add rows to an existing file instead of replacing it;
                the header is only written when the file is new or empty
        """
        columns = self.columns()
        write_header = not (append and os.path.exists(path) and os.path.getsize(path) > 0)
        if append and not write_header:
            # Keep the existing header so appended rows line up with it
            with open(path, newline="", encoding="utf-8") as f:
                existing = next(csv.reader(f), [])
            columns = existing + [c for c in columns if c not in existing]
            if columns != existing:
                logger.warning(f"{path} has no column for: {', '.join(columns[len(existing):])}")
                columns = existing

        mode = "a" if append else "w"
        with open(path, mode, newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=columns, restval="", extrasaction="ignore")
            if write_header:
                writer.writeheader()
            writer.writerows(self.to_dicts())

        logger.info(f"Wrote {len(self.results)} row(s) to {path}")
