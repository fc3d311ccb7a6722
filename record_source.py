import json
import math
import os
from http.client import HTTPException
from urllib.request import urlopen, Request
from urllib.error import URLError, HTTPError

import pandas as pd


DEFAULT_SOURCE_URL = (
    "https://geektrust.s3-ap-southeast-1.amazonaws.com/adminui-problem/members.json"
)
RECORD_FIELDS = ("id", "name", "email", "role")


class LoadFailure(Exception):
    """Fetching or decoding the record set failed."""


class RecordSource:
    """Read-once provider of flat member records."""

    def fetch(self) -> list[dict]:
        raise NotImplementedError

    def describe(self) -> str:
        return self.__class__.__name__

    @staticmethod
    def for_location(location: str, timeout: float = 10.0) -> "RecordSource":
        lowered = (location or "").lower()
        if lowered.startswith(("http://", "https://")):
            return UrlRecordSource(location, timeout=timeout)
        return FileRecordSource(location)


def _is_missing(item: dict, field: str) -> bool:
    # short CSV rows come back from pandas padded with NaN
    value = item.get(field)
    return field not in item or (isinstance(value, float) and math.isnan(value))


def normalize_records(payload) -> list[dict]:
    if not isinstance(payload, list):
        raise LoadFailure("Expected a JSON array of records")
    records = []
    for idx, item in enumerate(payload):
        if not isinstance(item, dict):
            raise LoadFailure(f"Record {idx} is not an object")
        missing = [f for f in RECORD_FIELDS if _is_missing(item, f)]
        if missing:
            raise LoadFailure(f"Record {idx} missing {', '.join(missing)}")
        records.append({f: "" if item[f] is None else str(item[f]) for f in RECORD_FIELDS})
    return records


class UrlRecordSource(RecordSource):
    def __init__(self, url: str, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    def describe(self) -> str:
        return self.url

    def fetch(self) -> list[dict]:
        try:
            request = Request(self.url, headers={"User-Agent": "rostertable"})
            with urlopen(request, timeout=self.timeout) as resp:
                body = resp.read()
        except (
            URLError, HTTPError, HTTPException, TimeoutError, OSError, ValueError
        ) as exc:
            raise LoadFailure(f"Fetch failed: {exc}") from exc
        try:
            data = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise LoadFailure(f"Response is not valid UTF-8: {exc}") from exc
        try:
            payload = json.loads(data)
        except json.JSONDecodeError as exc:
            raise LoadFailure(f"Invalid JSON: {exc}") from exc
        return normalize_records(payload)


class FileRecordSource(RecordSource):
    def __init__(self, path: str):
        self.path = path
        _, ext = os.path.splitext(path)
        self.ext = ext.lower()

    def describe(self) -> str:
        return self.path

    def fetch(self) -> list[dict]:
        if self.ext not in {".json", ".csv"}:
            raise LoadFailure("Unsupported file type (use .json or .csv)")
        if not os.path.exists(self.path):
            raise LoadFailure(f"No such file: {self.path}")

        if self.ext == ".json":
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    payload = json.load(f)
            except (OSError, ValueError) as exc:
                raise LoadFailure(f"Could not read {self.path}: {exc}") from exc
            return normalize_records(payload)

        try:
            df = pd.read_csv(self.path, dtype=str, keep_default_na=False)
        except (ValueError, OSError) as exc:
            raise LoadFailure(f"Could not read {self.path}: {exc}") from exc

        if df.empty:
            return []
        return normalize_records(df.to_dict(orient="records"))
