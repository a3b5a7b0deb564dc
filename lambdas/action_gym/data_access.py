import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

import boto3
from botocore.exceptions import ClientError

from . import config as cfg
from .catalog import DAYS

logger = logging.getLogger(__name__)

S3 = boto3.client("s3", region_name=cfg.AWS_REGION)


class ScheduleLoadError(RuntimeError):
    """The schedule document could not be read or has the wrong shape."""


class UnknownDayError(LookupError):
    """Requested day is not one of the seven weekday names."""

    def __init__(self, day: Any):
        super().__init__(f"Unknown day: {day!r}")
        self.day = day


@dataclass(frozen=True)
class ClassEntry:
    name: str
    start_time: str

    def describe(self) -> str:
        return f"{self.name} at {self.start_time}"


class ScheduleStore:
    """Read-only weekly class schedule keyed by weekday name."""

    def __init__(self, days: Mapping[str, List[ClassEntry]]):
        missing = [d for d in DAYS if d not in days]
        if missing:
            raise ScheduleLoadError(f"Schedule is missing days: {', '.join(missing)}")
        self._days: Dict[str, Tuple[ClassEntry, ...]] = {d: tuple(days[d]) for d in DAYS}

    def classes_for(self, day: str) -> Tuple[ClassEntry, ...]:
        if day not in self._days:
            raise UnknownDayError(day)
        return self._days[day]

    def describe_classes(self, day: str) -> str:
        return format_classes(self.classes_for(day))

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._days.values())


def format_classes(entries) -> str:
    # dict keeps first-seen order while dropping exact duplicates
    described = dict.fromkeys(entry.describe() for entry in entries)
    return ", ".join(described)


# --- Weekday helpers ---

def day_name(moment: datetime) -> str:
    # isoweekday: Monday=1 .. Sunday=7; DAYS starts on Sunday
    return DAYS[moment.isoweekday() % 7]


def normalize_day(text: Optional[str]) -> Optional[str]:
    t = (text or "").strip()
    if not t:
        return None
    for day in DAYS:
        if day.lower() == t.lower():
            return day
    return t


# --- Loading ---

def parse_schedule(document: Any) -> ScheduleStore:
    if not isinstance(document, dict) or not isinstance(document.get("days"), dict):
        raise ScheduleLoadError("Schedule document must be an object with a 'days' mapping")
    days: Dict[str, List[ClassEntry]] = {}
    for day, items in document["days"].items():
        if day not in DAYS:
            raise ScheduleLoadError(f"Unexpected day key in schedule: {day!r}")
        if not isinstance(items, list):
            raise ScheduleLoadError(f"Classes for {day} must be a list")
        entries = []
        for item in items:
            try:
                entries.append(ClassEntry(name=str(item["name"]), start_time=str(item["startTime"])))
            except (KeyError, TypeError) as e:
                raise ScheduleLoadError(f"Malformed class entry for {day}: {item!r}") from e
        days[day] = entries
    return ScheduleStore(days)


def _read_local(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise ScheduleLoadError(f"Cannot read schedule file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ScheduleLoadError(f"Schedule file {path} is not UTF-8: {e}") from e


def _read_s3(bucket: str, key: str) -> str:
    if not bucket:
        raise ScheduleLoadError("FEATURE_S3_DATA is on but S3_BUCKET_DATA is not set")
    try:
        obj = S3.get_object(Bucket=bucket, Key=key)
        # utf-8-sig tolerates a BOM from hand-edited uploads
        return obj["Body"].read().decode("utf-8-sig")
    except ClientError as e:
        raise ScheduleLoadError(f"Cannot fetch s3://{bucket}/{key}: {e}") from e
    except UnicodeDecodeError as e:
        raise ScheduleLoadError(f"s3://{bucket}/{key} is not UTF-8: {e}") from e


def load_schedule(path: Optional[str] = None) -> ScheduleStore:
    if path is None and cfg.FEATURE_S3_DATA:
        source = f"s3://{cfg.S3_BUCKET_DATA}/{cfg.S3_SCHEDULE_KEY}"
        raw = _read_s3(cfg.S3_BUCKET_DATA, cfg.S3_SCHEDULE_KEY)
    else:
        source = path or cfg.SCHEDULE_FILE
        raw = _read_local(source)
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ScheduleLoadError(f"Schedule at {source} is not valid JSON: {e}") from e
    store = parse_schedule(document)
    logger.info("Loaded %d classes from %s", len(store), source)
    return store
