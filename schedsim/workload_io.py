from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Mapping

from .models import Process, ValidationError, validate_processes

logger = logging.getLogger(__name__)


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.

    Each entry needs a burst_time; arrival_time defaults to 0 and priority
    is optional. Entries are numbered by their position in the file.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise ValidationError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    if not processes:
        raise ValidationError(f"Workload {path} contains no processes")

    validate_processes(processes)
    logger.info(f"Loaded {len(processes)} processes from {path}")
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise ValidationError("JSON workload must be a list of process objects")

    return [_process_from_mapping(index, entry) for index, entry in enumerate(raw)]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for index, row in enumerate(reader):
            processes.append(_process_from_mapping(index, row))
    return processes


def _number(value):
    """
    JSON already gives numbers; CSV gives strings that may hold either.
    """
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            return float(value)
    return value


def _process_from_mapping(index: int, mapping: Mapping) -> Process:
    if not isinstance(mapping, Mapping):
        raise ValidationError(f"Invalid process entry #{index + 1}: {mapping!r}")

    try:
        burst_time = _number(mapping["burst_time"])
        arrival_val = mapping.get("arrival_time")
        arrival_time = _number(arrival_val) if arrival_val not in (None, "") else 0
        priority_val = mapping.get("priority")
        priority = _number(priority_val) if priority_val not in (None, "") else None
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid process entry #{index + 1}: {mapping!r}") from exc

    return Process(
        pid=index,
        burst_time=burst_time,
        arrival_time=arrival_time,
        priority=priority,
    )
