from __future__ import annotations

import csv
import json
import logging
import re
from collections import Counter
from pathlib import Path
from typing import Iterable, List, Sequence

from .errors import InputAccessError, InputFormatError
from .models import Process

logger = logging.getLogger(__name__)

_DECIMAL = re.compile(r"[+-]?[0-9]+")


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload into a list of Process objects, preserving row order.

    ``.json`` files hold a list of ``{"id", "burst", "arrival", "priority"}``
    objects; anything else is read as headerless CSV rows of
    ``id,burst,arrival[,priority]``.
    """
    path = Path(path)

    try:
        if path.suffix.lower() == ".json":
            processes = _load_json(path)
        else:
            processes = _load_csv(path)
    except OSError as exc:
        raise InputAccessError(f"cannot read workload file {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise InputFormatError(f"{path}: not valid UTF-8 text: {exc}") from exc
    except csv.Error as exc:
        raise InputFormatError(f"{path}: malformed CSV: {exc}") from exc

    _check_ids(processes)
    if not processes:
        logger.warning("Workload %s contains no processes", path)
    else:
        logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InputFormatError(f"{path}: invalid JSON: {exc}") from exc

    if not isinstance(raw, list):
        raise InputFormatError(f"{path}: JSON workload must be a list of process objects")

    processes: List[Process] = []
    for idx, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise InputFormatError(f"{path}: entry {idx} is not an object: {entry!r}")
        try:
            row = [entry["id"], entry["burst"], entry["arrival"]]
        except KeyError as exc:
            raise InputFormatError(f"{path}: entry {idx} is missing field {exc}") from exc
        if entry.get("priority") is not None:
            row.append(entry["priority"])
        processes.append(_process_from_row(row, f"{path}: entry {idx}"))

    return processes


def _load_csv(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8", newline="") as f:
        return processes_from_rows(csv.reader(f), source=str(path))


def processes_from_rows(rows: Iterable[Sequence], source: str = "<rows>") -> List[Process]:
    """
    Convert already-split rows of ``(id, burst, arrival[, priority])`` into
    Process objects. Blank rows are skipped; any malformed row aborts the load.
    """
    processes: List[Process] = []
    for lineno, row in enumerate(rows, start=1):
        if not row or all(str(field).strip() == "" for field in row):
            continue
        processes.append(_process_from_row(row, f"{source}: line {lineno}"))
    return processes


def _process_from_row(row: Sequence, where: str) -> Process:
    if len(row) not in (3, 4):
        raise InputFormatError(f"{where}: expected 3 or 4 fields, got {len(row)}: {list(row)!r}")

    try:
        values = [_to_int(field) for field in row]
    except (TypeError, ValueError) as exc:
        raise InputFormatError(f"{where}: fields must be base-10 integers: {list(row)!r}") from exc

    pid, burst_time, arrival_time = values[:3]
    priority = values[3] if len(values) == 4 else 0

    if burst_time <= 0:
        raise InputFormatError(f"{where}: burst must be positive, got {burst_time}")
    if arrival_time < 0:
        raise InputFormatError(f"{where}: arrival must not be negative, got {arrival_time}")

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )


def _to_int(value) -> int:
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    # ASCII digits only, no underscores
    if not _DECIMAL.fullmatch(text):
        raise ValueError(f"not a base-10 integer: {value!r}")
    return int(text, 10)


def _check_ids(processes: List[Process]) -> None:
    counts = Counter(p.pid for p in processes)
    duplicates = sorted(pid for pid, n in counts.items() if n > 1)
    if duplicates:
        logger.warning("Duplicate process ids %s; ties follow input order", duplicates)
