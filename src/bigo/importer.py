"""Backup export and import (JSON or YAML)."""
import json
from datetime import datetime, timedelta
from pathlib import Path

import yaml
from loguru import logger

from bigo.errors import BackupFormatError
from bigo.models import Problem
from bigo.problems import clear_all, list_problems, save_problems
from bigo.review import validate_prior_state, validate_quality
from bigo.settings import get_last_backup_date, set_last_backup_date

BACKUP_INTERVAL = timedelta(days=7)
BACKUP_MIN_PROBLEMS = 5


def default_backup_name(now: datetime | None = None) -> str:
    return f"big_o_backup_{(now or datetime.now()).date().isoformat()}.json"


def read_backup(file_path: str) -> list:
    path = Path(file_path)
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise BackupFormatError(f"Could not parse {path.name}: {e}") from e
    if isinstance(data, dict) and "problems" in data:
        data = data["problems"]
    if not isinstance(data, list):
        raise BackupFormatError(f"{path.name} does not contain a list of problems")
    return data


def export_backup(db_path: str, file_path: str, now: datetime | None = None) -> dict:
    """Write every problem, with its full review history, to a JSON file."""
    now = now or datetime.now()
    problems = list_problems(db_path)
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps([p.to_dict() for p in problems], indent=2), encoding="utf-8")
    set_last_backup_date(db_path, now)
    logger.info(f"Exported {len(problems)} problems to {path}")
    return {"filename": path.name, "count": len(problems)}


def _parse_record(record: dict) -> Problem:
    problem = Problem.from_dict(record)
    validate_prior_state(problem.state)
    for log in problem.state.review_history:
        validate_quality(log.quality)
    return problem


def import_backup(db_path: str, file_path: str, replace: bool = False) -> dict:
    """Load problems from a backup. Malformed records are skipped."""
    records = read_backup(file_path)
    problems = []
    skipped = 0
    for i, record in enumerate(records):
        try:
            problems.append(_parse_record(record))
        except (KeyError, TypeError, ValueError) as e:
            skipped += 1
            logger.warning(f"Skipping backup record {i}: {e!r}")
    if replace:
        clear_all(db_path)
    save_problems(db_path, problems)
    logger.info(f"Imported {len(problems)} problems from {Path(file_path).name} ({skipped} skipped)")
    return {"filename": Path(file_path).name, "imported": len(problems), "skipped": skipped}


def is_backup_due(db_path: str, now: datetime | None = None) -> bool:
    now = now or datetime.now()
    if len(list_problems(db_path)) <= BACKUP_MIN_PROBLEMS:
        return False
    last = get_last_backup_date(db_path)
    return last is None or now - last > BACKUP_INTERVAL
