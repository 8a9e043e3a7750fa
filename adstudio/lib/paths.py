# adstudio/lib/paths.py
from __future__ import annotations
import re
import uuid
from pathlib import Path
from adstudio.config import config

_JOB_ID_RE = re.compile(r"^[a-f0-9]{32}$")

def data_dir() -> str:
    """
    Root folder for all job artifacts: <base_output_dir>/data
    Ensures it exists and returns it as a string.
    """
    root = Path(config.base_output_dir) / "data"
    root.mkdir(parents=True, exist_ok=True)
    return str(root)

def is_job_id(job_id: str) -> bool:
    return bool(_JOB_ID_RE.match(job_id or ""))

def job_dir(job_id: str, *, create: bool = True) -> str:
    """
    Folder for a specific job: <data_dir>/jobs/<job_id>
    """
    if not is_job_id(job_id):
        raise ValueError(f"invalid job id: {job_id!r}")
    jd = Path(data_dir()) / "jobs" / job_id
    if create:
        jd.mkdir(parents=True, exist_ok=True)
    return str(jd)

def make_job_dir_with_id() -> tuple[str, str]:
    """
    Creates a new job id + folder and returns (job_id, job_dir_path).
    """
    jid = uuid.uuid4().hex
    return jid, job_dir(jid)
