"""
Runtime environment guards.
"""

import os
from pathlib import Path
from typing import Dict


def parse_bool_env(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_int_env(value: str | None, default: int, minimum: int = 0) -> int:
    if value is None or not value.strip():
        return default
    try:
        return max(int(value), minimum)
    except ValueError:
        return default


def parse_float_env(value: str | None, default: float, minimum: float = 0.0) -> float:
    if value is None or not value.strip():
        return default
    try:
        return max(float(value), minimum)
    except ValueError:
        return default


def assert_directory_writable(path: Path, *, create: bool = True) -> None:
    if create:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RuntimeError(f"Cannot create directory: {path}") from exc
    if not path.exists() or not path.is_dir():
        raise RuntimeError(f"Required directory is missing: {path}")

    probe = path / f".write_probe_{os.getpid()}.tmp"
    try:
        with open(probe, "w", encoding="utf-8") as f:
            f.write("ok")
        probe.unlink(missing_ok=True)
    except OSError as exc:
        raise RuntimeError(f"Directory is not writable: {path}") from exc


def run_startup_runtime_checks(
    *,
    output_dir: Path,
    job_data_dir: Path,
    strict_dirs: bool = True,
) -> Dict[str, object]:
    report: Dict[str, object] = {"directories": {}, "ok": True}

    for dir_name, dir_path in (("output", output_dir), ("job_data", job_data_dir)):
        try:
            assert_directory_writable(dir_path)
            report["directories"][dir_name] = {"path": str(dir_path), "writable": True}
        except RuntimeError as exc:
            report["directories"][dir_name] = {
                "path": str(dir_path),
                "writable": False,
                "error": str(exc),
            }
            report["ok"] = False
            if strict_dirs:
                raise

    return report
