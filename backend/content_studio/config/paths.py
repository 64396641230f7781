"""
Paths configuration

Centralized directory paths for the application. Each can be moved with an
environment variable of the same name.
"""

import os
from pathlib import Path

PACKAGE_DIR = Path(__file__).parent.parent
BACKEND_DIR = PACKAGE_DIR.parent

OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", str(BACKEND_DIR / "outputs")))
JOB_DATA_DIR = Path(os.getenv("JOB_DATA_DIR", str(BACKEND_DIR / "job_data")))
CREDENTIAL_FILE = Path(os.getenv("CREDENTIAL_FILE", str(BACKEND_DIR / ".credential")))

OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
JOB_DATA_DIR.mkdir(parents=True, exist_ok=True)

__all__ = ["PACKAGE_DIR", "BACKEND_DIR", "OUTPUT_DIR", "JOB_DATA_DIR", "CREDENTIAL_FILE"]
