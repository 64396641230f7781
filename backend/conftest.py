import os
import tempfile

import pytest

# Keep generated artifacts, job records and the stored key out of the source tree
_TEST_ROOT = tempfile.mkdtemp(prefix="content-studio-tests-")
os.environ.setdefault("OUTPUT_DIR", os.path.join(_TEST_ROOT, "outputs"))
os.environ.setdefault("JOB_DATA_DIR", os.path.join(_TEST_ROOT, "job_data"))
os.environ.setdefault("CREDENTIAL_FILE", os.path.join(_TEST_ROOT, ".credential"))


@pytest.fixture(autouse=True)
def mock_cloud_env(monkeypatch):
    """Automatically provide a model-service key for all tests"""
    monkeypatch.setenv("GEMINI_API_KEY", "mock-key")
    monkeypatch.delenv("API_KEY", raising=False)


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Fresh shared services per test"""
    from content_studio.config import CREDENTIAL_FILE
    from content_studio.core import credentials
    from content_studio.services.orchestration import job_manager
    from content_studio.services.transcription import session
    from content_studio.services.use_cases import generation_use_case

    monkeypatch.setattr(credentials, "_credential_provider", None)
    monkeypatch.setattr(job_manager, "_job_manager_instance", None)
    monkeypatch.setattr(session, "_transcriber", None)
    monkeypatch.setattr(generation_use_case, "_generation_use_case", None)
    CREDENTIAL_FILE.unlink(missing_ok=True)
