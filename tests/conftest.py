import json

import pytest

from bc_utils import telemetry

STATUS_FLAGS = {
    1: "Ready",
    2: "In Progress",
    4: "Completed",
    32: "Archived",
    64: "Ready to Archive",
}


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    home = tmp_path / "bc-home"
    monkeypatch.setenv("BC_UTILS_HOME", str(home))
    monkeypatch.delenv("BC_UTILS_FLAG_MAP", raising=False)
    monkeypatch.delenv("BC_UTILS_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture
def status_flags():
    return dict(STATUS_FLAGS)


@pytest.fixture
def flag_map_file(tmp_path):
    path = tmp_path / "flags.json"
    path.write_text(json.dumps({str(flag): label for flag, label in STATUS_FLAGS.items()}))
    return path


@pytest.fixture
def clean_telemetry():
    yield
    for handler_id in telemetry.list_handlers():
        telemetry.detach_handler(handler_id)
