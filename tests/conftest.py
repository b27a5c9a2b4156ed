"""Shared test fixtures for canvascompose tests."""

import pytest
import yaml

from canvascompose.clock import ManualScheduler, PlaybackClock
from canvascompose.composition import Composition
from canvascompose.editor import Editor


@pytest.fixture
def composition():
    return Composition()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def clock(composition, scheduler):
    return PlaybackClock(composition, scheduler)


@pytest.fixture
def notifications():
    """List collecting (level, message) pairs from an Editor's notifier."""
    return []


@pytest.fixture
def editor(scheduler, notifications):
    return Editor(
        scheduler=scheduler,
        notify=lambda level, message: notifications.append((level, message)),
    )


@pytest.fixture
def write_manifest(tmp_path):
    """Write a manifest dict to a YAML file under tmp_path, return its path.

    Shared by the manifest and CLI tests.
    """
    def _write(content: dict, name: str = "composition.yaml") -> str:
        path = tmp_path / name
        path.write_text(yaml.dump(content))
        return str(path)
    return _write
