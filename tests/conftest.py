"""
Shared fixtures for filerelease tests.
"""

from pathlib import Path

import pytest

from filerelease.config.settings import ReleaseSettings, ScheduleSettings
from filerelease.core.categories import Category


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def publish_dir(tmp_path: Path) -> Path:
    # Not created up front: the relocator creates it on demand
    return tmp_path / "publish"


@pytest.fixture
def settings(staging_dir: Path, publish_dir: Path) -> ReleaseSettings:
    return ReleaseSettings(
        staging_dir=staging_dir,
        publish_dir=publish_dir,
        schedules={
            Category.REDEMPTION: ScheduleSettings(Category.REDEMPTION, "*/6 * * * * *"),
            Category.OUTPAY: ScheduleSettings(Category.OUTPAY, "0 */5 * * * *", enabled=False),
        },
    )


def stage(directory: Path, *names: str, content: str = "data") -> list[Path]:
    """Create files named ``names`` in ``directory``."""
    paths = []
    for name in names:
        path = directory / name
        path.write_text(content)
        paths.append(path)
    return paths


CONFIG_YAML = """\
filesystem:
  staging_dir: staging
  publish_dir: publish

scheduling:
  timezone: UTC
  redemption:
    cron: "*/6 * * * * *"
  outpay: "0 0 6 * * *"
  own_and_ben:
    cron: "0 30 7 * * MON-FRI"
    timezone: Europe/Amsterdam
    enabled: false

service:
  host: 0.0.0.0
  port: 9090

logging:
  level: INFO
  console_enabled: false
"""


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Project directory with a config.yaml and an existing staging directory."""
    project = tmp_path / "project"
    project.mkdir()
    (project / "config.yaml").write_text(CONFIG_YAML)
    (project / "staging").mkdir()
    return project
