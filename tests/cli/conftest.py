import logging

import pytest

from devtodo.cli.main import cli
from devtodo.core.kv_store import FileKeyValueStore
from devtodo.core.task_storage import TaskStorageManager


@pytest.fixture(autouse=True)
def reset_devtodo_logger():
    """Drop handlers installed by the root command so they never outlive a test."""
    yield
    logger = logging.getLogger("devtodo")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def invoke(cli_runner, data_dir):
    """Run the root command against a temporary data directory."""
    def _invoke(*args, **kwargs):
        return cli_runner.invoke(cli, ["--data-dir", str(data_dir), *args], **kwargs)
    return _invoke


@pytest.fixture
def stored(data_dir):
    """Open the same task store the CLI writes to."""
    def _stored():
        return TaskStorageManager(FileKeyValueStore(data_dir))
    return _stored
