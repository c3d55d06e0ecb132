# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

"""pytest configuration.
"""

import pytest

from replfmt.common import log
from replfmt.formatter import ObjectFormatter
from replfmt.inspect import PrintOptions


@pytest.fixture(autouse=True)
def quiet_log(monkeypatch):
    """Keeps warnings about deliberately broken test objects out of the test output."""
    monkeypatch.setattr(log, "stderr_levels", set())
    monkeypatch.setattr(log, "file", None)


@pytest.fixture
def formatter():
    return ObjectFormatter()


@pytest.fixture
def unbounded():
    return PrintOptions(maximum_output_length=None)
