"""Terraform invocation subpackage.

This subpackage provides an abstraction over running the Terraform executable,
with a subprocess-backed implementation and an in-memory fake for tests.
"""

from tfdriver.core.terraform.abc import Terraform
from tfdriver.core.terraform.fake import FakeTerraform, RecordedCall, ScriptedRun
from tfdriver.core.terraform.real import RealTerraform

__all__ = [
    "FakeTerraform",
    "RealTerraform",
    "RecordedCall",
    "ScriptedRun",
    "Terraform",
]
