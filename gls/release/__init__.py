"""Release resolution: versions, latest release metadata, installed base version."""

from __future__ import annotations
