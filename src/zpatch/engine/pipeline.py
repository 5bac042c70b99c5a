"""End-to-end patch run: guard, extract, generate, apply, report."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .edits import DEFAULT_LOOKBACK_WINDOW, build_steps
from .errors import AlreadyPatched, ExtractionFailed, NotRecognized
from .extract import extract_identifiers
from .generate import render_fragments
from .guard import ensure_patchable
from .report import EditFailure, PatchReport, PatchStatus

LOGGER = logging.getLogger(__name__)
TELEMETRY_LOGGER = logging.getLogger("zpatch.telemetry")


def _serialise_event_value(value: Any) -> Any:
    """Convert telemetry payload values into JSON-friendly representations."""
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, (list, tuple, set)):
        return [_serialise_event_value(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _serialise_event_value(child) for key, child in value.items()}
    return str(value)


def _emit_patch_event(event: str, **fields: Any) -> None:
    """Log a structured telemetry event for a patch run."""
    payload = {"event": event, "timestamp": datetime.now(timezone.utc).isoformat()}
    for key, value in fields.items():
        payload[key] = _serialise_event_value(value)
    TELEMETRY_LOGGER.info(json.dumps(payload, separators=(",", ":"), ensure_ascii=True))


def _finish(report: PatchReport) -> PatchReport:
    _emit_patch_event(
        "patch.completed",
        status=report.status.value,
        applied=report.applied,
        failed=report.failed_labels,
        warnings=len(report.warnings),
    )
    return report


def patch_source(
    source: str,
    *,
    lookback_window: int = DEFAULT_LOOKBACK_WINDOW,
    pane_init_delay_ms: int = 200,
) -> PatchReport:
    """Run the full pipeline against ``source`` and return its report.

    ``source`` is never modified; the patched text is only attached to the
    report when every edit succeeded. Engine failures are folded into the
    report instead of propagating.
    """

    try:
        ensure_patchable(source)
    except AlreadyPatched as error:
        return _finish(PatchReport.fatal(PatchStatus.ALREADY_PATCHED, str(error)))
    except NotRecognized as error:
        return _finish(PatchReport.fatal(PatchStatus.NOT_RECOGNIZED, str(error)))

    try:
        bundle = extract_identifiers(source)
    except ExtractionFailed as error:
        return _finish(PatchReport.fatal(PatchStatus.EXTRACTION_FAILED, str(error)))

    fragments = render_fragments(bundle, pane_init_delay_ms=pane_init_delay_ms)

    text = source
    applied: list[str] = []
    failures: list[EditFailure] = []
    warnings: list[str] = []
    for step in build_steps(bundle, fragments, lookback_window=lookback_window):
        outcome = step.run(text)
        text = outcome.text
        applied.extend(outcome.applied)
        failures.extend(outcome.failures)
        warnings.extend(outcome.warnings)

    if failures:
        LOGGER.info("Patch run failed: %d of the edits did not apply", len(failures))
        report = PatchReport(
            status=PatchStatus.EDITS_FAILED,
            applied=tuple(applied),
            failures=tuple(failures),
            warnings=tuple(warnings),
        )
    else:
        report = PatchReport(
            status=PatchStatus.OK,
            applied=tuple(applied),
            warnings=tuple(warnings),
            patched_text=text,
        )
    return _finish(report)


__all__ = ["patch_source"]
