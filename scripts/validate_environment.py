#!/usr/bin/env python3
"""Validate local availability engine environment readiness."""

from __future__ import annotations

import importlib
import sys
from dataclasses import replace
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dept_scheduler.repository.commitment_repository import CommitmentRepository
from dept_scheduler.services.scheduling_service import SchedulingService
from dept_scheduler.utils.config import get_settings

SEPARATOR_LINE = "=" * 44


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True

    # CHECK 1: Python version >= 3.10
    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2: Required packages importable with versions
    package_specs = [
        ("fastapi", "fastapi"),
        ("uvicorn", "uvicorn"),
        ("pydantic", "pydantic"),
        ("pandas", "pandas"),
        ("httpx", "httpx"),
        ("pytest", "pytest"),
    ]
    import_errors: list[str] = []
    from importlib.metadata import version

    for module_name, dist_name in package_specs:
        try:
            importlib.import_module(module_name)
            version(dist_name)
        except Exception as exc:  # pragma: no cover - runtime guard
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    settings = replace(get_settings(), seed_demo_data=True)
    repository = CommitmentRepository(settings)
    service = SchedulingService(repository=repository, settings=settings)

    # CHECK 3: Demo seeding
    try:
        seeded = repository.seed_demo_data()
        if seeded <= 0:
            raise RuntimeError("demo seed produced no commitments")
        ok, line = _print_result("Demo commitments", True, f": {seeded} rows")
    except Exception as exc:
        ok, line = _print_result("Demo commitments", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 4: Commitment index build
    try:
        index = service.get_index()
        if not index.named_entities or not index.room_catalog:
            raise RuntimeError("index has no entities or rooms")
        ok, line = _print_result(
            "Commitment index",
            True,
            f": {len(index.named_entities)} people, {len(index.room_catalog)} rooms",
        )
    except Exception as exc:
        ok, line = _print_result("Commitment index", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 5: Group availability
    try:
        group = service.group_availability(entities=service.list_entities())
        slot_count = sum(len(slots) for slots in group.days.values())
        ok, line = _print_result("Group availability", True, f": {slot_count} common slots")
    except Exception as exc:
        ok, line = _print_result("Group availability", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 6: Analytics aggregation and CSV export
    try:
        report = service.analytics()
        csv_body = service.export_table("rooms")
        if not csv_body.startswith("room,"):
            raise RuntimeError("unexpected CSV header")
        ok, line = _print_result(
            "Analytics",
            True,
            f": {report.total_sessions} sessions, peak hour {report.hourly.peak_hour}",
        )
    except Exception as exc:
        ok, line = _print_result("Analytics", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    print(SEPARATOR_LINE)
    print(" Availability Engine Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
