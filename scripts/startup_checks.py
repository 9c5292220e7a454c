#!/usr/bin/env python3
"""Startup checks for environment and dependencies.

This script reports missing env vars, an unreadable ledger file, a missing
`ledger` binary and missing Python packages that the API needs at runtime.

It returns non-zero when run with `raise_on_error=True` inside CI or local checks.
"""
import importlib
import os
import shutil
import sys

from dotenv import load_dotenv

from ledger_api.config import load_settings

load_dotenv()


def _module_available(name: str) -> bool:
    try:
        importlib.import_module(name)
        return True
    except ImportError:
        return False


def run_checks(raise_on_error: bool = True):
    errors = []
    warnings = []

    if not os.getenv("LEDGER_FILE") and not os.getenv("LEDGER_API_CONFIG"):
        warnings.append("Neither LEDGER_FILE nor LEDGER_API_CONFIG is set; using the default ledger path")

    try:
        settings = load_settings()
    except ValueError as exc:
        errors.append(f"Invalid configuration: {exc}")
        settings = None

    if settings is not None:
        ledger_file = settings.ledger_file
        if not os.path.isfile(ledger_file):
            errors.append(f"Ledger file not found: {ledger_file}")
        elif not os.access(ledger_file, os.R_OK | os.W_OK):
            errors.append(f"Ledger file is not readable and writable: {ledger_file}")

        if shutil.which(settings.ledger_cmd) is None:
            warnings.append(
                f"Ledger command {settings.ledger_cmd!r} not found on PATH; report endpoints will fail"
            )

        script = settings.update_reports_script
        if script and not os.path.isfile(script):
            warnings.append(f"UPDATE_REPORTS_SCRIPT file not found: {script}")

    required_modules = [
        ("fastapi", "fastapi"),
        ("uvicorn", "uvicorn"),
        ("pydantic", "pydantic"),
        ("dotenv", "python-dotenv"),
    ]
    for mod, pkg in required_modules:
        if not _module_available(mod):
            errors.append(f"Missing Python module: {mod} (install package: {pkg})")

    report = {"errors": errors, "warnings": warnings}
    if errors and raise_on_error:
        msg = "Startup checks failed:\n" + "\n".join(errors + warnings)
        raise SystemExit(msg)
    return report


def main():
    report = run_checks(raise_on_error=False)
    print("STARTUP CHECKS:")
    print("Errors:", report.get("errors"))
    print("Warnings:", report.get("warnings"))
    if report.get("errors"):
        missing_pkgs = []
        for err in report.get("errors", []):
            # format: Missing Python module: <mod> (install package: <pkg>)
            if "install package:" in err:
                missing_pkgs.append(err.split("install package:")[-1].strip().rstrip(")"))

        if missing_pkgs:
            print("\nSuggested fix:")
            print("pip install " + " ".join(sorted(set(missing_pkgs))))

        sys.exit(2)


if __name__ == "__main__":
    main()
