"""Runs every self-audit and writes a consolidated report."""

import json
import sys
from datetime import datetime, timezone

from audit.check_density_oracle import check as check_density_oracle
from audit.check_mod_exp import check as check_mod_exp
from audit.check_primitive_root import check as check_primitive_root
from audit.check_roundtrip import check as check_roundtrip


CHECKS = [
    check_mod_exp,
    check_density_oracle,
    check_primitive_root,
    check_roundtrip,
]


def run_checks() -> list[dict]:
    return [fn() for fn in CHECKS]


def main(report_path: str = "audit_report.json"):
    print("=" * 60)
    print("  🔒 SELF-AUDIT – pubcrypt")
    print(f"  📅 {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')}")
    print("=" * 60)
    print()

    all_results = run_checks()

    passed = 0
    failed = 0
    for r in all_results:
        icon = "✅" if r["passed"] else "❌"
        name = r["check"]
        violations = r.get("violations", [])
        if r["passed"]:
            passed += 1
            print(f"  {icon} {name}")
        else:
            failed += 1
            print(f"  {icon} {name} ({len(violations)} violation(s))")
            for v in violations:
                if isinstance(v, dict):
                    print(f"      ⚠️  {json.dumps(v)}")
                else:
                    print(f"      ⚠️  {v}")

    print()
    print("-" * 60)
    total = passed + failed
    print(f"  Result: {passed}/{total} checks passed")

    if failed:
        print(f"  ⚠️  {failed} check(s) failed")
    else:
        print("  🎉 All audits passed")

    report = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "summary": {"total": total, "passed": passed, "failed": failed},
        "checks": all_results,
    }
    with open(report_path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, default=str)
    print(f"\n  📄 JSON report written: {report_path}")
    print("=" * 60)

    sys.exit(0 if failed == 0 else 1)


if __name__ == "__main__":
    main()
