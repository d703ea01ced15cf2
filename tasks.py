from pathlib import Path
from invoke import task
from collections import Counter
import shutil
import json
import os
from dotenv import load_dotenv


load_dotenv()


APP_NAME = "firebase-pruner"
BUILD_DIR = Path(os.getenv("BUILD_DIR", "dist"))
BIN_NAME = APP_NAME


def _echo(ctx, cmd: str) -> None:
    ctx.run(cmd, echo=True)


def _analyze_bandit_report(report_path: Path) -> bool:
    """Print a Bandit summary. Returns True if no HIGH severity finding exists."""
    if not report_path.exists():
        print(f"⚠️ Bandit report not generated at {report_path}")
        return True

    with open(report_path, "r", encoding="utf-8") as f:
        results = json.load(f).get("results", [])

    if not results:
        print("   ✅ No security issues found!")
        return True

    severity_counts = Counter(r.get("issue_severity", "UNDEFINED") for r in results)
    print(f"   🔍 Total findings: {len(results)}")
    for severity in ["HIGH", "MEDIUM", "LOW"]:
        count = severity_counts.get(severity, 0)
        if count:
            print(f"   {severity.capitalize()}: {count}")

    test_counts = Counter(r.get("test_name", "unknown") for r in results)
    print("   📋 Top issues:")
    for test_name, count in test_counts.most_common(5):
        print(f"      • {test_name}: {count}")
    return severity_counts.get("HIGH", 0) == 0


@task
def clean(ctx):
    if BUILD_DIR.exists():
        shutil.rmtree(BUILD_DIR)
    for path in Path(".").glob("*.spec"):
        path.unlink()


@task(help={"k": "Only run tests matching this expression"})
def test(ctx, k: str = ""):
    selector = f" -k '{k}'" if k else ""
    _echo(ctx, f"python3 -m pytest{selector}")


@task(help={"distdir": "Output directory (default: dist)"})
def build_bin(ctx, distdir: str = "dist"):
    _echo(
        ctx,
        f"python3 -m PyInstaller -F -n {BIN_NAME} main.py --distpath {distdir}",
    )


@task
def security_scan(ctx):
    """Run Bandit over the package inside a Docker container."""
    print("\n🛡️  Running Bandit security analysis...")
    reports_dir = BUILD_DIR / "security"
    reports_dir.mkdir(parents=True, exist_ok=True)
    report_path = reports_dir / "bandit.json"

    # Bandit exits 1 when it finds anything; the report decides pass/fail.
    ctx.run(
        f"docker run --rm -v '{os.getcwd()}:/src' ghcr.io/pycqa/bandit/bandit "
        f"-r -f json -o /src/{report_path} /src/firebase_pruner",
        pty=True,
        warn=True,
    )

    if not _analyze_bandit_report(report_path):
        raise SystemExit("Bandit found high severity issues.")
    print("✅ Security scan completed successfully.")
