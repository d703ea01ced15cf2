from .models import PruneReport


def print_report(report: PruneReport) -> None:
    print("\n" + "=" * 50)
    print(f"Pruning summary for project {report.project_id}")
    if not report.results:
        print("No apps processed.")
    for result in report.results:
        if result.error is not None:
            print(f"- {result.app_id}: listing failed ({result.error})")
            continue
        outcome = result.outcome
        if outcome is None:
            continue
        line = f"- {result.app_id}: {outcome.deleted_count} deleted"
        if outcome.failed_chunks:
            line += (
                f", {outcome.failed_count} failed in "
                f"{len(outcome.failed_chunks)} chunk(s)"
            )
        print(line)
        for chunk in outcome.failed_chunks:
            status = chunk.status if chunk.status is not None else "no response"
            print(f"    chunk of {len(chunk.names)} failed: {status} {chunk.detail}".rstrip())
    print(f"Total deleted: {report.total_deleted}")
    if report.has_failures:
        print("Pruning finished with failures.")
    else:
        print("Pruning complete.")
    print("=" * 50)
