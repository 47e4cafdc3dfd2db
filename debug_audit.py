import json
import os
import sys

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "backend")))

from seo_audit.schemas.audit_result import dump_audit_summary
from seo_audit.services.audit_runner import AuditRunner
from seo_audit.services.scoring.errors import MalformedInputError

def main():
    if len(sys.argv) < 2:
        print("Usage: python debug_audit.py <items.json> [audit_id]")
        sys.exit(2)

    path = sys.argv[1]
    audit_id = sys.argv[2] if len(sys.argv) > 2 else "debug-audit"

    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    items = payload["items"] if isinstance(payload, dict) else payload

    print(f"Aggregating {len(items)} factors from {path}...")
    runner = AuditRunner()
    try:
        result = runner.run(audit_id, items)
    except MalformedInputError as e:
        print(f"Rejected: {e}")
        sys.exit(1)

    summary = result.summary.summary
    print(f"Overall score: {summary.overall_score}")
    print(f"Buckets: {summary.category_scores}")
    print(f"Counts: PriorityOFI={summary.priority_ofi_count} OFI={summary.ofi_count} "
          f"OK={summary.ok_count} N/A={summary.na_count}")
    print(f"Fix time: {summary.estimated_fix_time}")
    print(f"Pages: {result.distribution}")

    for page in (result.summary.page_analysis or [])[:3]:
        print(f"  {page.page_url}: weight={page.priority_weight} score={page.score}")

    out_path = f"{audit_id}_v{result.entry.version}.json"
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(dump_audit_summary(result.summary), f, indent=2)
    print(f"Saved {out_path}")

if __name__ == "__main__":
    main()
