import httpx
import sys

API_BASE = "http://localhost:8000/api/v1"
AUDIT_ID = "example-com"

SAMPLE_ITEMS = [
    {
        "name": "Meta Tags Optimization",
        "description": "Title and meta description present and sized",
        "status": "PriorityOFI",
        "importance": "High",
        "notes": "How: Write a 50-60 character title",
        "category": "onPage",
        "pageUrl": "https://example.com/",
        "pageTitle": "Example Plumbing",
        "pageType": "homepage",
        "analysisDetails": {
            "recommendations": ["Write a 50-60 character title"],
            "difficulty": "easy",
            "estimatedImpact": "high",
        },
    },
    {
        "name": "SSL Certificate Implementation",
        "description": "Site is served over HTTPS",
        "status": "OK",
        "importance": "High",
        "notes": "",
        "category": "technicalSEO",
    },
    {
        "name": "NAP Consistency",
        "description": "Name, address and phone match across pages",
        "status": "OFI",
        "importance": "Medium",
        "notes": "How: Use one phone number format",
        "category": "contactPage",
        "pageUrl": "https://example.com/contact",
        "pageType": "contact",
        "analysisDetails": {"recommendations": ["Use one phone number format"]},
    },
]

def run_audit():
    print(f"Submitting {len(SAMPLE_ITEMS)} factors for audit '{AUDIT_ID}'...")
    try:
        resp = httpx.post(
            f"{API_BASE}/audit/{AUDIT_ID}/runs",
            json={"items": SAMPLE_ITEMS, "crawlMetadata": {"pagesAnalyzed": 2, "errors": []}},
            timeout=30.0,
        )
        if resp.status_code == 422:
            print(f"Batch rejected: {resp.json()['detail']}")
            return
        resp.raise_for_status()
        entry = resp.json()

        summary = entry["results"]["summary"]
        print(f"Stored version {entry['version']}")
        print(f"Overall score: {summary.get('overallScore', 'n/a')}")
        print(f"Estimated fix time: {summary.get('estimatedFixTime')}")
        changes = entry["changes"]
        print(
            f"Changes: +{len(changes['added'])} -{len(changes['removed'])} "
            f"~{len(changes['modified'])} ({changes['scoreTrend']} {changes['scoreChange']:+})"
        )

        history = httpx.get(f"{API_BASE}/audit/{AUDIT_ID}/history", timeout=10.0)
        history.raise_for_status()
        for row in history.json():
            print(f"  v{row['version']}: score={row.get('overallScore', 'n/a')} factors={row['totalFactors']}")

    except httpx.HTTPError as e:
        print(f"Error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    run_audit()
