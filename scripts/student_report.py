"""Print a student's performance analysis (or report card) as JSON using the app's DB helper.
Run from the repo root:

    python scripts/student_report.py 42
    python scripts/student_report.py 42 --report-card

This uses the same DB configuration as the app (env vars / .env).
"""

import argparse
import json
import sys
import traceback

# Ensure we can import utils from parent directory
sys.path.insert(0, ".")

try:
    from utils.db_conn import close_db_connection
    from utils.performance_engine import analyze_student_performance, build_report_card
    from utils.student_records import (
        RecordTransportError,
        StudentNotFoundError,
        fetch_record_set,
    )
except Exception:
    print("Failed to import the performance engine. Make sure you're running from the repo root.")
    traceback.print_exc()
    sys.exit(1)


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("student_id", type=int)
    parser.add_argument(
        "--report-card",
        action="store_true",
        help="print cumulative report-card results instead of the dashboard analysis",
    )
    args = parser.parse_args(argv)

    try:
        records = fetch_record_set(args.student_id)
    except StudentNotFoundError as e:
        print(str(e))
        return 1
    except RecordTransportError:
        print("Database query failed:")
        traceback.print_exc()
        return 2
    finally:
        close_db_connection()

    if args.report_card:
        output = build_report_card(records)
    else:
        output = analyze_student_performance(records)
    output["student"] = records["student"]
    print(json.dumps(output, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
