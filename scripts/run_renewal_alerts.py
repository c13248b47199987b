"""
Run the renewal alert job once, outside the scheduler (e.g. from cron).
"""
import logging
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from autotrack.services.scheduler.renewal_alerts import send_renewal_alerts

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description='Send renewal alerts for subscriptions nearing expiry')
    parser.add_argument('--today', type=date.fromisoformat, default=None, help='Override the current date (YYYY-MM-DD)')
    args = parser.parse_args()

    result = send_renewal_alerts(today=args.today)
    print(f"Checked {result['checked']}, alerted {result['alerted']}, skipped {result['skipped']}")
