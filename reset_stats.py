"""
Reset all Uptime data: every recorded work session and the widget snapshot.
Run it while the app is closed.
"""

import sys

from BackEnd.core.config import load_config
from BackEnd.core.log import setup_logging
from BackEnd.repos.session_repo import SessionStore
from BackEnd.services.aggregation import Aggregator
from BackEnd.services.shared_storage import SharedStorage


def reset_all_stats(config, confirm=input):
    """Delete all sessions and clear the widget data. Returns True when done."""
    if not config.db_path.exists():
        print("No database found. Stats are already at 0.")
        SharedStorage(config.shared_dir).reset()
        return False

    print(f"Found database at: {config.db_path}")
    answer = confirm("Are you sure you want to reset all stats? This cannot be undone. (yes/no): ")
    if answer.lower() not in ['yes', 'y']:
        print("Reset cancelled.")
        return False

    store = SessionStore(config.db_path)
    try:
        Aggregator(store, SharedStorage(config.shared_dir)).reset_all()
    finally:
        store.close()
    print("✓ All sessions deleted")
    print("✓ Widget data cleared")
    return True


def main():
    config = load_config()
    setup_logging(config.log_level)
    print("=" * 50)
    print("Uptime - Reset All Stats")
    print("=" * 50)
    done = reset_all_stats(config)
    sys.exit(0 if done else 1)


if __name__ == "__main__":
    main()
