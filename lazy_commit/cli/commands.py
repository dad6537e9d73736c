"""CLI Commands"""

from lazy_commit.config import PreferenceStore
from lazy_commit.output import print_error, print_success


def reset_config(store: PreferenceStore | None = None) -> int:
    """Delete saved preferences. The API key file is left alone."""
    store = store or PreferenceStore()
    try:
        removed = store.reset()
    except OSError as e:
        print_error(f"Failed to reset configuration: {e}")
        return 1

    if removed:
        print_success("Configuration reset successfully!")
    else:
        print(f"No configuration file found to reset ({store.path}).")
    return 0
