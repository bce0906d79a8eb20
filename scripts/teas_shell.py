"""
Quick look at the tea collection file (DATA_FILE_PATH or ./teas.yaml).

Usage:
  python scripts/teas_shell.py            # list teas
  python scripts/teas_shell.py --check    # validate every record
  python scripts/teas_shell.py <id>       # dump one tea as YAML
"""
from __future__ import annotations

import sys

import yaml
from dotenv import load_dotenv

from core.database import StoreError, get_tea, list_teas, resolve_data_file


def main() -> None:
    load_dotenv(override=True)
    arg = " ".join(sys.argv[1:]).strip()
    print(f"Using data file: {resolve_data_file()}", file=sys.stderr)

    try:
        if arg and arg != "--check":
            tea = get_tea(arg)
            if tea is None:
                raise SystemExit(f"No tea with id {arg}")
            print(yaml.safe_dump(tea.to_record(), sort_keys=False, allow_unicode=True))
            return
        teas = list_teas()
    except StoreError as exc:
        raise SystemExit(f"Error reading tea collection: {exc}") from exc

    if arg == "--check":
        print(f"OK ({len(teas)} tea(s) valid)")
        return
    for tea in teas:
        print(f"{tea.id}  {tea.type:<7} {tea.caffeine_level:<7} {len(tea.steep_times)} steeps  {tea.name}")


if __name__ == "__main__":
    main()
