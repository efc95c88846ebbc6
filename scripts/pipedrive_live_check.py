#!/usr/bin/env python3
"""Quick live check of Pipedrive pagination and field labels.

Needs PIPEDRIVE_COMPANY_DOMAIN and PIPEDRIVE_API_TOKEN in the environment.

Run:
  poetry run python scripts/pipedrive_live_check.py          # deals
  poetry run python scripts/pipedrive_live_check.py persons  # any object type
"""

import sys

from pipedrive_export.connectors.pipedrive import PipedriveConnector, descriptor_for
from pipedrive_export.models.job import ExportJob


def main() -> None:
    type_arg = sys.argv[1] if len(sys.argv) > 1 else "deal"
    job = ExportJob.from_env(object_types=[type_arg])
    descriptor = descriptor_for(job.object_types[0])
    connector = PipedriveConnector(job.connection)
    print(f"Fetching {descriptor.path} from {job.connection.company_domain}.pipedrive.com...")

    labels = connector.field_labels(descriptor)
    print(f"Got {len(labels)} field labels from {descriptor.fields_path}")
    rows = connector.fetch_rows(descriptor)
    print(f"Got {len(rows)} rows")
    for i, row in enumerate(rows[:5], 1):
        print(f"  {i}. {row}")
    if rows:
        print("\n✅ Pagination + projection succeeded.")
    else:
        print("\n⚠️ No data returned. Check the account has records of this type.")


if __name__ == "__main__":
    main()
