"""Example: call the service layer directly (no Flask).

Controllers stay thin; every permission check lives in the services, so the
same rules apply here as over HTTP.
"""

import importlib

from config import get_settings_module

from src.hr_records.hr_records.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    principal = container.principal_service.resolve(1)
    for row in container.employee_service.list_employees(principal):
        print(row["id"], row["full_name"], row["phone"])


if __name__ == "__main__":
    main()
