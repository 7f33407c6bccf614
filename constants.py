import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

TEMPLATES_DIR = os.path.join(BASE_DIR, "templates")
STATIC_DIR = os.path.join(BASE_DIR, "static")

PAGE_SIZE = 10
DB_POOL_SIZE = 5

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

INDEX_TEMPLATE = "index.html"
CASES_TEMPLATE = "cases.html"
CASE_TABLE_TEMPLATE = "components/casetable.html"
