# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

"""Store, query and search documents on a local RiakJson node.

Run against a node listening on 127.0.0.1:8098::

    RIAKJSON_LOG_LEVEL=debug python examples/basic_usage.py
"""

from __future__ import annotations

from riakjson import RemoteNotFound, open_connection
from riakjson.utils import setup_logger


def main() -> None:
    setup_logger()
    with open_connection() as conn:
        print("ping:", conn.ping().text)

        cities = conn.collection("cities")
        cities.set_schema(
            [
                {"name": "city", "type": "string", "require": True},
                {"name": "country", "type": "text", "require": False},
            ]
        )

        key = cities.insert_raw_json(None, {"city": "Paris", "country": "France"})
        cities.insert_raw_json("lyon", {"city": "Lyon", "country": "France"})
        print("generated key:", key)

        print("one:", cities.query_one({"city": "Paris"}).text)
        print("all:", cities.query_all({"country": "France"}).text)
        print("search:", cities.raw_search({"q": "country:France", "wt": "json"}).text)

        print("collections:", [c.name for c in conn.list_collections()])

        cities.delete_raw_json(key)
        cities.delete_raw_json("lyon")
        try:
            conn.collection("never-written").get_schema()
        except RemoteNotFound as exc:
            print("no schema:", exc)


if __name__ == "__main__":
    main()
