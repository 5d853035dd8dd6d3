"""
reset_data.py
-------------
Clear every collection in the local data file.

Usage:
    $ python reset_data.py

Repopulate demo data afterwards with:
    $ python seeds.py
"""
import logging

from carrental import create_app
from carrental.models.store import DocumentStore

logger = logging.getLogger("reset_data")


def main():
    app = create_app()
    with app.app_context():
        store = DocumentStore.instance()
        store.clear()
        store.save()
        logger.info("%s has been cleared. Run `python seeds.py` to regenerate demo data.", store.path)


if __name__ == "__main__":
    main()
