"""
reset_data.py
-------------
Clear all stored data (users, customers, cars, bookings, revoked tokens)
from the store file named by DATA_PATH (data.pkl by default).

Usage:
    $ python reset_data.py

Repopulate sample data afterwards with:
    $ python seeds.py
"""

from carrental.config import Config
from carrental.models.store import Store


def main():
    store = Store.configure(Config.DATA_PATH)
    store.clear()

    print(f"{store.path} has been cleared.")
    print("Tip: run `python seeds.py` to regenerate demo data.")


if __name__ == "__main__":
    main()
