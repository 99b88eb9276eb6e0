#!/usr/bin/env python3
"""
Example: Contact Book
Demonstrates lenses, multifocal optics and fusion over nested records
"""

import sys
import os
import logging
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from natural_optics import (
    Lens, NOTHING, HOLE, StereoscopyError,
    fuse, multifocal,
)

BOOK = {
    'owner': 'Fred',
    'contacts': [
        {'name': 'Barney', 'phone': '555-0101', 'address': {'street': 'Cave Stone Rd'}},
        {'name': 'Wilma'},
    ],
}


def main():
    logging.basicConfig(level=logging.INFO)

    print("=" * 80)
    print("EXAMPLE: Contact Book")
    print("=" * 80)

    first_phone = Lens('contacts', 0, 'phone')
    print(f"First phone: {first_phone.get(BOOK)}")
    print(f"Second phone present: {Lens('contacts', 1, 'phone').present(BOOK)}")

    updated = Lens('contacts', 1, 'address', 'street').set_in_clone(BOOK, '1 Quarry Ln')
    print(f"Wilma's address: {updated['contacts'][1]['address']}")
    print(f"Barney shared: {updated['contacts'][0] is BOOK['contacts'][0]}")

    without_phone = first_phone.xform_in_clone_maybe(BOOK, lambda maybe: NOTHING)
    print(f"Barney without phone: {without_phone['contacts'][0]}")

    card = multifocal([Lens('name'), Lens('phone')])
    for index in range(2):
        person = Lens('contacts', index).get(BOOK)
        values = ['(absent)' if v is HOLE else v for v in card.get(person)]
        print(f"Card {index}: {values}")

    names = fuse(multifocal([Lens(0, 'name'), Lens(1, 'name')]), Lens('contacts'))
    print(f"All names: {names.get(BOOK)}")

    twins = multifocal([Lens('owner'), Lens('owner')])
    try:
        twins.set_in_clone(BOOK, ['Fred', 'Barney'])
    except StereoscopyError as error:
        print(f"✓ Conflict detected: {error}")

    print("\n" + "=" * 80)
    print(f"✓ Original untouched: {BOOK['contacts'][1] == {'name': 'Wilma'}}")


if __name__ == "__main__":
    main()
