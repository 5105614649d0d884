"""
Built-in check-in fee table.

Keys are category + program concatenated with no separator, as in the
fee sheet's Key column. A full sheet loaded at runtime replaces this set.
"""

RECLAIMS_PROGRAMS = (
    "BENAR-WM-RECLAIMS-OVERSTOCK",
    "FORTX-WM-RECLAIMS-OVERSTOCK",
    "FRAKY-WM-RECLAIMS-OVERSTOCK",
)

STANDARD_FEE = 2.50
OVERSIZE_FEE = 5.00

# Categories priced the same in every reclaims program
_SHARED_CATEGORY_FEES = {
    "Adult": STANDARD_FEE,
    "Automotive -> Automotive Accessories": STANDARD_FEE,
    "Automotive -> Automotive Parts": STANDARD_FEE,
    "Automotive -> Automotive Tools -> Hand": STANDARD_FEE,
    "Automotive -> Automotive Tools -> Power": STANDARD_FEE,
    "Automotive -> Tires": OVERSIZE_FEE,
    "Baby -> Baby Food & Formula": STANDARD_FEE,
    "Baby -> Baby Monitors": STANDARD_FEE,
    "Baby -> Bedding & Decor": STANDARD_FEE,
    "Baby -> Car Seats": OVERSIZE_FEE,
    "Baby -> Diapers & Wipes": STANDARD_FEE,
    "Baby -> Health & Safety": OVERSIZE_FEE,
    "Baby -> Nursing & Feeding Supplies": STANDARD_FEE,
    "Baby -> Strollers": OVERSIZE_FEE,
    "Baby -> Walkers, Swings & Bouncers": OVERSIZE_FEE,
    "Books": STANDARD_FEE,
}

# Categories only priced for the BENAR program
_BENAR_CATEGORY_FEES = {
    "Custom Order Items": STANDARD_FEE,
    "Electronics -> Batteries": STANDARD_FEE,
    "Electronics -> Cameras -> Accessories": STANDARD_FEE,
    "Electronics -> Cameras -> DSLR": STANDARD_FEE,
    "Electronics -> Car Audio, Video & Electronics -> Amplifiers": OVERSIZE_FEE,
    "Electronics -> Car Audio, Video & Electronics -> Speakers": OVERSIZE_FEE,
    "Electronics -> Car Audio, Video & Electronics -> Stereos": OVERSIZE_FEE,
    "Electronics -> Cellular Phones -> Smart Phones -> Apple iPhones": STANDARD_FEE,
    "Electronics -> Computers -> All In One Computers": OVERSIZE_FEE,
    "Electronics -> Computers -> Desktops": STANDARD_FEE,
    "Electronics -> Computers -> Laptops": STANDARD_FEE,
    "Electronics -> Computers -> Monitors": STANDARD_FEE,
    "Electronics -> Headphones & Portable Speakers -> Portable Speakers": STANDARD_FEE,
    "Electronics -> Home Audio & Theater -> Clock Radio": STANDARD_FEE,
}


def _build_defaults() -> dict[str, float]:
    fees: dict[str, float] = {}
    for program in RECLAIMS_PROGRAMS:
        for category, price in _SHARED_CATEGORY_FEES.items():
            fees[f"{category}{program}"] = price
    for category, price in _BENAR_CATEGORY_FEES.items():
        fees[f"{category}{RECLAIMS_PROGRAMS[0]}"] = price
    return fees


DEFAULT_CHECKIN_FEES: dict[str, float] = _build_defaults()
