# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
naming.py — Turn a reverse-geocoding address into a human-readable place name.

Indian addresses get a hierarchical label, "Village, Taluka, District",
because the village alone is often ambiguous and the district alone points
at the nearest big city. Everywhere else the most granular available field
is used on its own.

Example:
    >>> build_place_name(Address(village="Basardge", taluka="Gadhinglaj",
    ...                          district="Kolhapur", country="India"))
    'Basardge, Gadhinglaj, Kolhapur'
"""

from weather_now.models import Address

INDIA_NAMES = {"india"}
INDIA_CODES = {"in"}

# Field fallback orders, most granular first
GRANULAR_FIELDS = ("village", "hamlet", "locality", "suburb", "neighbourhood")
TALUKA_FIELDS = ("taluka", "subdistrict", "county")
DISTRICT_FIELDS = ("district", "state_district")
URBAN_FIELDS = ("city", "town", "municipality")
GENERIC_FIELDS = GRANULAR_FIELDS + URBAN_FIELDS + ("subdistrict", "state_district", "county")
ADMIN1_FIELDS = ("state", "state_district", "region")


def is_india(country: str | None, country_code: str | None = None) -> bool:
    """Return True when a country name or ISO code identifies India."""
    if country and country.strip().lower() in INDIA_NAMES:
        return True
    return bool(country_code) and country_code.strip().lower() in INDIA_CODES


def first_present(address: Address, names: tuple[str, ...]) -> str:
    """Return the first non-empty address field among `names`, or ''."""
    for name in names:
        value = getattr(address, name)
        if value:
            return value
    return ""


def build_place_name(address: Address) -> str:
    """Derive a display name from an address.

    Args:
        address: Parsed reverse-geocoding address.

    Returns:
        The place name, or '' when the address has no usable field.
    """
    if not is_india(address.country, address.country_code):
        return first_present(address, GENERIC_FIELDS)

    base = first_present(address, GRANULAR_FIELDS)
    taluka = first_present(address, TALUKA_FIELDS)
    district = first_present(address, DISTRICT_FIELDS)

    if base:
        parts = [base]
        if taluka and taluka != base:
            parts.append(taluka)
        if district and district != taluka and district != base:
            parts.append(district)
        return ", ".join(parts)
    if taluka:
        if district and district != taluka:
            return f"{taluka}, {district}"
        return taluka
    if district:
        return district
    return first_present(address, URBAN_FIELDS)


def derive_admin1(address: Address) -> str:
    """First-level administrative division (state/region) for an address."""
    return first_present(address, ADMIN1_FIELDS)
