"""Best-effort mapping of free-text locations onto country names."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Set, Tuple

COUNTRY_ALIASES: Dict[str, str] = {
    "usa": "United States",
    "us": "United States",
    "u.s.": "United States",
    "u.s.a.": "United States",
    "united states of america": "United States",
    "uk": "United Kingdom",
    "u.k.": "United Kingdom",
    "britain": "United Kingdom",
    "great britain": "United Kingdom",
    "england": "United Kingdom",
    "uae": "United Arab Emirates",
    "u.a.e.": "United Arab Emirates",
    "ksa": "Saudi Arabia",
    "drc": "Democratic Republic of the Congo",
    "republic of korea": "South Korea",
    "korea": "South Korea",
}

SPECIAL_LOCATIONS = ("Remote", "Worldwide", "Global", "Multiple Locations")

KNOWN_COUNTRIES = (
    "Afghanistan", "Albania", "Algeria", "Andorra", "Angola", "Argentina", "Armenia", "Australia",
    "Austria", "Azerbaijan", "Bahamas", "Bahrain", "Bangladesh", "Barbados", "Belarus", "Belgium",
    "Belize", "Benin", "Bhutan", "Bolivia", "Bosnia and Herzegovina", "Botswana", "Brazil", "Brunei",
    "Bulgaria", "Burkina Faso", "Burundi", "Cambodia", "Cameroon", "Canada", "Cape Verde",
    "Central African Republic", "Chad", "Chile", "China", "Colombia", "Comoros", "Congo",
    "Costa Rica", "Croatia", "Cuba", "Cyprus", "Czech Republic", "Czechia",
    "Democratic Republic of the Congo", "Denmark", "Djibouti", "Dominica", "Dominican Republic",
    "Ecuador", "Egypt", "El Salvador", "Equatorial Guinea", "Eritrea", "Estonia", "Eswatini",
    "Ethiopia", "Fiji", "Finland", "France", "Gabon", "Gambia", "Georgia", "Germany", "Ghana",
    "Greece", "Grenada", "Guatemala", "Guinea", "Guinea-Bissau", "Guyana", "Haiti", "Honduras",
    "Hong Kong", "Hungary", "Iceland", "India", "Indonesia", "Iran", "Iraq", "Ireland", "Israel",
    "Italy", "Ivory Coast", "Jamaica", "Japan", "Jordan", "Kazakhstan", "Kenya", "Kiribati",
    "Kuwait", "Kyrgyzstan", "Laos", "Latvia", "Lebanon", "Lesotho", "Liberia", "Libya",
    "Liechtenstein", "Lithuania", "Luxembourg", "Madagascar", "Malawi", "Malaysia", "Maldives",
    "Mali", "Malta", "Mauritania", "Mauritius", "Mexico", "Moldova", "Monaco", "Mongolia",
    "Montenegro", "Morocco", "Mozambique", "Myanmar", "Namibia", "Nauru", "Nepal", "Netherlands",
    "New Zealand", "Nicaragua", "Niger", "Nigeria", "North Korea", "North Macedonia", "Norway",
    "Oman", "Pakistan", "Palau", "Palestine", "Panama", "Papua New Guinea", "Paraguay", "Peru",
    "Philippines", "Poland", "Portugal", "Qatar", "Romania", "Russia", "Rwanda",
    "Saint Kitts and Nevis", "Saint Lucia", "Samoa", "San Marino", "Saudi Arabia", "Senegal",
    "Serbia", "Seychelles", "Sierra Leone", "Singapore", "Slovakia", "Slovenia", "Solomon Islands",
    "Somalia", "South Africa", "South Korea", "South Sudan", "Spain", "Sri Lanka", "Sudan",
    "Suriname", "Sweden", "Switzerland", "Syria", "Taiwan", "Tajikistan", "Tanzania", "Thailand",
    "Timor-Leste", "Togo", "Tonga", "Trinidad and Tobago", "Tunisia", "Turkey", "Turkmenistan",
    "Tuvalu", "Uganda", "Ukraine", "United Arab Emirates", "United Kingdom", "United States",
    "Uruguay", "Uzbekistan", "Vanuatu", "Vatican City", "Venezuela", "Vietnam", "Yemen", "Zambia",
    "Zimbabwe",
) + SPECIAL_LOCATIONS


def _phrase(text: str) -> re.Pattern:
    return re.compile(r"(?<![a-z])" + re.escape(text.lower()) + r"(?![a-z])")


_COUNTRY_PATTERNS = [(country, _phrase(country)) for country in KNOWN_COUNTRIES]
_ALIAS_PATTERNS = {alias: _phrase(alias) for alias in COUNTRY_ALIASES if len(alias) > 3}


def _words(text: str) -> Set[str]:
    return {w.strip(" .()/-") for w in text.replace(",", " ").split()}


def countries_in(location: str) -> Set[str]:
    """Country names mentioned in one location string."""
    found: Set[str] = set()
    if not location:
        return found
    lowered = location.lower().strip()

    hits: List[Tuple[int, int, str]] = []
    for country, pattern in _COUNTRY_PATTERNS:
        hits.extend((m.start(), m.end(), country) for m in pattern.finditer(lowered))

    # short aliases ("us", "uk") only count as whole words
    words = _words(lowered)
    for alias, name in COUNTRY_ALIASES.items():
        if alias in _ALIAS_PATTERNS:
            m = _ALIAS_PATTERNS[alias].search(lowered)
            if m:
                hits.append((m.start(), m.end(), name))
                break
        elif alias in words:
            found.add(name)
            break

    # a match inside a longer one ("Guinea" in "Papua New Guinea", "Korea" in
    # "North Korea") does not count
    for start, end, name in hits:
        if not any(s <= start and end <= e and (e - s) > (end - start) for s, e, _ in hits):
            found.add(name)

    parts = [p.strip() for p in location.split(",")]
    if len(parts) >= 2:
        tail = parts[-1].lower()
        for country in KNOWN_COUNTRIES:
            if tail == country.lower():
                found.add(country)
        if tail in COUNTRY_ALIASES:
            found.add(COUNTRY_ALIASES[tail])
    return found


def extract_countries(locations: Iterable[str]) -> List[str]:
    """Alphabetical country list with the special locations last."""
    found: Set[str] = set()
    for location in locations:
        found |= countries_in(location or "")
    regular = sorted(c for c in found if c not in SPECIAL_LOCATIONS)
    special = sorted(c for c in found if c in SPECIAL_LOCATIONS)
    return regular + special
