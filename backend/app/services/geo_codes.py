"""Static state code / name tables and the state → DMA lookup.

Region names coming back from the warehouse are not consistent (``TX``,
``Texas``, ``TEXAS`` all appear), so every helper here degrades to ``None``
or an empty list instead of raising.
"""

from __future__ import annotations

STATE_NAME_TO_CODE: dict[str, str] = {
    "alabama": "AL",
    "alaska": "AK",
    "arizona": "AZ",
    "arkansas": "AR",
    "california": "CA",
    "colorado": "CO",
    "connecticut": "CT",
    "delaware": "DE",
    "florida": "FL",
    "georgia": "GA",
    "hawaii": "HI",
    "idaho": "ID",
    "illinois": "IL",
    "indiana": "IN",
    "iowa": "IA",
    "kansas": "KS",
    "kentucky": "KY",
    "louisiana": "LA",
    "maine": "ME",
    "maryland": "MD",
    "massachusetts": "MA",
    "michigan": "MI",
    "minnesota": "MN",
    "mississippi": "MS",
    "missouri": "MO",
    "montana": "MT",
    "nebraska": "NE",
    "nevada": "NV",
    "new hampshire": "NH",
    "new jersey": "NJ",
    "new mexico": "NM",
    "new york": "NY",
    "north carolina": "NC",
    "north dakota": "ND",
    "ohio": "OH",
    "oklahoma": "OK",
    "oregon": "OR",
    "pennsylvania": "PA",
    "rhode island": "RI",
    "south carolina": "SC",
    "south dakota": "SD",
    "tennessee": "TN",
    "texas": "TX",
    "utah": "UT",
    "vermont": "VT",
    "virginia": "VA",
    "washington": "WA",
    "west virginia": "WV",
    "wisconsin": "WI",
    "wyoming": "WY",
    "district of columbia": "DC",
}

STATE_CODE_TO_NAME: dict[str, str] = {
    code: name.title().replace(" Of ", " of ")
    for name, code in STATE_NAME_TO_CODE.items()
}

# The 50 states, excluding DC; the mock generator enumerates exactly these.
US_STATE_NAMES: list[str] = [
    STATE_CODE_TO_NAME[code] for code in STATE_NAME_TO_CODE.values() if code != "DC"
]

REGION_GROUPS: dict[str, frozenset[str]] = {
    "Northeast": frozenset({"ME", "NH", "VT", "MA", "RI", "CT", "NY", "NJ", "PA"}),
    "Southeast": frozenset(
        {"DE", "MD", "VA", "WV", "KY", "NC", "SC", "TN", "GA", "FL", "AL", "MS", "LA", "AR"}
    ),
    "Midwest": frozenset({"OH", "MI", "IN", "IL", "WI", "MN", "IA", "MO", "ND", "SD", "NE", "KS"}),
    "Southwest": frozenset({"TX", "OK", "NM", "AZ"}),
    "West": frozenset({"CO", "WY", "MT", "ID", "UT", "NV", "CA"}),
    "Northwest": frozenset({"WA", "OR"}),
}

DEFAULT_REGION_GROUP = "Midwest"

STATE_DMA_MAPPING: dict[str, list[str]] = {
    "AL": [
        "BIRMINGHAM (ANN & TUSC)",
        "MONTGOMERY (SELMA)",
        "MOBILE - PENSACOLA (FT WALT)",
        "HUNTSVILLE - DECATUR (FLOR)",
        "DOTHAN",
        "COLUMBUS, GA",
        "MERIDIAN",
        "GREENWOOD - GREENVILLE",
    ],
    "AK": [
        "ANCHORAGE",
        "JUNEAU",
        "FAIRBANKS",
    ],
    "AZ": [
        "PHOENIX (PRESCOTT)",
        "TUCSON (SIERRA VISTA)",
        "YUMA - EL CENTRO",
        "FLAGSTAFF",
    ],
    "AR": [
        "LITTLE ROCK - PINE BLUFF",
        "FT. SMITH - FAY - SPRNGDL - RGRS",
        "JONESBORO",
        "MONROE - EL DORADO",
        "SHREVEPORT",
        "MEMPHIS",
    ],
    "CA": [
        "LOS ANGELES",
        "SAN FRANCISCO - OAK - SAN JOSE",
        "SAN DIEGO",
        "SACRAMENTO - STKTN - MODESTO",
        "FRESNO - VISALIA",
        "BAKERSFIELD",
        "PALM SPRINGS",
        "MONTEREY - SALINAS",
        "SANTA BARBARA - SANMAR - SANLUOB",
        "CHICO - REDDING",
        "EUREKA",
        "YUMA - EL CENTRO",
    ],
    "CO": [
        "DENVER",
        "COLORADO SPRINGS - PUEBLO",
        "GRAND JUNCTION - MONTROSE",
    ],
    "CT": [
        "HARTFORD & NEW HAVEN",
        "BOSTON (MANCHESTER)",
        "NEW YORK",
    ],
    "DE": [
        "PHILADELPHIA",
        "SALISBURY",
    ],
    "FL": [
        "MIAMI - FT. LAUDERDALE",
        "TAMPA - ST. PETE (SARASOTA)",
        "ORLANDO - DAYTONA BCH - MELBRN",
        "WEST PALM BEACH - FT. PIERCE",
        "JACKSONVILLE",
        "FT. MYERS - NAPLES",
        "MOBILE - PENSACOLA (FT WALT)",
        "TALLAHASSEE - THOMASVILLE",
        "GAINESVILLE",
        "PANAMA CITY",
    ],
    "GA": [
        "ATLANTA",
        "SAVANNAH",
        "MACON",
        "COLUMBUS, GA",
        "ALBANY, GA",
        "AUGUSTA",
        "TALLAHASSEE - THOMASVILLE",
        "CHATTANOOGA",
        "JACKSONVILLE",
        "GREENVILLE - N. BERN - WASHNGTN",
    ],
    "HI": [
        "HONOLULU",
    ],
    "ID": [
        "BOISE",
        "IDAHO FALLS - POCATELLO",
        "TWIN FALLS",
        "SPOKANE",
        "SALT LAKE CITY",
    ],
    "IL": [
        "CHICAGO",
        "CHAMPAIGN & SPRNGFLD - DECATUR",
        "PEORIA - BLOOMINGTON",
        "ROCKFORD",
        "DAVENPORT - R. ISLAND - MOLINE",
        "ST. LOUIS",
        "PADUCAH - CAPE GIRAR D - HARSBG",
        "QUINCY - HANNIBAL - KEOKUK",
    ],
    "IN": [
        "INDIANAPOLIS",
        "CHICAGO",
        "FORT WAYNE",
        "SOUTH BEND - ELKHART",
        "TERRE HAUTE",
        "LOUISVILLE",
        "EVANSVILLE",
        "LAFAYETTE, IN",
        "CINCINNATI",
    ],
    "IA": [
        "DES MOINES - AMES",
        "CEDAR RAPIDS - WTRLO - IWC&DUB",
        "DAVENPORT - R. ISLAND - MOLINE",
        "SIOUX CITY",
        "OMAHA",
        "OTTUMWA - KIRKSVILLE",
        "ROCHESTER - MASON CITY - AUSTIN",
        "SIOUX FALLS (MITCHELL)",
        "QUINCY - HANNIBAL - KEOKUK",
    ],
    "KS": [
        "KANSAS CITY",
        "WICHITA - HUTCHINSON PLUS",
        "TOPEKA",
        "JOPLIN - PITTSBURG",
    ],
    "KY": [
        "LOUISVILLE",
        "LEXINGTON",
        "CINCINNATI",
        "NASHVILLE",
        "BOWLING GREEN",
        "CHARLESTON - HUNTINGTON",
        "PADUCAH - CAPE GIRAR D - HARSBG",
        "KNOXVILLE",
        "TRI - CITIES, TN - VA",
    ],
    "LA": [
        "NEW ORLEANS",
        "SHREVEPORT",
        "BATON ROUGE",
        "LAFAYETTE, LA",
        "LAKE CHARLES",
        "MONROE - EL DORADO",
        "ALEXANDRIA, LA",
    ],
    "ME": [
        "PORTLAND - AUBURN",
        "BANGOR",
        "PRESQUE ISLE",
        "BOSTON (MANCHESTER)",
    ],
    "MD": [
        "BALTIMORE",
        "WASHINGTON, DC (HAGRSTWN)",
        "SALISBURY",
    ],
    "MA": [
        "BOSTON (MANCHESTER)",
        "PROVIDENCE - NEW BEDFORD",
        "SPRINGFIELD - HOLYOKE",
        "ALBANY - SCHENECTADY - TROY",
    ],
    "MI": [
        "DETROIT",
        "GRAND RAPIDS - KALMZOO - B. CRK",
        "FLINT - SAGINAW - BAY CITY",
        "TRAVERSE CITY - CADILLAC",
        "LANSING",
        "MARQUETTE",
        "ALPENA",
    ],
    "MN": [
        "MINNEAPOLIS - ST. PAUL",
        "DULUTH - SUPERIOR",
        "MANKATO",
        "ROCHESTER - MASON CITY - AUSTIN",
        "FARGO - VALLEY CITY",
        "LA CROSSE - EAU CLAIRE",
    ],
    "MS": [
        "JACKSON, MS",
        "GREENWOOD - GREENVILLE",
        "COLUMBUS - TUPELO - WEST POINT",
        "HATTIESBURG - LAUREL",
        "BILOXI - GULFPORT",
        "MERIDIAN",
        "MEMPHIS",
    ],
    "MO": [
        "ST. LOUIS",
        "KANSAS CITY",
        "SPRINGFIELD, MO",
        "COLUMBIA - JEFFERSON CITY",
        "JOPLIN - PITTSBURG",
        "PADUCAH - CAPE GIRAR D - HARSBG",
        "QUINCY - HANNIBAL - KEOKUK",
        "OTTUMWA - KIRKSVILLE",
        "ST. JOSEPH",
    ],
    "MT": [
        "BILLINGS",
        "MISSOULA",
        "GREAT FALLS",
        "BUTTE - BOZEMAN",
        "HELENA",
    ],
    "NE": [
        "OMAHA",
        "LINCOLN & HSTNGS - KRNY",
        "NORTH PLATTE",
        "CHEYENNE - SCOTTSBLUF",
        "SIOUX CITY",
        "SIOUX FALLS (MITCHELL)",
    ],
    "NV": [
        "LAS VEGAS",
        "RENO",
        "SALT LAKE CITY",
    ],
    "NH": [
        "BOSTON (MANCHESTER)",
        "PORTLAND - AUBURN",
        "BURLINGTON - PLATTSBRG",
    ],
    "NJ": [
        "NEW YORK",
        "PHILADELPHIA",
    ],
    "NM": [
        "ALBUQUERQUE - SANTA FE",
        "EL PASO (LAS CRUCES)",
        "AMARILLO",
    ],
    "NY": [
        "NEW YORK",
        "BUFFALO",
        "ROCHESTER, NY",
        "ALBANY - SCHENECTADY - TROY",
        "SYRACUSE",
        "BINGHAMTON",
        "UTICA",
        "WATERTOWN",
        "ELMIRA (CORNING)",
        "BURLINGTON - PLATTSBRG",
    ],
    "NC": [
        "CHARLOTTE",
        "RALEIGH - DURHAM (FAYETVLLE)",
        "GREENSBORO - H. POINT - W. SALEM",
        "GREENVILLE - N. BERN - WASHNGTN",
        "WILMINGTON",
        "GREENVILLE - SPART - ASHEVLL - ANDM",
        "MYRTLE BEACH - FLORENCE",
    ],
    "ND": [
        "FARGO - VALLEY CITY",
        "MINOT - BISMARCK - DICKINSON",
    ],
    "OH": [
        "CLEVELAND - AKRON (CANTON)",
        "COLUMBUS, OH",
        "CINCINNATI",
        "DAYTON",
        "TOLEDO",
        "YOUNGSTOWN",
        "LIMA",
        "ZANESVILLE",
        "WHEELING - STEUBENVILLE",
        "PARKERSBURG",
    ],
    "OK": [
        "OKLAHOMA CITY",
        "TULSA",
        "WICHITA FALLS & LAWTON",
        "SHERMAN - ADA",
        "AMARILLO",
        "FT. SMITH - FAY - SPRNGDL - RGRS",
    ],
    "OR": [
        "PORTLAND, OR",
        "EUGENE",
        "BEND, OR",
        "MEDFORD - KLAMATH FALLS",
    ],
    "PA": [
        "PHILADELPHIA",
        "PITTSBURGH",
        "HARRISBURG - LNCSTR - LEB - YORK",
        "WILKES BARRE - SCRANTON",
        "ERIE",
        "JOHNSTOWN - ALTOONA",
        "CLEVELAND - AKRON (CANTON)",
        "YOUNGSTOWN",
        "WHEELING - STEUBENVILLE",
    ],
    "RI": [
        "PROVIDENCE - NEW BEDFORD",
        "BOSTON (MANCHESTER)",
    ],
    "SC": [
        "CHARLOTTE",
        "COLUMBIA, SC",
        "CHARLESTON, SC",
        "GREENVILLE - SPART - ASHEVLL - ANDM",
        "MYRTLE BEACH - FLORENCE",
        "AUGUSTA",
        "SAVANNAH",
    ],
    "SD": [
        "SIOUX FALLS (MITCHELL)",
        "RAPID CITY",
        "MINOT - BISMARCK - DICKINSON",
    ],
    "TN": [
        "NASHVILLE",
        "MEMPHIS",
        "KNOXVILLE",
        "CHATTANOOGA",
        "TRI - CITIES, TN - VA",
        "JACKSON, TN",
    ],
    "TX": [
        "DALLAS - FT. WORTH",
        "HOUSTON",
        "SAN ANTONIO",
        "AUSTIN",
        "HARLINGEN - WSLCO - BRNSVL - MCA",
        "EL PASO (LAS CRUCES)",
        "WACO - TEMPLE - BRYAN",
        "CORPUS CHRISTI",
        "AMARILLO",
        "LUBBOCK",
        "TYLER - LONGVIEW (LFKN & NCGD)",
        "WICHITA FALLS & LAWTON",
        "ODESSA - MIDLAND",
        "BEAUMONT - PORT ARTHUR",
        "ABILENE - SWEETWATER",
        "SAN ANGELO",
        "LAREDO",
        "SHERMAN - ADA",
        "VICTORIA",
        "SHREVEPORT",
    ],
    "UT": [
        "SALT LAKE CITY",
    ],
    "VT": [
        "BURLINGTON - PLATTSBRG",
        "BOSTON (MANCHESTER)",
        "ALBANY - SCHENECTADY - TROY",
    ],
    "VA": [
        "WASHINGTON, DC (HAGRSTWN)",
        "NORFOLK - PORTSMTH - NEWPT NWS",
        "RICHMOND - PETERSBURG",
        "ROANOKE - LYNCHBURG",
        "TRI - CITIES, TN - VA",
        "CHARLOTTESVILLE",
        "HARRISONBURG",
        "BLUEFIELD - BECKLEY - OAK HILL",
    ],
    "WA": [
        "SEATTLE - TACOMA",
        "SPOKANE",
        "YAKIMA - PASCO - RCHLND - KNNWCK",
        "PORTLAND, OR",
    ],
    "WV": [
        "CHARLESTON - HUNTINGTON",
        "WHEELING - STEUBENVILLE",
        "PITTSBURGH",
        "BLUEFIELD - BECKLEY - OAK HILL",
        "CLARKSBURG - WESTON",
        "PARKERSBURG",
        "WASHINGTON, DC (HAGRSTWN)",
    ],
    "WI": [
        "MILWAUKEE",
        "GREEN BAY - APPLETON",
        "MADISON",
        "LA CROSSE - EAU CLAIRE",
        "WAUSAU - RHINELANDER",
        "DULUTH - SUPERIOR",
        "MINNEAPOLIS - ST. PAUL",
    ],
    "WY": [
        "DENVER",
        "CASPER - RIVERTON",
        "CHEYENNE - SCOTTSBLUF",
        "IDAHO FALLS - POCATELLO",
    ],
    "DC": [
        "WASHINGTON, DC (HAGRSTWN)",
    ],
}


def code_for_name(name: str | None) -> str | None:
    """Return the 2-letter code for a state name (case-insensitive)."""

    if not name:
        return None
    return STATE_NAME_TO_CODE.get(name.strip().lower())


def name_for_code(code: str | None) -> str | None:
    """Return the display name for an exact uppercase 2-letter code."""

    if not code:
        return None
    return STATE_CODE_TO_NAME.get(code.strip())


def resolve_code(identifier: str | None) -> str | None:
    """Resolve either a code or a name to the canonical code."""

    if not identifier:
        return None
    candidate = identifier.strip()
    if len(candidate) == 2 and candidate.upper() in STATE_CODE_TO_NAME:
        return candidate.upper()
    return code_for_name(candidate)


def sub_regions_for(code: str | None) -> list[str]:
    """Named DMAs for a state code, in table order. Returns a fresh list."""

    if not code:
        return []
    return list(STATE_DMA_MAPPING.get(code.strip().upper(), []))


def region_group(code: str | None) -> str:
    if code:
        for group, codes in REGION_GROUPS.items():
            if code.upper() in codes:
                return group
    return DEFAULT_REGION_GROUP


def identifier_candidates(identifier: str) -> list[str]:
    """Every spelling worth matching a STORE_STATE-like column against.

    Order: raw input, code, name, upper-cased, lower-cased. Duplicates are
    removed while keeping the first occurrence.
    """

    raw = identifier.strip()
    code = resolve_code(raw)
    forms = [raw, code, name_for_code(code), raw.upper(), raw.lower()]
    seen: list[str] = []
    for form in forms:
        if form and form not in seen:
            seen.append(form)
    return seen


def alternate_identifier(identifier: str) -> str | None:
    """Code ↔ name swap; when the identifier does not resolve, a case swap."""

    raw = identifier.strip()
    code = resolve_code(raw)
    if code is not None:
        return name_for_code(code) if raw.upper() == code else code
    swapped = raw.lower() if raw.isupper() else raw.upper()
    return swapped if swapped != raw else None


def slugify(identifier: str) -> str:
    return "_".join(identifier.split()).lower()
