"""Static city → IATA lookups used for deep links and flight pricing."""

# Common origin cities → nearest major airport
ORIGIN_CITY_TO_IATA: dict[str, str] = {
    # North America
    "san francisco": "SFO", "new york": "JFK", "new york city": "JFK",
    "los angeles": "LAX", "chicago": "ORD", "miami": "MIA", "austin": "AUS",
    "las vegas": "LAS", "houston": "IAH", "boston": "BOS", "seattle": "SEA",
    "washington": "IAD", "washington dc": "IAD", "dallas": "DFW",
    "denver": "DEN", "atlanta": "ATL", "phoenix": "PHX",
    "philadelphia": "PHL", "toronto": "YYZ", "vancouver": "YVR",
    "montreal": "YUL", "mexico city": "MEX",
    # South America
    "são paulo": "GRU", "sao paulo": "GRU",
    # Europe
    "london": "LHR", "paris": "CDG", "amsterdam": "AMS", "frankfurt": "FRA",
    "barcelona": "BCN", "madrid": "MAD", "rome": "FCO", "milan": "MXP",
    "munich": "MUC", "zurich": "ZRH", "dublin": "DUB", "brussels": "BRU",
    "vienna": "VIE", "lisbon": "LIS", "stockholm": "ARN",
    "copenhagen": "CPH", "oslo": "OSL", "helsinki": "HEL", "warsaw": "WAW",
    "prague": "PRG", "istanbul": "IST",
    # Asia-Pacific
    "sydney": "SYD", "melbourne": "MEL", "perth": "PER", "brisbane": "BNE",
    "auckland": "AKL", "singapore": "SIN", "tokyo": "NRT",
    "hong kong": "HKG", "seoul": "ICN", "beijing": "PEK",
    "kuala lumpur": "KUL", "bangkok": "BKK", "jakarta": "CGK",
    "manila": "MNL", "chennai": "MAA", "mumbai": "BOM", "delhi": "DEL",
    "bangalore": "BLR", "hyderabad": "HYD", "kolkata": "CCU",
    # Middle East & Africa
    "dubai": "DXB", "abu dhabi": "AUH", "doha": "DOH", "riyadh": "RUH",
    "tel aviv": "TLV", "cairo": "CAI", "johannesburg": "JNB",
    "cape town": "CPT",
}

# Race host city → airport, for races stored without an airportCode
RACE_CITY_TO_IATA: dict[str, str] = {
    "melbourne": "MEL",
    "shanghai": "PVG",
    "suzuka": "NGO",
    "sakhir": "BAH",
    "jeddah": "JED",
    "miami": "MIA",
    "montreal": "YUL",
    "monte carlo": "NCE",
    "barcelona": "BCN",
    "spielberg": "GRZ",
    "silverstone": "LHR",
    "spa": "CRL",
    "budapest": "BUD",
    "zandvoort": "AMS",
    "monza": "MXP",
    "madrid": "MAD",
    "baku": "GYD",
    "singapore": "SIN",
    "austin": "AUS",
    "mexico city": "MEX",
    "são paulo": "GRU",
    "sao paulo": "GRU",
    "las vegas": "LAS",
    "lusail": "DOH",
    "abu dhabi": "AUH",
}
