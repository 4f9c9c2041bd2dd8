"""Word lists used by the keyword tier of the category classifier."""

CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "Travel": [
        # lodging
        "hotel", "motel", "inn", "resort", "lodge", "hostel", "airbnb", "vrbo", "booking", "expedia",
        "marriott", "hilton", "hyatt", "intercontinental", "sheraton", "westin", "ritz carlton",
        "holiday inn", "best western", "doubletree", "courtyard", "residence inn",
        # air
        "flight", "airline", "airport", "plane ticket", "airways", "airfare",
        "delta", "united airlines", "american airlines", "southwest", "jetblue", "alaska airlines",
        "lufthansa", "british airways", "emirates",
        # ground
        "uber", "lyft", "taxi", "cab", "rideshare", "rental car", "car rental",
        "hertz", "avis", "alamo", "amtrak", "greyhound", "megabus",
        # general
        "cruise", "vacation", "trip", "travel", "sightseeing",
        "travel insurance", "visa fees", "passport", "tsa precheck", "global entry",
    ],
    "Dining": [
        "restaurant", "dining", "food", "meal", "lunch", "dinner", "breakfast", "brunch",
        "cafe", "coffee shop", "bistro", "diner", "steakhouse", "pizzeria", "bakery",
        "bar", "pub", "tavern", "brewery", "winery", "cocktail",
        "takeout", "to-go", "drive-thru", "drive through",
        "doordash", "ubereats", "uber eats", "grubhub", "postmates", "seamless",
        "mcdonald", "burger king", "wendy", "taco bell", "kfc", "subway", "chipotle",
        "panera", "starbucks", "dunkin", "domino", "pizza hut", "papa john",
        "olive garden", "applebee", "outback", "red lobster",
        "coffee", "latte", "cappuccino", "espresso", "smoothie", "pizza", "burger", "sushi",
        "peet", "caribou coffee", "tim hortons",
    ],
    "Grocery": [
        "grocery", "groceries", "supermarket", "food shopping", "grocery store",
        "market", "food mart", "fresh market", "organic market",
        "whole foods", "trader joe", "safeway", "kroger", "publix", "wegmans",
        "harris teeter", "food lion", "stop shop", "king soopers",
        "fred meyer", "ralphs", "vons", "albertsons", "meijer",
        "costco", "sam's club", "bj's wholesale", "warehouse club", "bulk shopping",
        "walmart", "target", "aldi", "lidl", "winco",
        "butcher", "deli", "farmers market", "fish market", "meat market",
        "produce", "vegetables",
    ],
    "Gas": [
        "gas", "gasoline", "fuel", "petrol", "diesel", "gas station", "fuel station",
        "service station", "filling station", "pump", "fill up", "fuel tank",
        "shell", "exxon", "mobil", "chevron", "bp", "texaco", "citgo", "sunoco",
        "marathon", "speedway", "phillips 66", "conoco", "valero", "arco",
        "wawa", "sheetz", "kwik trip", "quiktrip", "racetrac",
        "7-eleven", "circle k", "flying j",
        "tesla supercharger", "ev charging", "chargepoint", "electrify america", "evgo",
    ],
    "Entertainment": [
        "movie", "cinema", "theater", "theatre", "film", "show", "performance",
        "amc", "regal", "cinemark", "imax", "broadway", "concert hall",
        "netflix", "hulu", "disney+", "hbo max", "apple tv",
        "paramount+", "peacock", "espn+", "showtime", "starz",
        "youtube premium", "spotify", "apple music", "pandora", "tidal",
        "concert", "festival", "sporting event", "tickets", "ticketmaster",
        "stubhub", "vivid seats", "seatgeek",
        "amusement park", "theme park", "zoo", "museum", "aquarium",
        "disney world", "disneyland", "universal studios", "six flags",
        "xbox", "playstation", "nintendo", "gaming", "video game", "gamestop",
    ],
    "Online": [
        "amazon", "ebay", "walmart.com", "target.com", "bestbuy.com", "etsy",
        "online shopping", "e-commerce", "internet purchase", "web store",
        "online order", "digital purchase", "online marketplace", "online",
        "app store", "google play", "microsoft store",
        "steam", "epic games", "digital download", "software purchase",
        "paypal", "web hosting", "domain", "saas", "cloud storage", "dropbox", "icloud",
    ],
    "Transit": [
        "metro", "subway", "bus", "train", "light rail", "streetcar", "trolley",
        "public transport", "public transportation", "transit", "commuter rail",
        "commute", "commuting", "commuter",
        "bart", "metrocard", "metro card", "transit card", "tap card", "charlie card",
        "subway fare", "bus fare", "train fare", "metro fare", "transit fare",
        "mta", "wmata", "cta", "septa", "mbta", "trimet", "muni",
        "parking", "parking meter", "parking garage", "valet", "toll",
        "toll road", "toll bridge", "ezpass", "fastrak", "sunpass",
        "shuttle", "bike share", "citibike", "lime scooter", "bird scooter",
    ],
    "Healthcare": [
        "doctor", "hospital", "clinic", "pharmacy", "medical", "dentist",
        "dental", "optometry", "prescription", "medication",
        "cvs", "walgreens", "rite aid", "urgent care", "emergency room", "copay",
    ],
    "Insurance": [
        "insurance", "premium", "policy", "auto insurance",
        "car insurance", "home insurance", "health insurance", "life insurance",
        "renters insurance", "umbrella policy",
    ],
    "Utilities": [
        "electric", "electricity", "gas bill", "water bill", "sewer", "trash",
        "internet", "cable", "phone bill", "wireless", "cell phone",
        "verizon", "at&t", "t-mobile", "comcast", "xfinity", "spectrum",
    ],
}

# Merchants whose name alone settles the category.
MERCHANT_PATTERNS: dict[str, str] = {
    "marriott": "Travel",
    "hilton": "Travel",
    "hyatt": "Travel",
    "sheraton": "Travel",
    "westin": "Travel",
    "delta air": "Travel",
    "united air": "Travel",
    "american air": "Travel",
    "southwest": "Travel",
    "uber": "Travel",
    "lyft": "Travel",
    "hertz": "Travel",
    "avis": "Travel",
    "airbnb": "Travel",
    "booking.com": "Travel",
    "expedia": "Travel",
    "mcdonald": "Dining",
    "starbucks": "Dining",
    "subway": "Dining",
    "chipotle": "Dining",
    "domino": "Dining",
    "pizza hut": "Dining",
    "taco bell": "Dining",
    "kfc": "Dining",
    "burger king": "Dining",
    "doordash": "Dining",
    "ubereats": "Dining",
    "uber eats": "Dining",
    "grubhub": "Dining",
    "whole foods": "Grocery",
    "trader joe": "Grocery",
    "safeway": "Grocery",
    "kroger": "Grocery",
    "publix": "Grocery",
    "costco": "Grocery",
    "sam's club": "Grocery",
    "walmart": "Grocery",
    "aldi": "Grocery",
    "shell": "Gas",
    "exxon": "Gas",
    "mobil": "Gas",
    "chevron": "Gas",
    "bp": "Gas",
    "texaco": "Gas",
    "citgo": "Gas",
    "sunoco": "Gas",
    "speedway": "Gas",
    "amzn": "Online",
    "amazon": "Online",
    "ebay": "Online",
    "paypal": "Online",
    "apple.com": "Online",
    "netflix": "Entertainment",
    "hulu": "Entertainment",
    "disney+": "Entertainment",
    "spotify": "Entertainment",
    "amc": "Entertainment",
    "regal": "Entertainment",
    "mta": "Transit",
    "bart": "Transit",
    "cvs": "Healthcare",
    "walgreens": "Healthcare",
}

# A merchant pattern is ignored when any of these words appear in the text,
# e.g. "subway fare" is transit, not the sandwich chain.
MERCHANT_EXCLUSIONS: dict[str, tuple[str, ...]] = {
    "subway": ("fare", "card", "metro", "transit", "station", "train", "ride"),
    "uber": ("eats",),
    "shell": ("seashell", "shells"),
}

# Single-word verbs that signal what kind of purchase is happening.
ACTION_VERBS: dict[str, str] = {
    "booking": "Travel",
    "book": "Travel",
    "booked": "Travel",
    "flying": "Travel",
    "fly": "Travel",
    "staying": "Travel",
    "renting": "Travel",
    "dining": "Dining",
    "eating": "Dining",
    "ate": "Dining",
    "ordering": "Dining",
    "filling": "Gas",
    "fueling": "Gas",
    "refueling": "Gas",
    "streaming": "Entertainment",
    "commute": "Transit",
    "commuting": "Transit",
    "riding": "Transit",
    "downloading": "Online",
    "stocking": "Grocery",
}

# Phrases that, right before a match, mark it as incidental to the purchase.
INCIDENTAL_MODIFIERS: tuple[str, ...] = ("listening to", "watching", "reading", "playing")
SETTING_MODIFIERS: tuple[str, ...] = ("during", "while", "on the way to", "on the way", "after", "before")
BOOSTING_MODIFIERS: tuple[str, ...] = ("at", "from", "for", "via")

MERCHANT_WEIGHT = 5.0
INCIDENTAL_FACTOR = 0.1
SETTING_FACTOR = 0.6
BOOSTING_FACTOR = 1.2
ALIGNED_VERB_FACTOR = 1.3
CONFLICTING_VERB_FACTOR = 0.7
VERB_WINDOW = 4
MODIFIER_GAP = 1

# Tie-breaker when two categories score the same.
CATEGORY_PRIORITY: dict[str, int] = {
    "Travel": 10,
    "Dining": 9,
    "Gas": 8,
    "Grocery": 7,
    "Entertainment": 6,
    "Online": 5,
    "Transit": 4,
    "Healthcare": 3,
    "Insurance": 2,
    "Utilities": 1,
}
