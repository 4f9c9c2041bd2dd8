"""Example phrases per category, embedded once into the exemplar index."""

CATEGORY_EXEMPLARS: dict[str, list[tuple[str, float]]] = {
    "Travel": [
        ("hotel booking reservation", 1.0),
        ("flight airline ticket purchase", 1.0),
        ("uber lyft rideshare taxi ride", 0.9),
        ("rental car hertz enterprise avis", 0.9),
        ("vacation trip travel accommodation", 1.0),
        ("business trip conference hotel", 0.9),
        ("cruise ship vacation booking", 0.8),
        ("airbnb vrbo vacation rental", 0.9),
    ],
    "Dining": [
        ("restaurant dinner lunch meal", 1.0),
        ("takeout delivery food order", 1.0),
        ("coffee shop cafe starbucks dunkin", 0.9),
        ("bar drinks alcohol beverages", 0.8),
        ("pizza burger fast food drive thru", 0.9),
        ("doordash ubereats grubhub delivery", 1.0),
        ("grabbing a bite food purchase", 0.8),
        ("date night dinner romantic meal", 0.7),
    ],
    "Grocery": [
        ("grocery shopping supermarket store", 1.0),
        ("whole foods trader joes market", 1.0),
        ("food ingredients produce vegetables", 0.9),
        ("weekly grocery shopping trip", 1.0),
        ("household essentials cleaning supplies", 0.7),
        ("food shopping for family", 0.9),
        ("bulk shopping warehouse club", 0.8),
        ("farmers market fresh produce", 0.8),
    ],
    "Gas": [
        ("gas station fuel gasoline purchase", 1.0),
        ("shell chevron exxon bp mobil", 1.0),
        ("fill up tank petroleum diesel", 1.0),
        ("fuel for my vehicle car", 0.9),
        ("refueling stop road trip", 0.8),
        ("electric vehicle charging station", 0.8),
    ],
    "Entertainment": [
        ("movie theater cinema tickets", 1.0),
        ("netflix hulu disney streaming", 1.0),
        ("concert show event tickets", 1.0),
        ("spotify apple music subscription", 0.9),
        ("gaming video games entertainment", 0.9),
        ("amusement park theme park", 0.8),
        ("weekend entertainment activities", 0.7),
    ],
    "Online": [
        ("amazon online shopping purchase", 1.0),
        ("ebay marketplace online auction", 0.9),
        ("digital download software app", 0.9),
        ("app store google play purchase", 0.9),
        ("online retail internet shopping", 1.0),
        ("internet purchase web order", 0.9),
    ],
    "Transit": [
        ("public transportation metro subway", 1.0),
        ("subway fare metrocard transit", 1.0),
        ("bus ticket transit pass", 1.0),
        ("parking meter toll road fee", 0.9),
        ("commuter rail train ticket", 0.9),
        ("public transport daily commute", 0.8),
    ],
    "Healthcare": [
        ("doctor medical appointment visit", 1.0),
        ("pharmacy prescription medicine drug", 1.0),
        ("dental dentist checkup cleaning", 1.0),
        ("hospital clinic medical care", 1.0),
        ("medical supplies equipment", 0.7),
    ],
    "Insurance": [
        ("auto insurance premium payment", 1.0),
        ("home renters insurance policy", 1.0),
        ("life insurance monthly premium", 0.9),
    ],
    "Utilities": [
        ("electric bill electricity payment", 1.0),
        ("gas bill natural gas utility", 1.0),
        ("water sewer utility bill", 1.0),
        ("internet cable phone service", 0.9),
        ("wireless cellular mobile phone", 0.9),
    ],
}
