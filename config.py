from decouple import config


# Tariff (Rwandan Francs)
HOURLY_RATE = config("HOURLY_RATE", default=500, cast=int)
MIN_FEE = config("MIN_FEE", default=300, cast=int)

# Facility provisioning
INITIAL_SLOT_COUNT = config("INITIAL_SLOT_COUNT", default=24, cast=int)
SLOT_LABEL_PREFIX = config("SLOT_LABEL_PREFIX", default="A")

# Persistence: number of pending mutations before state is written
STATE_SAVE_BATCH = config("STATE_SAVE_BATCH", default=1, cast=int)

# Insights collaborator
RECENT_TRANSACTIONS = config("RECENT_TRANSACTIONS", default=10, cast=int)
INSIGHTS_API_URL = config(
    "INSIGHTS_API_URL",
    default="https://generativelanguage.googleapis.com/v1beta/models",
)
INSIGHTS_API_KEY = config("INSIGHTS_API_KEY", default="")
INSIGHTS_MODEL = config("INSIGHTS_MODEL", default="gemini-2.0-flash")
INSIGHTS_TIMEOUT = config("INSIGHTS_TIMEOUT", default=12, cast=int)

# Receipt QR code
QR_BOX_SIZE = config("QR_BOX_SIZE", default=10, cast=int)
QR_BORDER = config("QR_BORDER", default=4, cast=int)

FACILITY_INFO = {
    "name": config("FACILITY_NAME", default="SmartPark Rubavu"),
    "district": config("FACILITY_DISTRICT", default="Rubavu"),
    "province": config("FACILITY_PROVINCE", default="Western Province"),
    "country": config("FACILITY_COUNTRY", default="Rwanda"),
    "contact": config("FACILITY_CONTACT", default="+250 788 000 000"),
}
