# Centralized collection names and enumerations to prevent drift.

COL_SYSTEM = "system"

COL_USERS = "users"  # users/{uid}
COL_PHARMACIES = "pharmacies"
COL_SUBSTITUTES = "substitutes"  # substitutes/{uid}
COL_ADS = "ads"
COL_APPLICATIONS = "applications"


ROLE_PHARMACY = "PHARMACY"
ROLE_SUBSTITUTE = "SUBSTITUTE"
ROLES = (ROLE_PHARMACY, ROLE_SUBSTITUTE)

QUALIFICATIONS = ("GYÓGYSZERÉSZ", "SZAKASSZISZTENS", "ASSZISZTENS")

AD_OPEN = "OPEN"
AD_CLOSED = "CLOSED"

APP_PENDING = "PENDING"
APP_ACCEPTED = "ACCEPTED"
APP_REJECTED = "REJECTED"

SALARY_HOURLY = "órabér"
SALARY_DAILY = "napidíj"
SALARY_TYPES = (SALARY_HOURLY, SALARY_DAILY)

SALARY_NET = "nettó"
SALARY_GROSS = "bruttó"
SALARY_BASES = (SALARY_NET, SALARY_GROSS)

SHIFT_TYPES = ("egész nap", "délelőtt", "délután")

# Budapest + the 19 counties.
REGIONS = (
    "Budapest",
    "Bács-Kiskun",
    "Baranya",
    "Békés",
    "Borsod-Abaúj-Zemplén",
    "Csongrád-Csanád",
    "Fejér",
    "Győr-Moson-Sopron",
    "Hajdú-Bihar",
    "Heves",
    "Jász-Nagykun-Szolnok",
    "Komárom-Esztergom",
    "Nógrád",
    "Pest",
    "Somogy",
    "Szabolcs-Szatmár-Bereg",
    "Tolna",
    "Vas",
    "Veszprém",
    "Zala",
)
