from marketplace.stats import ad_application_counts, calculate_pharmacy_stats, calculate_substitute_stats

ADS = [{"id": "a1", "status": "OPEN"}, {"id": "a2", "status": "OPEN"}, {"id": "a3", "status": "CLOSED"}]
APPS = [
    {"adId": "a1", "status": "PENDING"},
    {"adId": "a1", "status": "ACCEPTED"},
    {"adId": "a2", "status": "REJECTED"},
    {"adId": "a1", "status": "PENDING"},
]


def test_pharmacy_stats_counts_sum_up():
    s = calculate_pharmacy_stats(ADS, APPS)
    assert s == {
        "totalAds": 3,
        "activeAds": 2,
        "closedAds": 1,
        "totalApplications": 4,
        "pendingApplications": 2,
        "acceptedApplications": 1,
        "rejectedApplications": 1,
    }
    assert s["activeAds"] + s["closedAds"] == s["totalAds"]
    assert s["pendingApplications"] + s["acceptedApplications"] + s["rejectedApplications"] == s["totalApplications"]


def test_substitute_stats():
    s = calculate_substitute_stats(APPS, 7)
    assert s["totalApplications"] == 4
    assert s["pendingApplications"] == 2
    assert s["availableAds"] == 7
    assert calculate_substitute_stats([])["availableAds"] == 0


def test_empty_inputs():
    s = calculate_pharmacy_stats([], [])
    assert all(v == 0 for v in s.values())


def test_ad_application_counts():
    assert ad_application_counts("a1", APPS) == {"total": 3, "pending": 2, "accepted": 1}
    assert ad_application_counts("zz", APPS) == {"total": 0, "pending": 0, "accepted": 0}
