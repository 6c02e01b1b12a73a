from flightmap.ingestors.opensky import normalize_state
from flightmap.services.list_renderer import render_flight_cards


def test_cards_show_all_fields():
    flight = normalize_state(
        ["800c41", "AIC101 ", "India", None, None, 77.59461, 12.97162, 10668.0, False, 250.0, 270.0],
        0,
    )

    listing = render_flight_cards([flight])

    assert listing.heading == "1 Aircraft Detected"
    card = listing.cards[0]
    assert card.title == "AIC101"
    assert card.badge == "India"
    assert [(f.label, f.value) for f in card.fields] == [
        ("Altitude", "10668 m"),
        ("Speed", "900 km/h"),
        ("Heading", "270°"),
        ("Position", "12.9716, 77.5946"),
    ]


def test_empty_list():
    listing = render_flight_cards([])

    assert listing.heading == "0 Aircraft Detected"
    assert listing.cards == []
