"""Generate a small Reuters-21578 style collection for the examples."""

import random
from datetime import datetime, timedelta
from pathlib import Path
from xml.sax.saxutils import escape

TOPICS = ["grain", "wheat", "corn", "crude", "money-fx", "trade", "interest", "earn", "acq"]
PLACES = ["usa", "uk", "japan", "west-germany", "canada", "france", "brazil"]
ORGS = ["opec", "ec", "imf", "gatt"]

HEADLINES = {
    "grain": "GRAIN SHIPMENTS {direction} IN WEEK",
    "wheat": "WHEAT EXPORT INSPECTIONS {direction}",
    "corn": "CORN FUTURES {direction} ON WEATHER",
    "crude": "CRUDE OIL PRICES {direction}",
    "money-fx": "DOLLAR {direction} AGAINST YEN",
    "trade": "TRADE DEFICIT {direction}",
    "interest": "RATES {direction} AFTER FED MOVE",
    "earn": "QUARTERLY EARNINGS {direction}",
    "acq": "MERGER TALKS {direction}",
}

BODIES = {
    "grain": "Grain inspections for export totalled {amount} tonnes, {direction} from the prior week.",
    "wheat": "Wheat export inspections reached {amount} tonnes, officials said.",
    "corn": "Corn futures moved {direction} as traders watched weather in the midwest.",
    "crude": "Oil prices moved {direction} to {amount} dlrs a barrel in quiet trading.",
    "money-fx": "The dollar moved {direction} in active trading, dealers said.",
    "trade": "The trade deficit was {amount} mln dlrs, the department said.",
    "interest": "Prime rates were {direction} after the central bank decision.",
    "earn": "Shr profit {amount} cts vs loss, revenues {direction}.",
    "acq": "The company said merger talks were {direction} after the offer of {amount} dlrs per share.",
}


def generate_record(new_id: int, date: datetime, rng: random.Random) -> str:
    """Generate one REUTERS record."""
    topics = rng.sample(TOPICS, k=rng.randint(0, 2))
    places = rng.sample(PLACES, k=rng.randint(1, 2))
    orgs = rng.sample(ORGS, k=rng.randint(0, 1))
    direction = rng.choice(["higher", "lower", "steady"])
    amount = rng.randint(10, 9000)

    main_topic = topics[0] if topics else rng.choice(TOPICS)
    title = HEADLINES[main_topic].format(direction=direction.upper())
    body = BODIES[main_topic].format(direction=direction, amount=amount)

    def items(values):
        return "".join(f"<D>{escape(v)}</D>" for v in values)

    return (
        f'<REUTERS TOPICS="{"YES" if topics else "NO"}" '
        f'LEWISSPLIT="{rng.choice(["TRAIN", "TEST"])}" '
        f'CGISPLIT="TRAINING-SET" OLDID="{new_id + 5000}" NEWID="{new_id}">\n'
        f"<DATE>{date.strftime('%d-%b-%Y %H:%M:%S.00').upper()}</DATE>\n"
        f"<TOPICS>{items(topics)}</TOPICS>\n"
        f"<PLACES>{items(places)}</PLACES>\n"
        f"<ORGS>{items(orgs)}</ORGS>\n"
        f'<TEXT TYPE="NORM"><TITLE>{escape(title)}</TITLE>'
        f"<BODY>{escape(body)}</BODY></TEXT>\n"
        f"</REUTERS>"
    )


def generate_collection(count: int = 200, seed: int = 42) -> str:
    """Generate the XML text of a collection with count records."""
    rng = random.Random(seed)
    start = datetime(1987, 3, 1, 9, 0, 0)

    records = [
        generate_record(i + 1, start + timedelta(minutes=7 * i), rng)
        for i in range(count)
    ]
    return '<?xml version="1.0" encoding="UTF-8"?>\n<LEWIS>\n' + "\n".join(records) + "\n</LEWIS>\n"


def save_sample_collection(path: Path, count: int = 200) -> Path:
    """Write a generated collection to path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(generate_collection(count), encoding="utf-8")
    return path


if __name__ == "__main__":
    target = save_sample_collection(Path(__file__).parent / "reut2-sample.xml")
    print(f"Sample collection written to {target}")
