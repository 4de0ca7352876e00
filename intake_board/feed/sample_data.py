"""
Static fallback dataset.
Shown whenever the live feed is unconfigured, empty or failing. Intake dates
are stored as offsets so the queue times stay realistic whenever it is shown.
"""
from datetime import datetime, timedelta
from typing import List

from intake_board.feed.base import FeedDocument

SAMPLE_TECHNICIANS = [
    {"id": "tec-01", "name": "Laura Diaz", "role": "technician",
     "skills": ["Apple", "MacBook", "Microsoldering"]},
    {"id": "tec-02", "name": "Carlos Perez", "role": "technician",
     "skills": ["Android", "Motherboards"]},
    {"id": "tec-03", "name": "Maria Torres", "role": "technician",
     "skills": ["Windows", "Gaming PC"]},
]

SAMPLE_ORDERS = [
    {
        "id": "ST-10234",
        "hours_ago": 3,
        "data": {
            "customer_name": "Javier Moreno",
            "device": {"brand": "MacBook Air", "model": "A1466",
                       "accessories_received": ["original charger"]},
            "status": "Intake",
            "priority": "high",
            "assigned_to_name": "Laura Diaz",
            "channel": "Counter",
            "tags": ["no power", "water damage"],
            "photos": ["front.jpg", "back.jpg", "ports.jpg", "board.jpg"],
        },
    },
    {
        "id": "ST-10235",
        "hours_ago": 4.5,
        "data": {
            "customer_name": "Lucia Fernandez",
            "device": {"brand": "Samsung", "model": "Galaxy S21",
                       "accessories_received": ["case", "usb cable"]},
            "status": "Diagnosis",
            "priority": "medium",
            "assigned_to_name": "Carlos Perez",
            "channel": "WhatsApp",
            "tags": ["not charging"],
            "photos": ["front.jpg", "back.jpg", "port.jpg"],
        },
    },
    {
        "id": "ST-10236",
        "hours_ago": 2,
        "data": {
            "customer_name": "Miguel Angel Soto",
            "device": {"brand": "Lenovo", "model": "Legion 5",
                       "accessories_received": ["generic charger"]},
            "status": "Intake",
            "priority": "high",
            "assigned_to_name": "Maria Torres",
            "channel": "Email",
            "tags": ["slow"],
            "photos": ["front.jpg", "back.jpg"],
        },
    },
    {
        "id": "ST-10237",
        "hours_ago": 5,
        "data": {
            "customer_name": "Veronica Castillo",
            "device": {"brand": "iPhone", "model": "13",
                       "accessories_received": ["box", "earphones"]},
            "status": "Diagnosis",
            "priority": "high",
            "assigned_to_name": "Laura Diaz",
            "channel": "Counter",
            "tags": ["broken screen"],
            "photos": ["front.jpg", "back.jpg", "screen.jpg", "frame.jpg", "box.jpg"],
        },
    },
    {
        "id": "ST-10238",
        "hours_ago": 16,
        "data": {
            "customer_name": "Jose Luis Rojas",
            "device": {"brand": "ASUS", "model": "TUF Gaming",
                       "accessories_received": ["original charger"]},
            "status": "Quote",
            "priority": "medium",
            "assigned_to_name": "Maria Torres",
            "channel": "Referred",
            "tags": ["no power"],
            "photos": ["front.jpg"],
        },
    },
    {
        "id": "ST-10239",
        "hours_ago": 1,
        "data": {
            "customer_name": "Andrea Ramirez",
            "device": {"brand": "iPad Pro", "model": "11\"",
                       "accessories_received": ["apple pencil"]},
            "status": "Intake",
            "priority": "low",
            "channel": "Counter",
            "tags": ["broken screen"],
            "photos": ["front.jpg", "back.jpg"],
        },
    },
]


class SampleData:
    """Provides the fallback snapshots in the same shape the feed delivers"""

    def order_documents(self, now: datetime) -> List[FeedDocument]:
        documents = []
        for sample in SAMPLE_ORDERS:
            intake_date = now - timedelta(hours=sample["hours_ago"])
            documents.append(FeedDocument(
                id=sample["id"],
                data={**sample["data"], "intake_date": intake_date.isoformat()},
            ))
        return documents

    def technician_documents(self) -> List[FeedDocument]:
        return [
            FeedDocument(id=entry["id"], data={k: v for k, v in entry.items() if k != "id"})
            for entry in SAMPLE_TECHNICIANS
        ]
