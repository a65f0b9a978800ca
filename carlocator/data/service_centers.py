"""Static catalog of service centers and pickup points."""

from carlocator.schemas.facilities import Facility
from carlocator.schemas.location import Coordinate


def _facility(
    id: str,
    name: str,
    address: str,
    city: str,
    lat: float,
    lng: float,
    kind: str,
    phone: str,
    hours: str,
) -> Facility:
    return Facility(
        id=id,
        name=name,
        address=address,
        city=city,
        position=Coordinate(lat=lat, lng=lng),
        kind=kind,
        phone=phone,
        hours=hours,
    )


SERVICE_CENTERS: tuple[Facility, ...] = (
    _facility(
        "delhi-okhla",
        "CARS24 Mega Service Hub - Okhla",
        "D-186, Okhla Industrial Area Phase 1, New Delhi",
        "New Delhi",
        28.53657, 77.26849,
        "service",
        "+91-11-4000-2424",
        "09:30 AM - 07:00 PM",
    ),
    _facility(
        "delhi-janakpuri",
        "CARS24 Delivery Center - Janakpuri",
        "B-1/2, Community Centre, Janakpuri, New Delhi",
        "New Delhi",
        28.62708, 77.08273,
        "pickup",
        "+91-11-4600-2424",
        "10:00 AM - 06:30 PM",
    ),
    _facility(
        "mumbai-andheri",
        "CARS24 Service Center - Andheri",
        "Unit 7, Marol Co-Op Industrial Estate, Andheri East, Mumbai",
        "Mumbai",
        19.10497, 72.8716,
        "service",
        "+91-22-3900-2424",
        "09:30 AM - 07:30 PM",
    ),
    _facility(
        "mumbai-nerul",
        "CARS24 Delivery Hub - Nerul",
        "Plot 10, Sector 19A, Near Nerul Railway Station, Navi Mumbai",
        "Mumbai",
        19.03302, 73.02966,
        "pickup",
        "+91-22-3700-2424",
        "10:00 AM - 06:00 PM",
    ),
    _facility(
        "bengaluru-krpuram",
        "CARS24 Flagship Store - KR Puram",
        "No. 54, Old Madras Road, KR Puram, Bengaluru",
        "Bengaluru",
        13.00787, 77.70349,
        "service",
        "+91-80-4500-2424",
        "09:00 AM - 08:00 PM",
    ),
    _facility(
        "bengaluru-btm",
        "CARS24 Pickup Point - BTM Layout",
        "17th Main Rd, BTM 2nd Stage, Bengaluru",
        "Bengaluru",
        12.91605, 77.61011,
        "pickup",
        "+91-80-4800-2424",
        "10:00 AM - 07:00 PM",
    ),
    _facility(
        "hyderabad-hitech",
        "CARS24 Service Hub - HITEC City",
        "1-90/2, Silicon Valley, Madhapur, Hyderabad",
        "Hyderabad",
        17.44774, 78.37665,
        "service",
        "+91-40-4700-2424",
        "09:30 AM - 07:00 PM",
    ),
    _facility(
        "hyderabad-banjara",
        "CARS24 Delivery Lounge - Banjara Hills",
        "Road Number 12, Banjara Hills, Hyderabad",
        "Hyderabad",
        17.41276, 78.43461,
        "pickup",
        "+91-40-4900-2424",
        "10:00 AM - 06:30 PM",
    ),
    _facility(
        "pune-hinjewadi",
        "CARS24 Service Center - Hinjewadi",
        "Survey 35/3, Rajiv Gandhi Infotech Park, Hinjewadi, Pune",
        "Pune",
        18.59177, 73.73828,
        "service",
        "+91-20-4600-2424",
        "09:30 AM - 07:00 PM",
    ),
    _facility(
        "pune-koregaon",
        "CARS24 Pickup Zone - Koregaon Park",
        "Lane 6, Koregaon Park, Pune",
        "Pune",
        18.53865, 73.89337,
        "pickup",
        "+91-20-4800-2424",
        "10:30 AM - 06:30 PM",
    ),
)
