# Seed data: twelve demo grievances for the reviewer dashboard
#
# Coverage matrix:
#   Urgency   : high (4), medium (5), low (3)
#   Categories: environmental (4), land_dispute (2), labor_issue (3),
#               health_safety (2), other (1)
#   Location  : browser_auto (6), manual (6)
#   Special   : anonymous submitters, Afrikaans submissions

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from grievance_portal.config import GRIEVANCE_TABLE, now_utc

# ---------------------------------------------------------------------------
# Grievance records (days_ago spreads created_at over the last two months)
# ---------------------------------------------------------------------------
SAMPLE_GRIEVANCES = [
    {"submitter_name": "Thabo M.", "location_text": "Site 3 Processing Plant",
     "latitude": -25.7461, "longitude": 28.1881, "location_method": "browser_auto",
     "content": "Water contamination near processing plant affecting our village water supply. Children getting sick.",
     "category": "environmental", "urgency": "high", "submitted_language": "English", "days_ago": 2},

    {"submitter_name": "Sarah K.", "location_text": "Worker Camp B",
     "latitude": None, "longitude": None, "location_method": "manual",
     "content": "Safety equipment shortage in underground section. No helmets for new workers.",
     "category": "health_safety", "urgency": "medium", "submitted_language": "English", "days_ago": 5},

    {"submitter_name": None, "location_text": "Village 2",
     "latitude": -25.7523, "longitude": 28.1965, "location_method": "browser_auto",
     "content": "Land compensation not received as promised six months ago. Need urgent resolution.",
     "category": "land_dispute", "urgency": "high", "submitted_language": "English", "days_ago": 8},

    {"submitter_name": "Piet V.", "location_text": "Terrein 5",
     "latitude": None, "longitude": None, "location_method": "manual",
     "content": "Stof van ontploffings beïnvloed ons gewasgeskiedenis. Verlies van oeste.",
     "category": "environmental", "urgency": "medium", "submitted_language": "Afrikaans", "days_ago": 12},

    {"submitter_name": "Joseph N.", "location_text": "Processing Area North",
     "latitude": -25.7445, "longitude": 28.1912, "location_method": "browser_auto",
     "content": "Wage discrepancies for contract workers. Some workers paid less than agreed rates.",
     "category": "labor_issue", "urgency": "medium", "submitted_language": "English", "days_ago": 15},

    {"submitter_name": "Maria S.", "location_text": "Residential Zone C",
     "latitude": -25.7489, "longitude": 28.1834, "location_method": "browser_auto",
     "content": "Cracked walls in houses from blasting vibrations. Need structural assessment.",
     "category": "environmental", "urgency": "medium", "submitted_language": "English", "days_ago": 20},

    {"submitter_name": None, "location_text": "Site 7",
     "latitude": None, "longitude": None, "location_method": "manual",
     "content": "Discrimination in promotion processes. Local workers overlooked for skilled positions.",
     "category": "labor_issue", "urgency": "low", "submitted_language": "English", "days_ago": 25},

    {"submitter_name": "Sipho D.", "location_text": "Village 4 Sacred Site",
     "latitude": -25.7556, "longitude": 28.2001, "location_method": "browser_auto",
     "content": "Sacred site damaged by new road construction. Community elders very concerned.",
     "category": "land_dispute", "urgency": "high", "submitted_language": "English", "days_ago": 30},

    {"submitter_name": "Anna B.", "location_text": "Kamp C",
     "latitude": None, "longitude": None, "location_method": "manual",
     "content": "Onvoldoende toilet fasiliteite vir vroulike werkers. Sanitasie probleme.",
     "category": "health_safety", "urgency": "medium", "submitted_language": "Afrikaans", "days_ago": 35},

    {"submitter_name": "John M.", "location_text": "Mine Office Area",
     "latitude": -25.7402, "longitude": 28.1867, "location_method": "browser_auto",
     "content": "Noise pollution from 24-hour operations affecting sleep. Community health concern.",
     "category": "environmental", "urgency": "low", "submitted_language": "English", "days_ago": 42},

    {"submitter_name": "Grace N.", "location_text": "Village 1 Access Road",
     "latitude": None, "longitude": None, "location_method": "manual",
     "content": "Access road damaged, emergency vehicles cannot reach community. Urgent repair needed.",
     "category": "other", "urgency": "high", "submitted_language": "English", "days_ago": 48},

    {"submitter_name": "Daniel P.", "location_text": "Site 9 Training Center",
     "latitude": None, "longitude": None, "location_method": "manual",
     "content": "Training program promised but not delivered. Workers need skills development.",
     "category": "labor_issue", "urgency": "low", "submitted_language": "English", "days_ago": 55},
]


def sample_rows(now: Optional[datetime] = None) -> List[Dict]:
    """Rows ready for ``store.insert``, with backdated ``created_at``."""
    now = now or now_utc()
    rows = []
    for g in SAMPLE_GRIEVANCES:
        row = {k: v for k, v in g.items() if k != "days_ago"}
        row["submitter_contact"] = None
        row["status"] = "new"
        row["created_at"] = now - timedelta(days=g["days_ago"])
        row["updated_at"] = row["created_at"]
        rows.append(row)
    return rows

# ---------------------------------------------------------------------------
# Import function
# ---------------------------------------------------------------------------
def import_grievances(store, table: str = GRIEVANCE_TABLE) -> List[Dict]:
    """Insert all sample grievances in one call. Returns the inserted rows."""
    return store.insert(table, sample_rows())
